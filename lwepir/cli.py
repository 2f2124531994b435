"""Command-line and environment configuration of PIR parameters."""

from __future__ import annotations

import argparse
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

__all__ = [
    "CLIFlags",
    "parse_cli_flags",
    "parse_from_env",
    "parse_exp_to_usize",
    "parse_val_to_bool",
]

_UNSIGNED = re.compile(r"\+?[0-9]+")
_MAX_EXP = 31


@dataclass(frozen=True)
class CLIFlags:
    """Parameters selecting the size and shape of a PIR database."""

    m: int
    lwe_dim: int
    plaintext_bits: int
    elem_size: int
    offline: bool
    keyword: bool


def _parse_unsigned(v: str, what: str = "value") -> int:
    """Parse a non-negative decimal integer written without spaces."""
    if not _UNSIGNED.fullmatch(v):
        raise ValueError(f"invalid {what}: {v!r} is not an unsigned integer")
    return int(v)


def parse_exp_to_usize(v: str) -> int:
    """Return ``2**v`` for a decimal exponent that keeps the result below 2**32."""
    exp = _parse_unsigned(v, "exponent")
    if exp > _MAX_EXP:
        raise OverflowError(f"2**{exp} does not fit in an unsigned 32-bit integer")
    return 1 << exp


def parse_val_to_bool(v: str) -> bool:
    """Parse exactly ``"true"`` or ``"false"``."""
    if v == "true":
        return True
    if v == "false":
        return False
    raise ValueError(f"invalid boolean: {v!r}, expected 'true' or 'false'")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="PIR example", description="Flags for setting PIR parameters"
    )
    parser.add_argument("-V", "--version", action="version", version="%(prog)s 0.0.1")
    parser.add_argument(
        "-m", "--matrix_height", default="16", help="Log2 of height of DB matrix"
    )
    parser.add_argument(
        "-e", "--ele_size", default="13", help="Log2 of element bit length"
    )
    parser.add_argument(
        "-p",
        "--plaintext_bits",
        default="10",
        help="Number of plaintext bits encoded in each entry of DB matrix",
    )
    parser.add_argument("-d", "--dim", default="2048", help="LWE dimension")
    return parser


def parse_cli_flags(argv: Optional[Sequence[str]] = None) -> CLIFlags:
    """Parse PIR parameters from command-line arguments."""
    args = _build_parser().parse_args(argv)
    return CLIFlags(
        m=parse_exp_to_usize(args.matrix_height),
        lwe_dim=_parse_unsigned(args.dim, "LWE dimension"),
        plaintext_bits=_parse_unsigned(args.plaintext_bits, "plaintext bits"),
        elem_size=parse_exp_to_usize(args.ele_size),
        offline=True,
        keyword=True,
    )


def _require(environ: Mapping[str, str], name: str) -> str:
    try:
        return environ[name]
    except KeyError:
        raise KeyError(f"environment variable {name} is not set") from None


def parse_from_env(environ: Optional[Mapping[str, str]] = None) -> CLIFlags:
    """Read PIR parameters from environment variables."""
    env = os.environ if environ is None else environ
    return CLIFlags(
        m=parse_exp_to_usize(_require(env, "PIR_NUMBER_OF_ELEMENTS_EXP")),
        lwe_dim=_parse_unsigned(_require(env, "PIR_LWE_DIM"), "PIR_LWE_DIM"),
        plaintext_bits=_parse_unsigned(
            _require(env, "PIR_PLAINTEXT_BITS"), "PIR_PLAINTEXT_BITS"
        ),
        elem_size=_parse_unsigned(
            _require(env, "PIR_ELEM_SIZE_BITS"), "PIR_ELEM_SIZE_BITS"
        ),
        offline=parse_val_to_bool(_require(env, "BENCH_DB_GEN")),
        keyword=parse_val_to_bool(_require(env, "BENCH_KV")),
    )