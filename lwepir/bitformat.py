"""Conversions between u32 values, little-endian bit lists, bytes and base64."""

import base64
import hashlib
import struct
from typing import List, Sequence, Tuple

from .errors import UnexpectedInputSizeError

_U32_BYTES = 4


def u32_to_bits_le(x: int, bit_len: int) -> List[bool]:
    """Return the lowest ``bit_len`` bits of ``x``, least significant first."""
    if not 0 <= bit_len <= 32:
        raise UnexpectedInputSizeError(f"cannot take {bit_len} bits of a u32")
    return [bool((x >> i) & 1) for i in range(bit_len)]


def bits_to_bytes_le(bits: Sequence[bool]) -> bytes:
    """Pack little-endian bits into bytes, zero-padding the last byte."""
    out = bytearray((len(bits) + 7) // 8)
    for i, bit in enumerate(bits):
        if bit:
            out[i // 8] |= 1 << (i % 8)
    return bytes(out)


def bytes_to_bits_le(data: bytes) -> List[bool]:
    """Unpack bytes into bits, least significant bit of each byte first."""
    return [bool((byte >> i) & 1) for byte in data for i in range(8)]


def u32_sized_bytes_from_vec(data: bytes) -> bytes:
    """Return ``data`` if it is exactly four bytes long."""
    data = bytes(data)
    if len(data) != _U32_BYTES:
        raise UnexpectedInputSizeError(f"Unexpected vector size: {list(data)!r}")
    return data


def bits_to_u32_le(bits: Sequence[bool]) -> int:
    """Interpret at most 32 little-endian bits as an unsigned integer."""
    data = bits_to_bytes_le(bits)
    if len(data) > _U32_BYTES:
        raise UnexpectedInputSizeError(
            f"bytes are too long to parse as u16, length: {len(data)}"
        )
    padded = data + bytes(_U32_BYTES - len(data))
    return int.from_bytes(u32_sized_bytes_from_vec(padded), "little")


def bytes_from_u32_slice(v: Sequence[int], entry_bit_len: int, total_bit_len: int) -> bytes:
    """Join the low bits of each value into bytes.

    Every value contributes ``entry_bit_len`` bits except the last, which
    contributes ``total_bit_len % entry_bit_len`` bits.
    """
    remainder = total_bit_len % entry_bit_len
    bits: List[bool] = []
    last = len(v) - 1
    for i, value in enumerate(v):
        bits.extend(u32_to_bits_le(int(value), remainder if i == last else entry_bit_len))
    return bits_to_bytes_le(bits)


def base64_from_u32_slice(v: Sequence[int], entry_bit_len: int, total_bit_len: int) -> str:
    """Like :func:`bytes_from_u32_slice`, encoded as standard base64."""
    return base64.b64encode(bytes_from_u32_slice(v, entry_bit_len, total_bit_len)).decode("ascii")


def sha256_into_u64_sized(data: bytes) -> Tuple[int, int, int, int]:
    """Hash ``data`` with SHA-256 and split the digest into four little-endian u64."""
    digest = hashlib.sha256(bytes(data)).digest()
    if len(digest) != 32:
        raise UnexpectedInputSizeError(
            f"Digest should be 32 bytes, but instead it is {len(digest)} bytes long"
        )
    return struct.unpack("<4Q", digest)