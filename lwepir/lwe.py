"""Constants of the LWE setup: modulus, plaintext space and rounding."""

MODULUS = 1 << 32
_U32_MASK = MODULUS - 1


def get_plaintext_size(plaintext_bits: int) -> int:
    """Return the modulus of the plaintext space, 2**plaintext_bits."""
    if not 0 <= plaintext_bits < 32:
        raise ValueError(f"plaintext_bits must lie in [0, 32), got {plaintext_bits}")
    return 1 << plaintext_bits


def get_rounding_factor(plaintext_bits: int) -> int:
    """Return the scaling value that marks the queried row."""
    return (MODULUS // get_plaintext_size(plaintext_bits)) & _U32_MASK


def get_rounding_floor(plaintext_bits: int) -> int:
    """Return the bound above which a scaled remainder rounds up."""
    return get_rounding_factor(plaintext_bits) // 2