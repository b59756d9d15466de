"""Small helpers shared by the cipher, hash and image modules."""


def data_size(size: int) -> str:
    """Render a byte count as B, KiB or MiB, the latter two with two decimals."""
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} MiB"
    if size >= 1024:
        return f"{size / 1024:.2f} KiB"
    return f"{size} B"


def rotl(value: int, shift: int, bits: int = 32) -> int:
    """Rotate the low ``bits`` bits of ``value`` left by ``shift`` places."""
    if bits <= 0:
        raise ValueError("bit width must be positive")
    mask = (1 << bits) - 1
    value &= mask
    shift %= bits
    return ((value << shift) | (value >> (bits - shift))) & mask


def rotr(value: int, shift: int, bits: int = 32) -> int:
    """Rotate the low ``bits`` bits of ``value`` right by ``shift`` places."""
    if bits <= 0:
        raise ValueError("bit width must be positive")
    mask = (1 << bits) - 1
    value &= mask
    shift %= bits
    return ((value >> shift) | (value << (bits - shift))) & mask