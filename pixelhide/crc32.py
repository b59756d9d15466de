"""CRC-32 checksum (IEEE 802.3, reflected polynomial 0xEDB88320)."""

_MASK = 0xFFFFFFFF
_POLYNOMIAL = 0xEDB88320


def _make_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ _POLYNOMIAL if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


_TABLE = _make_table()


class CRC32:
    """Incremental CRC-32 calculator."""

    def __init__(self, data: bytes = b"") -> None:
        self._state = _MASK
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the checksum."""
        state = self._state
        for byte in bytes(data):
            state = _TABLE[(state ^ byte) & 0xFF] ^ (state >> 8)
        self._state = state

    def checksum(self) -> int:
        """Return the checksum of everything fed so far."""
        return self._state ^ _MASK


def crc32(data: bytes) -> int:
    """Return the CRC-32 of ``data``."""
    return CRC32(data).checksum()