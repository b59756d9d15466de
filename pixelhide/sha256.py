"""SHA-256, HMAC-SHA256 and PBKDF2-HMAC-SHA256."""

import itertools
import math
import struct

from .utils import rotr

_MASK = 0xFFFFFFFF


def _primes(count: int) -> list[int]:
    found: list[int] = []
    for candidate in itertools.count(2):
        if all(candidate % p for p in found if p * p <= candidate):
            found.append(candidate)
            if len(found) == count:
                return found
    return found


def _icbrt(n: int) -> int:
    x = 1 << ((n.bit_length() + 2) // 3)
    while True:
        y = (2 * x + n // (x * x)) // 3
        if y >= x:
            return x
        x = y


# Fractional bits of the square roots (initial state) and cube roots (round
# constants) of the first primes.
_INITIAL = tuple(math.isqrt(p << 64) & _MASK for p in _primes(8))
_K = tuple(_icbrt(p << 96) & _MASK for p in _primes(64))


def _compress(state: tuple[int, ...], chunk: bytes) -> tuple[int, ...]:
    w = list(struct.unpack(">16I", chunk))
    for i in range(16, 64):
        s0 = rotr(w[i - 15], 7) ^ rotr(w[i - 15], 18) ^ (w[i - 15] >> 3)
        s1 = rotr(w[i - 2], 17) ^ rotr(w[i - 2], 19) ^ (w[i - 2] >> 10)
        w.append((w[i - 16] + s0 + w[i - 7] + s1) & _MASK)

    a, b, c, d, e, f, g, h = state
    for k, wi in zip(_K, w):
        s1 = rotr(e, 6) ^ rotr(e, 11) ^ rotr(e, 25)
        ch = (e & f) ^ (~e & g)
        temp1 = (h + s1 + ch + k + wi) & _MASK
        s0 = rotr(a, 2) ^ rotr(a, 13) ^ rotr(a, 22)
        maj = (a & b) ^ (a & c) ^ (b & c)
        temp2 = (s0 + maj) & _MASK
        h, g, f, e, d, c, b, a = g, f, e, (d + temp1) & _MASK, c, b, a, (temp1 + temp2) & _MASK

    return tuple((x + y) & _MASK for x, y in zip(state, (a, b, c, d, e, f, g, h)))


class SHA256:
    """Incremental SHA-256 hash; ``digest`` may be called at any time."""

    block_size = 64
    digest_size = 32

    def __init__(self, data: bytes = b"") -> None:
        self._state = _INITIAL
        self._buffer = b""
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the hash."""
        data = bytes(data)
        self._length += len(data)
        buffer = self._buffer + data
        full = len(buffer) - len(buffer) % 64
        state = self._state
        for start in range(0, full, 64):
            state = _compress(state, buffer[start:start + 64])
        self._state = state
        self._buffer = buffer[full:]

    def digest(self) -> bytes:
        """Return the 32-byte hash of everything fed so far."""
        padding_len = (55 - len(self._buffer)) % 64
        tail = (
            self._buffer
            + b"\x80"
            + bytes(padding_len)
            + struct.pack(">Q", (self._length * 8) & 0xFFFFFFFFFFFFFFFF)
        )
        state = self._state
        for start in range(0, len(tail), 64):
            state = _compress(state, tail[start:start + 64])
        return struct.pack(">8I", *state)

    def hexdigest(self) -> str:
        """Return the hash as lower-case hexadecimal text."""
        return self.digest().hex()


def hmac_sha256(data: bytes, key: bytes) -> bytes:
    """Return the HMAC-SHA256 of ``data`` under ``key``."""
    key = bytes(key)
    if len(key) > 64:
        key = SHA256(key).digest()
    key = key.ljust(64, b"\x00")
    ipad = bytes(b ^ 0x36 for b in key)
    opad = bytes(b ^ 0x5C for b in key)
    inner = SHA256(ipad)
    inner.update(data)
    outer = SHA256(opad)
    outer.update(inner.digest())
    return outer.digest()


def pbkdf2_hmac_sha256(password: bytes, salt: bytes, length: int, rounds: int) -> bytes:
    """Derive ``length`` bytes from ``password`` and ``salt`` with PBKDF2-HMAC-SHA256.

    A round count of zero behaves like one.
    """
    if length < 0:
        raise ValueError("length must not be negative")
    password = bytes(password)
    salt = bytes(salt)
    output = bytearray()
    for count in itertools.count(1):
        if len(output) >= length:
            break
        u = hmac_sha256(salt + struct.pack(">I", count & _MASK), password)
        block = int.from_bytes(u, "big")
        for _ in range(1, rounds):
            u = hmac_sha256(u, password)
            block ^= int.from_bytes(u, "big")
        output += block.to_bytes(32, "big")
    return bytes(output[:length])