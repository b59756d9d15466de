"""AES-256 block cipher with CBC chaining."""

from .utils import rotl

BLOCK_SIZE = 16
KEY_SIZE = 32
_ROUNDS = 14


def _gmul(a: int, b: int) -> int:
    product = 0
    for _ in range(8):
        if b & 1:
            product ^= a
        high = a & 0x80
        a = (a << 1) & 0xFF
        if high:
            a ^= 0x1B
        b >>= 1
    return product


def _build_sboxes() -> tuple[tuple[int, ...], tuple[int, ...]]:
    sbox = [0] * 256
    inv = [0] * 256
    p = q = 1
    while True:
        p = (p ^ (p << 1) ^ (0x1B if p & 0x80 else 0)) & 0xFF
        q = (q ^ (q << 1)) & 0xFF
        q = (q ^ (q << 2)) & 0xFF
        q = (q ^ (q << 4)) & 0xFF
        if q & 0x80:
            q ^= 0x09
        value = q ^ rotl(q, 1, 8) ^ rotl(q, 2, 8) ^ rotl(q, 3, 8) ^ rotl(q, 4, 8) ^ 0x63
        sbox[p] = value
        inv[value] = p
        if p == 1:
            break
    sbox[0x00] = 0x63
    inv[0x63] = 0x00
    return tuple(sbox), tuple(inv)


_SBOX, _INV_SBOX = _build_sboxes()
_MUL2, _MUL3, _MUL9, _MUL11, _MUL13, _MUL14 = (
    tuple(_gmul(i, factor) for i in range(256)) for factor in (2, 3, 9, 11, 13, 14)
)
_RCON = (0,) + tuple(1 << 0 if i == 1 else 0 for i in range(1, 2))
_RCON = [0, 1]
for _ in range(2, 256):
    _RCON.append(_gmul(_RCON[-1], 2))
_RCON = tuple(_RCON)

_SHIFT_ROWS = (0, 5, 10, 15, 4, 9, 14, 3, 8, 13, 2, 7, 12, 1, 6, 11)
_INV_SHIFT_ROWS = (0, 13, 10, 7, 4, 1, 14, 11, 8, 5, 2, 15, 12, 9, 6, 3)


def _expand_key(key: bytes) -> list[tuple[int, ...]]:
    expanded = bytearray(key)
    rcon_index = 1
    while len(expanded) < (_ROUNDS + 1) * BLOCK_SIZE:
        c = len(expanded)
        word = list(expanded[c - 4:c])
        if c % 32 == 0:
            word = word[1:] + word[:1]
            word = [_SBOX[b] for b in word]
            word[0] ^= _RCON[rcon_index]
            rcon_index += 1
        elif c % 32 == 16:
            word = [_SBOX[b] for b in word]
        expanded.extend(expanded[c - 32 + a] ^ word[a] for a in range(4))
    return [tuple(expanded[r * 16:(r + 1) * 16]) for r in range(_ROUNDS + 1)]


def _add_round_key(state: list[int], round_key: tuple[int, ...]) -> list[int]:
    return [s ^ k for s, k in zip(state, round_key)]


def _mix_columns(state: list[int]) -> list[int]:
    out = []
    for c in range(0, 16, 4):
        a0, a1, a2, a3 = state[c:c + 4]
        out += (
            _MUL2[a0] ^ _MUL3[a1] ^ a2 ^ a3,
            a0 ^ _MUL2[a1] ^ _MUL3[a2] ^ a3,
            a0 ^ a1 ^ _MUL2[a2] ^ _MUL3[a3],
            _MUL3[a0] ^ a1 ^ a2 ^ _MUL2[a3],
        )
    return out


def _inverse_mix_columns(state: list[int]) -> list[int]:
    out = []
    for c in range(0, 16, 4):
        a0, a1, a2, a3 = state[c:c + 4]
        out += (
            _MUL14[a0] ^ _MUL11[a1] ^ _MUL13[a2] ^ _MUL9[a3],
            _MUL9[a0] ^ _MUL14[a1] ^ _MUL11[a2] ^ _MUL13[a3],
            _MUL13[a0] ^ _MUL9[a1] ^ _MUL14[a2] ^ _MUL11[a3],
            _MUL11[a0] ^ _MUL13[a1] ^ _MUL9[a2] ^ _MUL14[a3],
        )
    return out


def _xor(left: bytes, right: bytes) -> bytes:
    return bytes(a ^ b for a, b in zip(left, right))


class AES:
    """AES-256 with a 32-byte key and a running CBC initialisation vector.

    Never reuse an IV with the same key. Data for the CBC methods must be a
    multiple of 16 bytes; the IV carries over between calls.
    """

    def __init__(self, key: bytes, iv: bytes) -> None:
        key = bytes(key)
        iv = bytes(iv)
        if len(key) != KEY_SIZE:
            raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
        if len(iv) != BLOCK_SIZE:
            raise ValueError(f"iv must be {BLOCK_SIZE} bytes, got {len(iv)}")
        self._round_keys = _expand_key(key)
        self.iv = iv

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt one 16-byte block."""
        state = self._check_block(block)
        keys = self._round_keys
        state = _add_round_key(state, keys[0])
        for round_key in keys[1:_ROUNDS]:
            state = [_SBOX[state[i]] for i in _SHIFT_ROWS]
            state = _add_round_key(_mix_columns(state), round_key)
        state = [_SBOX[state[i]] for i in _SHIFT_ROWS]
        return bytes(_add_round_key(state, keys[_ROUNDS]))

    def decrypt_block(self, block: bytes) -> bytes:
        """Decrypt one 16-byte block."""
        state = self._check_block(block)
        keys = self._round_keys
        state = _add_round_key(state, keys[_ROUNDS])
        for round_key in reversed(keys[1:_ROUNDS]):
            state = [_INV_SBOX[state[i]] for i in _INV_SHIFT_ROWS]
            state = _inverse_mix_columns(_add_round_key(state, round_key))
        state = [_INV_SBOX[state[i]] for i in _INV_SHIFT_ROWS]
        return bytes(_add_round_key(state, keys[0]))

    def cbc_encrypt(self, data: bytes) -> bytes:
        """Encrypt ``data`` in CBC mode, continuing from the current IV."""
        data = self._check_multiple(data)
        iv = self.iv
        out = bytearray()
        for start in range(0, len(data), BLOCK_SIZE):
            iv = self.encrypt_block(_xor(data[start:start + BLOCK_SIZE], iv))
            out += iv
        self.iv = iv
        return bytes(out)

    def cbc_decrypt(self, data: bytes) -> bytes:
        """Decrypt ``data`` in CBC mode, continuing from the current IV."""
        data = self._check_multiple(data)
        iv = self.iv
        out = bytearray()
        for start in range(0, len(data), BLOCK_SIZE):
            block = data[start:start + BLOCK_SIZE]
            out += _xor(self.decrypt_block(block), iv)
            iv = block
        self.iv = iv
        return bytes(out)

    @staticmethod
    def _check_block(block: bytes) -> list[int]:
        block = bytes(block)
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
        return list(block)

    @staticmethod
    def _check_multiple(data: bytes) -> bytes:
        data = bytes(data)
        if len(data) % BLOCK_SIZE:
            raise ValueError(f"data length must be a multiple of {BLOCK_SIZE}")
        return data