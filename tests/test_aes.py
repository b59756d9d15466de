import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pixelhide.aes import AES

KEY = bytes(range(32))
IV = bytes(16)

keys = st.binary(min_size=32, max_size=32)
ivs = st.binary(min_size=16, max_size=16)
blocks = st.binary(min_size=16, max_size=16)


def test_fips197_aes256_vector():
    cipher = AES(KEY, IV)
    plaintext = bytes.fromhex("00112233445566778899aabbccddeeff")
    ciphertext = cipher.encrypt_block(plaintext)
    assert ciphertext.hex() == "8ea2b7ca516745bfeafc49904b496089"
    assert cipher.decrypt_block(ciphertext) == plaintext


@settings(max_examples=25)
@given(keys, blocks)
def test_block_round_trip(key, block):
    cipher = AES(key, IV)
    assert cipher.decrypt_block(cipher.encrypt_block(block)) == block


@settings(max_examples=25)
@given(keys, ivs, st.binary(max_size=96).map(lambda b: b[: len(b) - len(b) % 16]))
def test_cbc_round_trip(key, iv, data):
    encrypted = AES(key, iv).cbc_encrypt(data)
    assert len(encrypted) == len(data)
    assert AES(key, iv).cbc_decrypt(encrypted) == data


def test_cbc_first_block_is_block_of_xored_input():
    cipher = AES(KEY, IV)
    iv = bytes(range(16, 32))
    block = bytes(range(100, 116))
    mixed = bytes(a ^ b for a, b in zip(block, iv))
    assert AES(KEY, iv).cbc_encrypt(block) == cipher.encrypt_block(mixed)


def test_cbc_encrypt_chains_across_calls():
    data = bytes(range(64))
    whole = AES(KEY, IV).cbc_encrypt(data)
    split = AES(KEY, IV)
    assert split.cbc_encrypt(data[:32]) + split.cbc_encrypt(data[32:]) == whole


def test_cbc_decrypt_chains_across_calls():
    data = bytes(range(48))
    encrypted = AES(KEY, IV).cbc_encrypt(data)
    split = AES(KEY, IV)
    assert split.cbc_decrypt(encrypted[:16]) + split.cbc_decrypt(encrypted[16:]) == data


def test_iv_updates_to_last_ciphertext_block():
    cipher = AES(KEY, IV)
    encrypted = cipher.cbc_encrypt(bytes(32))
    assert cipher.iv == encrypted[-16:]


def test_identical_blocks_encrypt_differently_in_cbc():
    encrypted = AES(KEY, IV).cbc_encrypt(bytes(32))
    assert encrypted[:16] != encrypted[16:]


def test_empty_data():
    cipher = AES(KEY, IV)
    assert cipher.cbc_encrypt(b"") == b""
    assert cipher.iv == IV


@pytest.mark.parametrize("key", [b"", bytes(16), bytes(31), bytes(33)])
def test_bad_key_length(key):
    with pytest.raises(ValueError):
        AES(key, IV)


@pytest.mark.parametrize("iv", [b"", bytes(15), bytes(17)])
def test_bad_iv_length(iv):
    with pytest.raises(ValueError):
        AES(KEY, iv)


def test_cbc_rejects_unpadded_data():
    cipher = AES(KEY, IV)
    with pytest.raises(ValueError):
        cipher.cbc_encrypt(bytes(17))
    with pytest.raises(ValueError):
        cipher.cbc_decrypt(bytes(15))


def test_block_rejects_wrong_size():
    cipher = AES(KEY, IV)
    with pytest.raises(ValueError):
        cipher.encrypt_block(bytes(15))
    with pytest.raises(ValueError):
        cipher.decrypt_block(bytes(32))