"""AES-128-CBC helpers with PKCS#5 padding, as used by encrypted HLS segments."""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

BLOCK_SIZE = 16
_VALID_KEY_SIZES = (16, 24, 32)


def _prepare(key: bytes, iv: bytes) -> tuple[bytes, bytes]:
    key = bytes(key)
    if len(key) not in _VALID_KEY_SIZES:
        raise ValueError(f"invalid AES key size {len(key)}")
    iv = bytes(iv) if iv else key
    iv = iv[:BLOCK_SIZE]
    if len(iv) < BLOCK_SIZE:
        raise ValueError(f"IV must be at least {BLOCK_SIZE} bytes, got {len(iv)}")
    return key, iv


def _pad(data: bytes) -> bytes:
    padding = BLOCK_SIZE - len(data) % BLOCK_SIZE
    return data + bytes([padding]) * padding


def _unpad(data: bytes) -> bytes:
    if not data:
        raise ValueError("cannot remove padding from empty data")
    padding = data[-1]
    if padding > len(data):
        raise ValueError(f"invalid padding length {padding}")
    return data[: len(data) - padding]


def aes128_encrypt(data: bytes, key: bytes, iv: bytes) -> bytes:
    """Pad ``data`` and encrypt it in CBC mode; an empty IV means the key is used."""
    key, iv = _prepare(key, iv)
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(_pad(bytes(data))) + encryptor.finalize()


def aes128_decrypt(data: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt CBC ``data`` and strip its padding; an empty IV means the key is used."""
    key, iv = _prepare(key, iv)
    data = bytes(data)
    if len(data) % BLOCK_SIZE:
        raise ValueError("input not full blocks")
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    return _unpad(decryptor.update(data) + decryptor.finalize())