import base64
import binascii
import logging
import os
import struct

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from crypto.hash import derive_key, evp_bytes_to_key
from utils.dataModels import (
    DEFAULT_KDF,
    LEGACY_VERSION,
    RECORD_HDR_FMT,
    RECORD_HDR_SIZE,
    RECORD_MAGIC,
    RECORD_VERSION,
    KdfParams,
)

logger = logging.getLogger(__name__)

SALT_LEN = 16
NONCE_LEN = 12
GCM_TAG_LEN = 16
LEGACY_KEY_LEN = 24  # aes192
LEGACY_IV_LEN = 16


def encrypt(plaintext: bytes, password: str, params: KdfParams = DEFAULT_KDF) -> str:
    """Encrypt under a fresh salt and nonce; returns base64(header || ct)."""
    salt = os.urandom(SALT_LEN)
    nonce = os.urandom(NONCE_LEN)
    header = struct.pack(
        RECORD_HDR_FMT, RECORD_MAGIC, RECORD_VERSION,
        params.t_cost, params.m_cost_kib, params.parallelism, salt, nonce,
    )
    key = derive_key(password, salt, params)
    ct = AESGCM(key).encrypt(nonce, plaintext, header)
    return base64.b64encode(header + ct).decode("ascii")


def decrypt(ciphertext: str, password: str, version: int = RECORD_VERSION) -> bytes:
    """Decrypt a record payload.

    Raises ``cryptography.exceptions.InvalidTag`` when the key is wrong or
    the blob was tampered with, and ``ValueError`` for malformed input.
    """
    if version == LEGACY_VERSION:
        return decrypt_legacy(ciphertext, password)
    if version != RECORD_VERSION:
        raise ValueError(f"Unsupported record version: {version}")

    blob = _b64decode(ciphertext)
    if len(blob) < RECORD_HDR_SIZE + GCM_TAG_LEN:
        raise ValueError("Record payload is too small or corrupt")
    header, ct = blob[:RECORD_HDR_SIZE], blob[RECORD_HDR_SIZE:]
    magic, ver, t, m, p, salt, nonce = struct.unpack(RECORD_HDR_FMT, header)
    if magic != RECORD_MAGIC:
        raise ValueError("Invalid record magic")
    if ver != RECORD_VERSION:
        raise ValueError("Unsupported record version")
    params = KdfParams(t_cost=t, m_cost_kib=m, parallelism=p)
    problem = params.problem()
    if problem:
        # checked before derive_key so a damaged header cannot demand huge memory
        raise ValueError(f"Corrupt record header: {problem}")
    key = derive_key(password, salt, params)
    return AESGCM(key).decrypt(nonce, ct, header)


def decrypt_legacy(ciphertext: str, password: str) -> bytes:
    """Read payloads written by Node's crypto.createCipher('aes192', password)."""
    logger.debug("Decrypting legacy aes192 payload")
    blob = _b64decode(ciphertext)
    if not blob or len(blob) % (algorithms.AES.block_size // 8):
        raise ValueError("Legacy payload length is not a multiple of the block size")
    key, iv = evp_bytes_to_key(password.encode("utf-8"), LEGACY_KEY_LEN, LEGACY_IV_LEN)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(blob) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def _b64decode(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Record payload is not valid base64: {e}") from None
