import base64

from argon2.low_level import hash_secret_raw, Type as Argon2Type
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import constant_time, hashes

from utils.dataModels import KdfParams

KEY_LEN = 32


def _digest(algorithm: hashes.HashAlgorithm, data: bytes) -> bytes:
    digest = hashes.Hash(algorithm, backend=default_backend())
    digest.update(data)
    return digest.finalize()


def sha3_512_bytes(data: bytes) -> bytes:
    return _digest(hashes.SHA3_512(), data)


def md5_bytes(data: bytes) -> bytes:
    return _digest(hashes.MD5(), data)


def hash_password(password: str) -> str:
    """base64(SHA-256(password)), the digest stored as ``passHash``."""
    return base64.b64encode(_digest(hashes.SHA256(), password.encode("utf-8"))).decode("ascii")


def verify_password(stored_digest: str, candidate: str) -> bool:
    return constant_time.bytes_eq(
        hash_password(candidate).encode("ascii"),
        stored_digest.encode("utf-8"),
    )


def derive_key(password: str, salt: bytes, params: KdfParams) -> bytes:
    """Record key = Argon2id(SHA3-512(password)) -> 32 bytes"""
    prehash = sha3_512_bytes(password.encode("utf-8"))
    return hash_secret_raw(
        secret=prehash,
        salt=salt,
        time_cost=params.t_cost,
        memory_cost=params.m_cost_kib,
        parallelism=params.parallelism,
        hash_len=KEY_LEN,
        type=Argon2Type.ID,
    )


def evp_bytes_to_key(password: bytes, key_len: int, iv_len: int) -> tuple[bytes, bytes]:
    """OpenSSL EVP_BytesToKey with MD5, one round and no salt."""
    out = b""
    block = b""
    while len(out) < key_len + iv_len:
        block = md5_bytes(block + password)
        out += block
    return out[:key_len], out[key_len:key_len + iv_len]
