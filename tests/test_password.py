import base64
import hashlib

from crypto.hash import derive_key, hash_password, verify_password


def test_hash_is_base64_sha256():
    expected = base64.b64encode(hashlib.sha256(b"abc123").digest()).decode()
    assert hash_password("abc123") == expected
    assert len(hash_password("abc123")) == 44


def test_hash_is_deterministic_and_fixed_length():
    assert hash_password("pw") == hash_password("pw")
    assert len(hash_password("")) == len(hash_password("x" * 1000))


def test_verify():
    stored = hash_password("abc123")
    assert verify_password(stored, "abc123")
    assert not verify_password(stored, "wrong")
    assert not verify_password(stored, "abc1234")
    assert not verify_password(stored, "")


def test_verify_against_garbage_digest():
    assert not verify_password("", "abc123")
    assert not verify_password("ñ" * 44, "abc123")


def test_derive_key_depends_on_salt_and_password(fast_kdf):
    k1 = derive_key("pw", b"s" * 16, fast_kdf)
    assert len(k1) == 32
    assert k1 == derive_key("pw", b"s" * 16, fast_kdf)
    assert k1 != derive_key("pw", b"t" * 16, fast_kdf)
    assert k1 != derive_key("pw2", b"s" * 16, fast_kdf)
