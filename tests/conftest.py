import base64
import os
import sys

import pytest


def pytest_configure():
    # Ensure `src/` is importable as top-level for `crypto.*` / `utils.*` imports
    root = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    src_path = os.path.join(root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture
def fast_kdf():
    from utils.dataModels import KdfParams
    return KdfParams(t_cost=1, m_cost_kib=8, parallelism=1)


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def legacy_encrypt():
    """Produce a payload the way the aes192 (version 1) writer did."""
    from cryptography.hazmat.primitives import padding
    from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
    from crypto.hash import evp_bytes_to_key

    def _encrypt(plaintext: bytes, password: str) -> str:
        key, iv = evp_bytes_to_key(password.encode("utf-8"), 24, 16)
        padder = padding.PKCS7(128).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        return base64.b64encode(encryptor.update(padded) + encryptor.finalize()).decode("ascii")

    return _encrypt


class PromptRecorder:
    """Deterministic stand-in for the interactive password prompt."""

    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.contexts = []

    def __call__(self, ctx):
        self.contexts.append(ctx)
        return self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]


@pytest.fixture
def prompt():
    return PromptRecorder
