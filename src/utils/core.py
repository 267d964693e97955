import argparse
import logging

from pathlib import Path
from typing import List, Tuple

from argon2.exceptions import HashingError
from cryptography.exceptions import InvalidTag

from crypto.aead import encrypt, decrypt
from crypto.hash import hash_password, verify_password
from storage.vault import save_store, load_store
from ui.prompt import PromptContext, SecretSource, fixed_secret, obtain_hint, obtain_secret
from utils.dataModels import DEFAULT_KDF, RECORD_VERSION, KdfParams, Record, Store
from utils.errors import AuthFailure, InputError, PersistenceError
from utils.helper import kdf_params, resolve_source, state_path

logger = logging.getLogger(__name__)

LIST_FMT = "%-50s%-10s"


def secret_source(args: argparse.Namespace) -> SecretSource:
    if getattr(args, "passphrase", None):
        return fixed_secret(args.passphrase)
    return obtain_secret


def unlock(store: Store, name: str, obtain: SecretSource) -> Tuple[Record, str]:
    """Fetch a record and check the operator's password against its digest.

    Raises NotFound before prompting and AuthFailure on a mismatch, so callers
    never reach decrypt or mutation with an unverified password.
    """
    record = store.get(name)
    password = obtain(PromptContext(hint=record.hint))
    if not verify_password(record.pass_hash, password):
        logger.debug("Password check failed for %r", name)
        raise AuthFailure()
    return record, password


def open_record(name: str, record: Record, password: str) -> bytes:
    try:
        return decrypt(record.data, password, record.version)
    except (InvalidTag, ValueError, HashingError) as e:
        # the digest matched, so the payload itself is damaged
        raise PersistenceError(f"Record {name} is corrupt and cannot be decrypted") from e


def seal_record(plaintext: bytes, password: str, hint: str = "",
                params: KdfParams = DEFAULT_KDF) -> Record:
    return Record(
        data=encrypt(plaintext, password, params),
        pass_hash=hash_password(password),
        hint=hint,
        version=RECORD_VERSION,
    )


def list_records(store: Store) -> List[Tuple[str, str]]:
    return store.list()


def add_record(store: Store, name: str, plaintext: bytes, password: str, hint: str = "",
               params: KdfParams = DEFAULT_KDF) -> Record:
    if not name:
        raise InputError("Destination name must not be empty")
    if not password:
        raise InputError("Password must not be empty")
    record = seal_record(plaintext, password, hint, params)
    store.put(name, record)
    return record


def read_record(store: Store, name: str, obtain: SecretSource) -> bytes:
    record, password = unlock(store, name, obtain)
    return open_record(name, record, password)


def read_source(path: str) -> Tuple[Path, bytes]:
    src = resolve_source(path)
    if not src.is_file():
        raise InputError(f"Not a file: {src}")
    try:
        return src, src.read_bytes()
    except OSError as e:
        raise InputError(f"Could not read {src}: {e}") from e


def cmd_ls(args: argparse.Namespace) -> None:
    store = load_store(state_path(args.state))
    rows = list_records(store)
    if not rows:
        print("(empty)")
        return
    print(LIST_FMT % ("Path", "Hint"))
    for name, hint in rows:
        print(LIST_FMT % (name, hint))


def cmd_enc(args: argparse.Namespace) -> None:
    path = state_path(args.state)
    params = kdf_params(args.t, args.m, args.p)
    store = load_store(path)
    src, plaintext = read_source(args.input)

    password = secret_source(args)(PromptContext())
    hint = args.hint if args.hint is not None else obtain_hint()

    add_record(store, args.output, plaintext, password, hint, params)
    save_store(path, store)
    print(f"[+] Successfully encrypted {src} and stored in {args.output}")


def cmd_cat(args: argparse.Namespace) -> None:
    store = load_store(state_path(args.state))
    plaintext = read_record(store, args.path, secret_source(args))
    if args.out:
        out = Path(args.out)
        try:
            out.write_bytes(plaintext)
        except OSError as e:
            raise InputError(f"Could not write {out}: {e}") from e
        print(f"[+] Extracted {args.path} -> {out}")
        return
    print(plaintext.decode("utf-8", errors="replace"))

