import argparse
import logging

from typing import Optional

from storage.vault import save_store, load_store
from ui.prompt import PromptContext, SecretSource, obtain_secret
from utils.core import open_record, seal_record, secret_source, unlock
from utils.dataModels import DEFAULT_KDF, KdfParams, Record, Store
from utils.errors import InputError
from utils.helper import kdf_params, state_path

logger = logging.getLogger(__name__)


def delete_record(store: Store, name: str, obtain: SecretSource) -> Record:
    unlock(store, name, obtain)
    return store.remove(name)


def rename_record(store: Store, old: str, new: str, obtain: SecretSource,
                  overwrite: bool = True) -> None:
    """Move a record to a new name; payload, digest and hint are carried over as-is."""
    unlock(store, old, obtain)
    store.rename(old, new, overwrite=overwrite)


def rekey_record(store: Store, name: str, obtain: SecretSource,
                 new_password: Optional[str] = None, hint: Optional[str] = None,
                 params: KdfParams = DEFAULT_KDF,
                 obtain_new: Optional[SecretSource] = None) -> Record:
    """Re-encrypt a record under the current scheme, optionally with a new password.

    This is also how legacy aes192 (version 1) records are migrated.
    Steps:
      1) Verify the current password against the stored digest.
      2) Decrypt with whichever scheme the record was written in.
      3) Ask for the new password, if one is wanted and was not given.
      4) Encrypt again with a fresh salt/nonce and replace the record.
    """
    record, password = unlock(store, name, obtain)
    plaintext = open_record(name, record, password)
    if new_password is None and obtain_new is not None:
        new_password = obtain_new(PromptContext(label="New password"))
    if new_password == "":
        raise InputError("New password must not be empty")
    new_record = seal_record(
        plaintext,
        new_password or password,
        record.hint if hint is None else hint,
        params,
    )
    store.put(name, new_record)
    logger.debug("Rekeyed %r (v%d -> v%d)", name, record.version, new_record.version)
    return new_record


def cmd_rm(args: argparse.Namespace) -> None:
    path = state_path(args.state)
    store = load_store(path)
    delete_record(store, args.path, secret_source(args))
    save_store(path, store)
    print(f"[+] Successfully deleted {args.path}")


def cmd_mv(args: argparse.Namespace) -> None:
    path = state_path(args.state)
    store = load_store(path)
    rename_record(store, args.old, args.new, secret_source(args), overwrite=not args.no_clobber)
    save_store(path, store)
    print(f"[+] Successfully moved {args.old} to {args.new}")


def cmd_rekey(args: argparse.Namespace) -> None:
    path = state_path(args.state)
    params = kdf_params(args.t, args.m, args.p)
    store = load_store(path)
    obtain_new = obtain_secret if args.change_password else None
    rekey_record(store, args.path, secret_source(args), args.new_passphrase, args.hint, params,
                 obtain_new=obtain_new)
    save_store(path, store)
    print(f"[+] Re-encrypted {args.path}")
