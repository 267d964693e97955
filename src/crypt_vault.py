#!/usr/bin/env python3
"""
crypt: password-protected virtual file store

A single JSON document maps logical names to password-encrypted blobs. Every
entry has its own password and an optional, non-secret hint that is shown
when the password is asked for.

Store document (default ~/.crypt/state.json, or $CRYPT_STATE, or --state):
  {
    "<name>": {
      "data":     base64 payload,
      "hint":     text, may be empty,
      "passHash": base64(SHA-256(password)),
      "version":  2            # absent on legacy records
    }
  }

Record payload, version 2 (big-endian header, bound as AEAD associated data):
    magic     : 4 bytes   -> b"CRPT"
    version   : 1 byte    -> 0x02
    t_cost    : u32
    m_cost    : u32  (KiB)
    parallel  : u32
    salt      : 16 bytes
    nonce     : 12 bytes
    ciphertext: remaining bytes (AES-256-GCM, key = Argon2id(SHA3-512(password)))

Version 1 payloads (aes192-CBC, EVP_BytesToKey/MD5 key, no salt) are still
readable; `rekey` rewrites them as version 2.

Commands:
  ls                          List files and hints
  enc -i <file> -o <name>     Encrypt a file into the store
  cat <name> [--out <file>]   Decrypt and print (or write) a file
  mv <old> <new>              Rename a file (overwrites <new> unless --no-clobber)
  rm <name>                   Delete a file
  rekey <name>                Re-encrypt a file under the current scheme

Each invocation loads the store, runs one command and saves it with a
write-then-replace. Two processes writing at once lose one update.
"""
from __future__ import annotations

import sys

from ui.cli import build_parser
from utils.errors import CryptError
from utils.helper import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        args.func(args)
    except CryptError as e:
        print(f"[!] {e}", file=sys.stderr)
        return e.exit_code
    except (KeyboardInterrupt, EOFError):
        print("\n[!] Aborted", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
