import argparse

from utils.core import cmd_cat, cmd_enc, cmd_ls
from utils.dataModels import DEFAULT_T_COST, DEFAULT_M_COST_KiB, DEFAULT_PARALLELISM
from utils.maintain import cmd_mv, cmd_rekey, cmd_rm


def _add_kdf_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-t", type=int, default=DEFAULT_T_COST, help="Argon2 time cost (iterations)")
    p.add_argument("-m", type=int, default=DEFAULT_M_COST_KiB, help="Argon2 memory (KiB)")
    p.add_argument("-p", type=int, default=DEFAULT_PARALLELISM, help="Argon2 parallelism")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--state", help="Store document (default: $CRYPT_STATE or ~/.crypt/state.json)")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    gated = argparse.ArgumentParser(add_help=False)
    gated.add_argument("--passphrase", help="Password (prompted for when omitted)")

    p = argparse.ArgumentParser(description="CLI for accessing files stored inside crypt.")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_ls = sub.add_parser("ls", parents=[common], help="List files")
    p_ls.set_defaults(func=cmd_ls)

    p_enc = sub.add_parser("enc", parents=[common, gated], help="Add a file")
    p_enc.add_argument("-i", "--input", required=True, help="The file to encrypt")
    p_enc.add_argument("-o", "--output", required=True, help="Where to store file inside crypt")
    p_enc.add_argument("--hint", help="Password hint (prompted for when omitted)")
    _add_kdf_args(p_enc)
    p_enc.set_defaults(func=cmd_enc)

    p_cat = sub.add_parser("cat", parents=[common, gated], help="Print the contents of a file")
    p_cat.add_argument("path", help="Name inside crypt")
    p_cat.add_argument("--out", help="Write the decrypted bytes to this file instead")
    p_cat.set_defaults(func=cmd_cat)

    p_mv = sub.add_parser("mv", parents=[common, gated], help="Rename a file")
    p_mv.add_argument("old", help="Current name")
    p_mv.add_argument("new", help="New name")
    p_mv.add_argument("--no-clobber", action="store_true", help="Refuse to overwrite an existing name")
    p_mv.set_defaults(func=cmd_mv)

    p_rm = sub.add_parser("rm", parents=[common, gated], help="Delete a file")
    p_rm.add_argument("path", help="Name inside crypt")
    p_rm.set_defaults(func=cmd_rm)

    p_rek = sub.add_parser("rekey", parents=[common, gated],
                           help="Re-encrypt a file (upgrades legacy records, optionally changes password)")
    p_rek.add_argument("path", help="Name inside crypt")
    p_rek.add_argument("--change-password", action="store_true", help="Prompt for a new password")
    p_rek.add_argument("--new-passphrase", help="New password")
    p_rek.add_argument("--hint", help="New hint (default: keep the current one)")
    _add_kdf_args(p_rek)
    p_rek.set_defaults(func=cmd_rekey)

    return p
