import logging
import struct

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from utils.errors import InputError, NotFound, PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_T_COST = 3
DEFAULT_M_COST_KiB = 65536  # 64 MiB (tune per device)
DEFAULT_PARALLELISM = 2
MAX_T_COST = 64
MAX_M_COST_KiB = 4194304  # 4 GiB
MAX_PARALLELISM = 64

RECORD_MAGIC = b"CRPT"
RECORD_VERSION = 2
LEGACY_VERSION = 1
RECORD_HDR_FMT = ">4sBIII16s12s"  # magic, ver, t, m, p, salt(16), nonce(12)
RECORD_HDR_SIZE = struct.calcsize(RECORD_HDR_FMT)


@dataclass(frozen=True)
class KdfParams:
    t_cost: int = DEFAULT_T_COST
    m_cost_kib: int = DEFAULT_M_COST_KiB
    parallelism: int = DEFAULT_PARALLELISM

    def problem(self) -> Optional[str]:
        """Why these costs are unusable, or None when they are in range."""
        if not 1 <= self.t_cost <= MAX_T_COST:
            return f"Argon2 time cost must be between 1 and {MAX_T_COST}"
        if not 1 <= self.parallelism <= MAX_PARALLELISM:
            return f"Argon2 parallelism must be between 1 and {MAX_PARALLELISM}"
        if not 8 * self.parallelism <= self.m_cost_kib <= MAX_M_COST_KiB:
            return (f"Argon2 memory must be between {8 * self.parallelism} and "
                    f"{MAX_M_COST_KiB} KiB for parallelism {self.parallelism}")
        return None


DEFAULT_KDF = KdfParams()


@dataclass
class Record:
    data: str
    pass_hash: str
    hint: str = ""
    version: int = LEGACY_VERSION

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"data": self.data, "hint": self.hint, "passHash": self.pass_hash}
        # v1 records keep their legacy shape
        if self.version != LEGACY_VERSION:
            d["version"] = self.version
        return d

    @staticmethod
    def from_dict(name: str, obj: Any) -> "Record":
        if not isinstance(obj, dict):
            raise PersistenceError(f"Corrupt store: entry {name!r} is not an object")
        data, pass_hash = obj.get("data"), obj.get("passHash")
        if not isinstance(data, str) or not isinstance(pass_hash, str):
            raise PersistenceError(f"Corrupt store: entry {name!r} is missing data or passHash")
        hint = obj.get("hint") or ""
        version = obj.get("version", LEGACY_VERSION)
        if not isinstance(version, int) or version not in (LEGACY_VERSION, RECORD_VERSION):
            raise PersistenceError(f"Corrupt store: entry {name!r} has unsupported version {version!r}")
        return Record(data=data, pass_hash=pass_hash, hint=str(hint), version=version)


@dataclass
class Store:
    """In-memory view of the persisted store document.

    Mutations only touch this object; nothing reaches disk until the caller
    hands it to ``storage.vault.save_store``.
    """
    records: Dict[str, Record] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, name: object) -> bool:
        return name in self.records

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.records))

    def get(self, name: str) -> Record:
        try:
            return self.records[name]
        except KeyError:
            raise NotFound(name) from None

    def put(self, name: str, record: Record) -> None:
        if not name:
            raise InputError("Record name must not be empty")
        if name in self.records:
            logger.debug("Replacing existing record %r", name)
        self.records[name] = record

    def remove(self, name: str) -> Record:
        try:
            return self.records.pop(name)
        except KeyError:
            raise NotFound(name) from None

    def rename(self, old: str, new: str, overwrite: bool = True) -> None:
        record = self.get(old)
        if not new:
            raise InputError("Record name must not be empty")
        if old == new:
            return
        if new in self.records:
            if not overwrite:
                raise InputError(f"Destination already exists: {new}")
            logger.warning("Rename %r -> %r overwrites an existing record", old, new)
        self.records[new] = record
        del self.records[old]

    def list(self) -> List[Tuple[str, str]]:
        return [(name, self.records[name].hint) for name in sorted(self.records)]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: rec.to_dict() for name, rec in self.records.items()}

    @staticmethod
    def from_dict(obj: Any) -> "Store":
        if not isinstance(obj, dict):
            raise PersistenceError("Corrupt store: top level is not an object")
        return Store(records={name: Record.from_dict(name, rec) for name, rec in obj.items()})
