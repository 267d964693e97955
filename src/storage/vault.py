import json
import logging
import os

from pathlib import Path

from utils.dataModels import Store
from utils.errors import PersistenceError

logger = logging.getLogger(__name__)


def save_store(path: Path, store: Store) -> None:
    """Write the whole document to a temp sibling, then replace the target."""
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(store.to_dict(), f, ensure_ascii=False, indent=2, sort_keys=True)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, 0o600)
        os.replace(tmp, path)
    except OSError as e:
        if tmp.exists():
            tmp.unlink()
        raise PersistenceError(f"Could not write store {path}: {e}") from e
    logger.debug("Saved %d record(s) to %s", len(store), path)


def load_store(path: Path) -> Store:
    if not path.exists():
        logger.debug("No store at %s, starting empty", path)
        return Store()
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Could not read store {path}: {e}") from e
    try:
        obj = json.loads(raw)
    except ValueError as e:
        raise PersistenceError(f"Corrupt store {path}: {e}") from e
    store = Store.from_dict(obj)
    logger.debug("Loaded %d record(s) from %s", len(store), path)
    return store
