import logging
import os

from pathlib import Path
from typing import Mapping, Optional

from utils.dataModels import KdfParams
from utils.errors import InputError

STATE_ENV = "CRYPT_STATE"
DEFAULT_STATE = Path.home() / ".crypt" / "state.json"


def state_path(cli_value: Optional[str] = None, environ: Mapping[str, str] = os.environ) -> Path:
    """--state wins over $CRYPT_STATE, which wins over ~/.crypt/state.json."""
    if cli_value:
        return Path(cli_value).expanduser()
    env_value = environ.get(STATE_ENV)
    if env_value:
        return Path(env_value).expanduser()
    return DEFAULT_STATE


def kdf_params(t: int, m: int, p: int) -> KdfParams:
    params = KdfParams(t_cost=t, m_cost_kib=m, parallelism=p)
    problem = params.problem()
    if problem:
        raise InputError(problem)
    return params


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_source(path: str) -> Path:
    """Relative source paths resolve against the working directory."""
    src = Path(path).expanduser()
    if not src.is_absolute():
        src = Path.cwd() / src
    return src
