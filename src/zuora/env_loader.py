from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

ENV_FILE_VAR = "ZUORA_ENV_FILE"


def env_file_candidates() -> List[Path]:
    """Where ZUORA_* settings are looked for, most specific first.

    ``$ZUORA_ENV_FILE`` when set, then ``.env`` / ``.dotenv`` in the working
    directory, then ``~/.zuora.env`` for per-user API credentials.
    """
    candidates: List[Path] = []
    explicit = os.getenv(ENV_FILE_VAR)
    if explicit:
        candidates.append(Path(explicit).expanduser())
    cwd = Path.cwd()
    candidates += [cwd / ".env", cwd / ".dotenv", Path.home() / ".zuora.env"]
    return candidates


def load_env_files(
    candidates: Optional[Iterable[Path]] = None,
    *,
    quiet: bool = False,
) -> Optional[Path]:
    """Load the first existing env file and return its path.

    Variables already present in the environment win over the file, so a
    shell ``export ZUORA_SANDBOX=false`` beats a checked-in ``.env``.
    """
    if candidates is None:
        candidates = env_file_candidates()

    for path in candidates:
        if path.is_file():
            load_dotenv(path, override=False)
            if not quiet:
                _logger.debug("Loaded Zuora settings from %s", path)
            return path

    explicit = os.getenv(ENV_FILE_VAR)
    if explicit and not quiet and not Path(explicit).expanduser().is_file():
        _logger.warning("%s points to %s, which does not exist", ENV_FILE_VAR, explicit)
    elif not quiet:
        _logger.debug("No Zuora env file found (looked in %s)", Path.cwd())
    return None
