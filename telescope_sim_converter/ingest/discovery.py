from __future__ import annotations

from pathlib import Path
from typing import List

from telescope_sim_converter.errors import InvalidSourceError


def resolve_sources(source: str | Path, pattern: str = "*.txt") -> List[Path]:
    """
    Resolve a user-supplied path into the list of simulation logs to convert.

    - regular file: that file only (the pattern is not applied)
    - directory: every regular file matching ``pattern`` directly beneath it, sorted by name

    Raises InvalidSourceError when nothing matches.
    """
    p = Path(source).expanduser().resolve()
    if p.is_file():
        return [p]
    if p.is_dir():
        files = sorted(f for f in p.glob(pattern) if f.is_file())
        if files:
            return files
        raise InvalidSourceError(f"no regular file matching '{pattern}' in {p}")
    raise InvalidSourceError(f"not a file or directory: {p}")
