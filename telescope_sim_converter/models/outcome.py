from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from .source import RunMetadata


Status = Literal["ok", "skipped", "failed"]


@dataclass(frozen=True)
class FileOutcome:
    """
    Result of converting one source file.

    status:
      - "ok": an artifact was written to output_path
      - "skipped": a named, expected condition (reason) prevented conversion
      - "failed": the file could not be read
    reason: error name from the taxonomy (e.g. "MalformedFilename"), None on success
    """
    source_path: Path
    status: Status
    reason: Optional[str] = None
    message: str = ""
    output_path: Optional[Path] = None
    metadata: Optional[RunMetadata] = None
    n_events: int = 0
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class BatchReport:
    """All per-file outcomes of one batch run, in processing order."""
    source: Path
    outcomes: Tuple[FileOutcome, ...]
    warnings: Tuple[str, ...] = ()

    @property
    def invalid_source(self) -> bool:
        return not self.outcomes

    @property
    def succeeded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def not_converted(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def summary(self) -> str:
        n = len(self.outcomes)
        return f"{len(self.succeeded)}/{n} files converted from {self.source}"
