from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from telescope_sim_converter import __version__


@dataclass(frozen=True)
class ConverterConfig:
    """
    Configuration of one conversion batch.

    sentinel:
      Reserved 2-byte line prefix opening/closing an event block.
    pattern:
      Glob pattern used when the source path is a directory.
    data_suffix:
      File extension stripped from the basename before filename metadata is parsed.
      Only this exact suffix is removed, because run names contain dots ('ptel.j3').
    output_dir:
      Directory receiving the artifacts. None: next to each source file.
    operator:
      Free-text operator identifier embedded in the artifact descriptor.
    tool_version:
      Version tag embedded in the artifact descriptor.
    placeholder_metadata:
      - False: files whose names cannot be parsed are skipped.
      - True: convert them anyway using RunMetadata.placeholder() (species 'u', telescope 'utel').
    """
    sentinel: bytes = b"@@"
    pattern: str = "*.txt"
    data_suffix: str = ".txt"
    output_dir: Optional[Path] = None
    operator: str = "unknown"
    tool_version: str = f"telescope_sim_converter {__version__}"
    placeholder_metadata: bool = False

    def __post_init__(self) -> None:
        if len(self.sentinel) != 2:
            raise ValueError(f"sentinel must be exactly 2 bytes, got {self.sentinel!r}")
