from __future__ import annotations

"""First pass: locate sentinel-delimited blocks in a simulation log.

The simulation writes its event table as runs of numeric rows framed by a
reserved 2-character sentinel line. The scanner reads the file once, line by
line, and records for every sentinel the 1-based line number and the byte
offset immediately after it. Sentinels alternate start/stop; the extractor
later seeks straight to each recorded start offset.
"""

from typing import List, Protocol, Tuple

from telescope_sim_converter.models.blocks import BlockDescriptor, ScanResult


DEFAULT_SENTINEL = b"@@"


class LineReader(Protocol):
    """Seekable binary line source (open(..., 'rb') handles and io.BytesIO qualify)."""

    def readline(self) -> bytes: ...

    def seek(self, offset: int, whence: int = 0) -> int: ...

    def tell(self) -> int: ...


def scan(reader: LineReader, sentinel: bytes = DEFAULT_SENTINEL) -> ScanResult:
    """
    Scan ``reader`` from offset 0 and return the paired block bookmarks.

    Notes
    - A trailing unpaired start sentinel (odd count) is dropped and reported as
      TruncatedFile; the paired prefix blocks are still returned.
    - Blocks with no rows between their sentinels are kept in ``blocks`` but are
      not part of ``valid_blocks``.
    """
    if len(sentinel) != 2:
        raise ValueError(f"sentinel must be exactly 2 bytes, got {sentinel!r}")

    reader.seek(0)
    marks: List[Tuple[int, int]] = []
    n_lines = 0
    offset = 0

    while True:
        line = reader.readline()
        if not line:
            break
        n_lines += 1
        offset += len(line)
        if line[:2] == sentinel:
            marks.append((n_lines, offset))

    warnings: List[str] = []
    n_sentinels = len(marks)
    if n_sentinels % 2 != 0:
        dangling_line = marks[-1][0]
        warnings.append(
            f"TruncatedFile: odd sentinel count ({n_sentinels}); "
            f"unpaired start at line {dangling_line} ignored"
        )

    blocks: List[BlockDescriptor] = []
    for k in range(0, n_sentinels - 1, 2):
        (start_line, start_off), (stop_line, stop_off) = marks[k], marks[k + 1]
        blocks.append(
            BlockDescriptor(
                start_line=start_line,
                stop_line=stop_line,
                start_offset=start_off,
                stop_offset=stop_off,
            )
        )

    n_empty = sum(1 for b in blocks if not b.is_valid)
    if n_empty:
        warnings.append(f"ignored {n_empty} block(s) with no rows between sentinels")

    return ScanResult(
        blocks=tuple(blocks),
        n_sentinels=n_sentinels,
        n_lines=n_lines,
        warnings=tuple(warnings),
    )
