from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class BlockDescriptor:
    """
    Bookmarks of one sentinel-delimited block.

    start_line / stop_line: 1-based line numbers of the opening and closing sentinel lines.
    start_offset / stop_offset: byte offsets immediately after each sentinel line.
    """
    start_line: int
    stop_line: int
    start_offset: int
    stop_offset: int

    @property
    def length(self) -> int:
        """Number of data rows between the two sentinels."""
        return self.stop_line - self.start_line - 1

    @property
    def is_valid(self) -> bool:
        return self.length > 0


@dataclass(frozen=True)
class ScanResult:
    """
    Output of the first pass over a source file.

    blocks keeps every paired block, in file order, including empty ones; use
    valid_blocks for extraction.
    """
    blocks: Tuple[BlockDescriptor, ...]
    n_sentinels: int
    n_lines: int
    warnings: Tuple[str, ...] = ()

    @property
    def valid_blocks(self) -> List[BlockDescriptor]:
        return [b for b in self.blocks if b.is_valid]

    @property
    def n_rows(self) -> int:
        return int(sum(b.length for b in self.valid_blocks))

    @property
    def truncated(self) -> bool:
        return self.n_sentinels % 2 != 0

    @property
    def first_block(self) -> Optional[BlockDescriptor]:
        return self.blocks[0] if self.blocks else None
