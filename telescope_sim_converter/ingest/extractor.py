from __future__ import annotations

"""Second pass: read the rows of every bookmarked block into one matrix.

Both functions operate on the same open binary handle the scanner used; they
only seek to offsets recorded in pass one and never re-parse sentinel lines.
"""

from typing import List, Optional, Sequence, Tuple
import io

import numpy as np
import pandas as pd

from telescope_sim_converter.errors import BlockFormatError
from telescope_sim_converter.ingest.scanner import LineReader
from telescope_sim_converter.models.artifact import N_EVENT_COLUMNS
from telescope_sim_converter.models.blocks import BlockDescriptor


# Event ids pass through float64; from 2**53 on, neighbouring integers collapse.
_MAX_EXACT_ID = 2 ** 53


def _read_lines(reader: LineReader, n: int) -> List[bytes]:
    lines: List[bytes] = []
    for _ in range(n):
        line = reader.readline()
        if not line:
            break
        lines.append(line)
    return lines


def _check_event_ids(ids: np.ndarray, block: BlockDescriptor) -> None:
    with np.errstate(invalid="ignore"):
        bad = ~np.isfinite(ids) | (np.abs(ids) >= _MAX_EXACT_ID) | (ids != np.trunc(ids))
    if np.any(bad):
        k = int(np.argmax(bad))
        raise BlockFormatError(
            f"line {block.start_line + 1 + k}: event id {float(ids[k])!r} is not an integer below 2**53 in magnitude"
        )


def _parse_block(lines: Sequence[bytes], block: BlockDescriptor) -> np.ndarray:
    for k, line in enumerate(lines):
        n_fields = len(line.split())
        if n_fields != N_EVENT_COLUMNS:
            raise BlockFormatError(
                f"line {block.start_line + 1 + k}: expected {N_EVENT_COLUMNS} fields, got {n_fields}"
            )
    try:
        df = pd.read_csv(
            io.BytesIO(b"".join(lines)),
            sep=r"\s+",
            header=None,
            dtype=np.float64,
            float_precision="round_trip",
        )
    except ValueError as e:
        raise BlockFormatError(f"block at line {block.start_line}: non-numeric field ({e})") from e
    mat = df.to_numpy(dtype=np.float64, copy=False)
    _check_event_ids(mat[:, 0], block)
    return mat


def extract(reader: LineReader, blocks: Sequence[BlockDescriptor]) -> np.ndarray:
    """
    Build the unified event matrix, shape ``(n_rows, 10)``, from valid blocks in order.

    Invalid (empty) descriptors are skipped. Raises BlockFormatError when a row
    does not hold exactly 10 numbers, an event id is not an exact integer,
    or a block ends early.
    """
    valid = [b for b in blocks if b.is_valid]
    n_rows = int(sum(b.length for b in valid))
    mat = np.empty((n_rows, N_EVENT_COLUMNS), dtype=np.float64)

    cursor = 0
    for block in valid:
        reader.seek(block.start_offset)
        lines = _read_lines(reader, block.length)
        if len(lines) != block.length:
            raise BlockFormatError(
                f"block at line {block.start_line}: expected {block.length} rows, file ended after {len(lines)}"
            )
        rows = _parse_block(lines, block)
        mat[cursor:cursor + block.length, :] = rows
        cursor += block.length

    return mat


def capture_header(reader: LineReader, first_block: Optional[BlockDescriptor]) -> Tuple[bytes, ...]:
    """
    Return the raw preamble lines preceding the first sentinel, bytes and line endings untouched.

    Empty when there is no block or the first sentinel sits on line 1.
    """
    if first_block is None:
        return ()
    reader.seek(0)
    lines = _read_lines(reader, max(0, first_block.start_line - 1))
    return tuple(lines)
