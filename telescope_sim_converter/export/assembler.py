from __future__ import annotations

"""Build and write the binary artifact for one converted simulation run.

Field order on disk is fixed and repeated in the descriptor text:
descriptor, run parameters, energy3, position3, momentum3, event id, header.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import numpy as np

from telescope_sim_converter.export.tagged_array import write_tagged_array
from telescope_sim_converter.models.artifact import (
    COL_EVENT_ID,
    COLS_ENERGY,
    COLS_MOMENTUM,
    COLS_POSITION,
    N_EVENT_COLUMNS,
    BinaryArtifact,
)
from telescope_sim_converter.models.source import RunMetadata, SourceFile


_FIELD_DOC = (
    "1 descriptor   : this text (ASCII bytes)",
    "2 run_params   : int64[6] = jobID, startEnergy[keV], nSteps, eventsPerStep, sourceCTime, sourceMTime",
    "3 energy3      : float64[3,N] = incident energy, detector-1 deposit, detector-2 deposit [keV]",
    "4 position3    : float64[3,N] = initial x, y, z [mm]",
    "5 momentum3    : float64[3,N] = initial normalized momentum px, py, pz",
    "6 event_id     : int64[N] = simulation event identifiers",
    "7 header       : simulation tool runtime preamble (raw bytes, verbatim)",
)


def _iso(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _ascii(text: str) -> str:
    return text.encode("ascii", errors="replace").decode("ascii")


def build_descriptor(source: SourceFile, operator: str, tool_version: str) -> str:
    lines = [
        "Telescope simulation binary artifact",
        "Fields (each stored as tagged array: type tag, ndim, dims, payload):",
        *(f"  {d}" for d in _FIELD_DOC),
        f"Source file   : {source.name}",
        f"Source size   : {source.size} bytes",
        f"Source ctime  : {_iso(source.ctime)}",
        f"Operator      : {operator}",
        f"Tool version  : {tool_version}",
    ]
    return _ascii("\n".join(lines) + "\n")


def run_parameters(meta: RunMetadata, source: SourceFile) -> np.ndarray:
    return np.array(
        [
            meta.job_id,
            int(meta.start_energy_kev),
            meta.n_steps,
            meta.events_per_step,
            source.ctime,
            source.mtime,
        ],
        dtype=np.int64,
    )


def assemble(
    matrix: np.ndarray,
    meta: RunMetadata,
    source: SourceFile,
    header_lines: Sequence[bytes],
    *,
    operator: str,
    tool_version: str,
) -> BinaryArtifact:
    """Slice the unified (N, 10) event matrix into the artifact column groups."""
    mat = np.asarray(matrix, dtype=np.float64)
    if mat.ndim != 2 or mat.shape[1] != N_EVENT_COLUMNS:
        raise ValueError(f"event matrix must have shape (N, {N_EVENT_COLUMNS}), got {mat.shape}")

    return BinaryArtifact(
        descriptor=build_descriptor(source, operator, tool_version),
        run_parameters=run_parameters(meta, source),
        energy3=np.ascontiguousarray(mat[:, COLS_ENERGY].T),
        position3=np.ascontiguousarray(mat[:, COLS_POSITION].T),
        momentum3=np.ascontiguousarray(mat[:, COLS_MOMENTUM].T),
        event_id=mat[:, COL_EVENT_ID].astype(np.int64),
        header=b"".join(header_lines),
    )


def write_artifact(artifact: BinaryArtifact, path: str | Path) -> Path:
    """Write ``artifact`` to ``path``, overwriting any existing file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "wb") as fh:
        write_tagged_array(fh, artifact.descriptor)
        write_tagged_array(fh, artifact.run_parameters)
        write_tagged_array(fh, artifact.energy3)
        write_tagged_array(fh, artifact.position3)
        write_tagged_array(fh, artifact.momentum3)
        write_tagged_array(fh, artifact.event_id)
        write_tagged_array(fh, artifact.header)
    return out
