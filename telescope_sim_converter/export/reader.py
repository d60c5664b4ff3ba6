from __future__ import annotations

from pathlib import Path

import numpy as np

from telescope_sim_converter.errors import ArtifactFormatError
from telescope_sim_converter.export.tagged_array import read_tagged_array
from telescope_sim_converter.models.artifact import RUN_PARAMETER_NAMES, BinaryArtifact


def _raw(arr: np.ndarray, field: str) -> bytes:
    if arr.dtype != np.uint8 or arr.ndim != 1:
        raise ArtifactFormatError(f"{field}: expected raw bytes, got {arr.dtype} with shape {arr.shape}")
    return arr.tobytes()


def _group3(arr: np.ndarray, field: str, n: int) -> np.ndarray:
    if arr.dtype.kind != "f" or arr.shape != (3, n):
        raise ArtifactFormatError(f"{field}: expected float64[3,{n}], got {arr.dtype}{list(arr.shape)}")
    return arr


def read_artifact(path: str | Path) -> BinaryArtifact:
    """
    Read an artifact written by :func:`~telescope_sim_converter.export.assembler.write_artifact`.

    Shapes are checked against the event-id length; any mismatch raises ArtifactFormatError.
    """
    p = Path(path).expanduser().resolve()
    with open(p, "rb") as fh:
        descriptor = read_tagged_array(fh)
        params = read_tagged_array(fh)
        energy3 = read_tagged_array(fh)
        position3 = read_tagged_array(fh)
        momentum3 = read_tagged_array(fh)
        event_id = read_tagged_array(fh)
        header = read_tagged_array(fh)
        if fh.read(1):
            raise ArtifactFormatError(f"trailing data after header field in {p.name}")

    if params.dtype.kind != "i" or params.shape != (len(RUN_PARAMETER_NAMES),):
        raise ArtifactFormatError(f"run parameters: expected int64[6], got {params.dtype}{list(params.shape)}")
    if event_id.dtype.kind != "i" or event_id.ndim != 1:
        raise ArtifactFormatError(f"event id: expected int64[N], got {event_id.dtype}{list(event_id.shape)}")
    n = int(event_id.shape[0])

    return BinaryArtifact(
        descriptor=_raw(descriptor, "descriptor").decode("ascii", errors="replace"),
        run_parameters=params,
        energy3=_group3(energy3, "energy3", n),
        position3=_group3(position3, "position3", n),
        momentum3=_group3(momentum3, "momentum3", n),
        event_id=event_id,
        header=_raw(header, "header"),
    )
