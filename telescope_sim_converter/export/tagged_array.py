from __future__ import annotations

"""Self-describing array records used for every artifact field.

Record layout (all integers little-endian):

    tag    1 byte ASCII   'b' raw bytes (uint8), 'i' int64, 'f' float64
    ndim   1 byte uint8
    dims   ndim x uint64
    data   prod(dims) items, C order, little-endian

Arrays are converted to the canonical dtype of their tag before writing, so
float32 input is widened and never narrowed; float64 and int64 values
round-trip bit-identically.
"""

from typing import BinaryIO, Dict, Union

import numpy as np

from telescope_sim_converter.errors import ArtifactFormatError


_TAG_DTYPE: Dict[bytes, np.dtype] = {
    b"b": np.dtype("u1"),
    b"i": np.dtype("<i8"),
    b"f": np.dtype("<f8"),
}

_DIM_DTYPE = np.dtype("<u8")


def _tag_for(arr: np.ndarray) -> bytes:
    kind = arr.dtype.kind
    if kind == "f":
        return b"f"
    if kind in ("i", "u"):
        if arr.dtype == np.uint8:
            return b"b"
        return b"i"
    if kind == "b":
        return b"i"
    raise TypeError(f"unsupported dtype for tagged array: {arr.dtype}")


def write_tagged_array(fh: BinaryIO, value: Union[np.ndarray, bytes, str]) -> int:
    """
    Write one tagged record to ``fh`` and return the number of bytes written.

    str values are encoded as ASCII and stored as raw bytes.
    """
    if isinstance(value, str):
        value = value.encode("ascii")
    if isinstance(value, (bytes, bytearray)):
        arr = np.frombuffer(bytes(value), dtype=np.uint8)
    else:
        arr = np.asarray(value)

    tag = _tag_for(arr)
    arr = np.ascontiguousarray(arr, dtype=_TAG_DTYPE[tag])
    if arr.ndim > 255:
        raise ValueError("tagged arrays support at most 255 dimensions")

    head = tag + bytes([arr.ndim]) + np.asarray(arr.shape, dtype=_DIM_DTYPE).tobytes()
    payload = arr.tobytes(order="C")
    fh.write(head)
    fh.write(payload)
    return len(head) + len(payload)


def _read_exact(fh: BinaryIO, n: int) -> bytes:
    buf = fh.read(n)
    if len(buf) != n:
        raise ArtifactFormatError(f"unexpected end of file: wanted {n} bytes, got {len(buf)}")
    return buf


def read_tagged_array(fh: BinaryIO) -> np.ndarray:
    """Read one tagged record from ``fh``; raw-byte records come back as uint8 arrays."""
    tag = _read_exact(fh, 1)
    dtype = _TAG_DTYPE.get(tag)
    if dtype is None:
        raise ArtifactFormatError(f"unknown type tag {tag!r}")
    ndim = _read_exact(fh, 1)[0]
    shape = tuple(int(d) for d in np.frombuffer(_read_exact(fh, 8 * ndim), dtype=_DIM_DTYPE))
    count = int(np.prod(shape, dtype=np.int64)) if shape else 1
    data = _read_exact(fh, count * dtype.itemsize)
    return np.frombuffer(data, dtype=dtype).reshape(shape).copy()
