"""Export package - binary artifact writing and reading.

The artifact is a sequence of seven tagged-array records in fixed order; the
first record is a human-readable descriptor documenting that order.
"""
from .assembler import assemble, build_descriptor, run_parameters, write_artifact
from .reader import read_artifact
from .tagged_array import read_tagged_array, write_tagged_array

__all__ = [
    "assemble",
    "build_descriptor",
    "run_parameters",
    "write_artifact",
    "read_artifact",
    "read_tagged_array",
    "write_tagged_array",
]
