from __future__ import annotations

"""Exception taxonomy for the conversion pipeline.

All per-file errors are caught at the batch boundary and turned into a
:class:`~telescope_sim_converter.models.outcome.FileOutcome`; none of them stops
a batch.
"""


class ConversionError(ValueError):
    """Base class for recoverable, per-file conversion problems."""

    reason: str = "ConversionError"


class InvalidSourceError(FileNotFoundError):
    """The user-supplied path resolved to zero readable source files."""

    reason = "InvalidSource"


class FilenameParseError(ConversionError):
    reason = "FilenameParseError"


class MalformedFilenameError(FilenameParseError):
    """Basename does not split into exactly four tokens, or a token is not numeric."""

    reason = "MalformedFilename"


class UnrecognizedEnergyUnitError(FilenameParseError):
    reason = "UnrecognizedEnergyUnit"


class EmptyDatasetError(ConversionError):
    """No sentinel block with a positive row count was found."""

    reason = "EmptyDataset"


class BlockFormatError(ConversionError):
    """A block row does not have exactly 10 numeric fields, or the block is cut short."""

    reason = "BlockFormat"


class ArtifactFormatError(ValueError):
    """Raised by the artifact reader when a file does not follow the field layout."""

    reason = "ArtifactFormat"
