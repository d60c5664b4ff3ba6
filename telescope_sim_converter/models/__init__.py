from .artifact import BinaryArtifact, EVENT_COLUMNS, RUN_PARAMETER_NAMES
from .blocks import BlockDescriptor, ScanResult
from .outcome import BatchReport, FileOutcome
from .source import RunMetadata, SourceFile

__all__ = [
    "BinaryArtifact",
    "EVENT_COLUMNS",
    "RUN_PARAMETER_NAMES",
    "BlockDescriptor",
    "ScanResult",
    "BatchReport",
    "FileOutcome",
    "RunMetadata",
    "SourceFile",
]
