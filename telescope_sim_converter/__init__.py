"""Telescope Simulation Converter -- Python tooling for particle-telescope Monte-Carlo output.

This package provides tools for:
- Discovering simulation log files (single file or directory glob)
- Mining run parameters from structured filenames
- Locating sentinel-delimited event blocks with a two-pass scan (offset bookmarks, then seeks)
- Assembling a self-describing binary artifact per simulation run
- Reading artifacts back for the downstream geometric-factor reduction

Key principles:
- One source file -> one artifact; no state survives between files
- No precision loss: event values are stored as float64/int64 exactly as parsed
- Full traceability: every artifact embeds a descriptor with provenance

Main subpackages:
- ingest: Filename metadata, sentinel scanner, block extractor, source discovery
- export: Tagged-array codec, artifact assembler and reader
- models: Data models (SourceFile, RunMetadata, BlockDescriptor, BinaryArtifact)
- analysis: Quick-look plots of converted runs
- scripts: Command-line entry point
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
