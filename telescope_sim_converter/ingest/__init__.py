"""Ingest package - source discovery and simulation log parsing.

This package handles:
- Resolving a file or directory into the list of simulation logs
- Mining run parameters from structured filenames
- Pass 1: scanning sentinel lines into block bookmarks (line numbers + byte offsets)
- Pass 2: seeking to each bookmark and reading the event rows

Key functions:
- parse_run_filename: filename -> RunMetadata
- scan: seekable reader -> ScanResult
- extract: seekable reader + blocks -> (N, 10) float64 matrix
- capture_header: preamble lines before the first block

Design principle:
- scan/extract are pure with respect to the reader; they never open files themselves
- No state is shared between source files
"""
from .discovery import resolve_sources
from .extractor import capture_header, extract
from .filename_meta import parse_run_filename
from .scanner import DEFAULT_SENTINEL, LineReader, scan

__all__ = [
    "resolve_sources",
    "capture_header",
    "extract",
    "parse_run_filename",
    "DEFAULT_SENTINEL",
    "LineReader",
    "scan",
]
