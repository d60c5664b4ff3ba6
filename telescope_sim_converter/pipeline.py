from __future__ import annotations

"""Per-file conversion and the sequential batch driver.

Each source file goes through: filename metadata -> scan (pass 1) ->
extract (pass 2) -> header -> artifact. Everything derived from a file lives
in local variables of :func:`convert_file`; nothing carries over to the next file.
"""

from pathlib import Path
from typing import List, Optional, Set

from telescope_sim_converter.config import ConverterConfig
from telescope_sim_converter.errors import (
    ConversionError,
    EmptyDatasetError,
    FilenameParseError,
    InvalidSourceError,
)
from telescope_sim_converter.export.assembler import assemble, write_artifact
from telescope_sim_converter.ingest.discovery import resolve_sources
from telescope_sim_converter.ingest.extractor import capture_header, extract
from telescope_sim_converter.ingest.filename_meta import parse_run_filename
from telescope_sim_converter.ingest.scanner import scan
from telescope_sim_converter.models.outcome import BatchReport, FileOutcome
from telescope_sim_converter.models.source import RunMetadata, SourceFile


def _output_path(meta: RunMetadata, source: SourceFile, config: ConverterConfig) -> Path:
    out_dir = Path(config.output_dir) if config.output_dir is not None else source.path.parent
    return out_dir / meta.output_name


def convert_file(
    path: str | Path,
    config: Optional[ConverterConfig] = None,
    *,
    written: Optional[Set[Path]] = None,
) -> FileOutcome:
    """
    Convert one simulation log into one artifact.

    Never raises for expected conditions; the outcome carries the reason instead.
    ``written`` collects output paths already produced in the current batch so
    silent overwrites can at least be reported.
    """
    cfg = config or ConverterConfig()
    p = Path(path).expanduser().resolve()
    warnings: List[str] = []

    try:
        source = SourceFile.from_path(p)
    except OSError as e:
        return FileOutcome(source_path=p, status="failed", reason="IOError", message=f"{type(e).__name__}: {e}")

    try:
        meta = parse_run_filename(source.name, cfg.data_suffix)
    except FilenameParseError as e:
        if not cfg.placeholder_metadata:
            return FileOutcome(source_path=p, status="skipped", reason=e.reason, message=str(e))
        meta = RunMetadata.placeholder()
        warnings.append(f"{e.reason}: {e}; using placeholder metadata")

    try:
        with open(p, "rb") as fh:
            result = scan(fh, cfg.sentinel)
            warnings.extend(result.warnings)
            if not result.valid_blocks:
                raise EmptyDatasetError(
                    f"no block with rows found ({result.n_sentinels} sentinels in {result.n_lines} lines)"
                )
            matrix = extract(fh, result.valid_blocks)
            header = capture_header(fh, result.first_block)
    except ConversionError as e:
        return FileOutcome(
            source_path=p,
            status="skipped",
            reason=e.reason,
            message=str(e),
            metadata=meta,
            warnings=tuple(warnings),
        )
    except OSError as e:
        return FileOutcome(
            source_path=p,
            status="failed",
            reason="IOError",
            message=f"{type(e).__name__}: {e}",
            metadata=meta,
            warnings=tuple(warnings),
        )

    artifact = assemble(
        matrix,
        meta,
        source,
        header,
        operator=cfg.operator,
        tool_version=cfg.tool_version,
    )

    out = _output_path(meta, source, cfg)
    if written is not None:
        if out in written:
            warnings.append(f"output {out.name} already written in this batch; overwritten")
        written.add(out)

    try:
        write_artifact(artifact, out)
    except OSError as e:
        return FileOutcome(
            source_path=p,
            status="failed",
            reason="IOError",
            message=f"could not write {out}: {type(e).__name__}: {e}",
            metadata=meta,
            warnings=tuple(warnings),
        )

    return FileOutcome(
        source_path=p,
        status="ok",
        output_path=out,
        metadata=meta,
        n_events=artifact.n_events,
        warnings=tuple(warnings),
    )


def convert_batch(source: str | Path, config: Optional[ConverterConfig] = None) -> BatchReport:
    """
    Resolve ``source`` (file or directory) and convert every match sequentially.

    Zero matches yields a report with no outcomes and an InvalidSource warning.
    """
    cfg = config or ConverterConfig()
    src = Path(source).expanduser()
    try:
        files = resolve_sources(src, cfg.pattern)
    except InvalidSourceError as e:
        return BatchReport(source=src, outcomes=(), warnings=(f"{e.reason}: {e}",))

    written: Set[Path] = set()
    outcomes = [convert_file(f, cfg, written=written) for f in files]
    return BatchReport(source=src, outcomes=tuple(outcomes))
