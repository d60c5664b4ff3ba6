from __future__ import annotations

from typing import Dict, Optional, Tuple
import math
import re

from telescope_sim_converter.errors import MalformedFilenameError, UnrecognizedEnergyUnitError
from telescope_sim_converter.models.source import RunMetadata


# Energy unit suffix -> scale to keV. '0eV' is how the simulation names plain eV.
_UNIT_SCALE_KEV: Dict[str, float] = {
    "kev": 1.0,
    "mev": 1.0e3,
    "gev": 1.0e6,
    "0ev": 1.0e-3,
}

_TOKEN_SPLIT = re.compile(r"[_x]")

# Run parameters are stored as int64.
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def _check_int64(value: int, what: str, basename: str) -> int:
    if not (_INT64_MIN <= value <= _INT64_MAX):
        raise MalformedFilenameError(f"{what} {value} does not fit a 64-bit integer: {basename!r}")
    return value


def _strip_suffix(name: str, data_suffix: Optional[str]) -> str:
    if data_suffix and name.lower().endswith(data_suffix.lower()):
        return name[: -len(data_suffix)]
    return name


def split_tokens(basename: str, data_suffix: Optional[str] = ".txt") -> Tuple[str, str, str, str]:
    """
    Split a run filename into its four tokens on '_' and 'x'.

    >>> split_tokens("p1.0MeV_9x1.E+06_ptel.j3")
    ('p1.0MeV', '9', '1.E+06', 'ptel.j3')
    """
    stem = _strip_suffix(basename, data_suffix)
    toks = _TOKEN_SPLIT.split(stem)
    if len(toks) != 4:
        raise MalformedFilenameError(f"expected 4 tokens split on '_'/'x', got {len(toks)}: {basename!r}")
    return toks[0], toks[1], toks[2], toks[3]


def parse_energy_token(token: str) -> Tuple[str, float]:
    """
    Parse '<species><value><unit>' into (species, start energy in keV).

    The unit is always the trailing three characters, matched case-insensitively.
    """
    if len(token) < 5:
        raise MalformedFilenameError(f"energy token too short: {token!r}")
    species = token[0]
    unit = token[-3:]
    scale = _UNIT_SCALE_KEV.get(unit.lower())
    if scale is None:
        raise UnrecognizedEnergyUnitError(f"energy unit {unit!r} not in keV/MeV/GeV/0eV: {token!r}")
    raw = token[1:-3]
    try:
        value = float(raw)
    except ValueError:
        raise MalformedFilenameError(f"energy value {raw!r} is not numeric: {token!r}") from None
    if not math.isfinite(value):
        raise MalformedFilenameError(f"energy value {raw!r} is not finite: {token!r}")
    return species, value * scale


def _parse_telescope_job(token: str) -> Tuple[str, int]:
    parts = token.split(".")
    if len(parts) < 2:
        raise MalformedFilenameError(f"telescope/job token has no '.' separator: {token!r}")
    telescope = parts[0]
    job_raw = parts[-1][1:]
    try:
        job_id = int(job_raw)
    except ValueError:
        raise MalformedFilenameError(f"job id {job_raw!r} is not an integer: {token!r}") from None
    return telescope, job_id


def parse_run_filename(basename: str, data_suffix: Optional[str] = ".txt") -> RunMetadata:
    """
    Derive RunMetadata from a structured simulation filename.

    Layout (separators '_' and 'x'):
      <species><energy><unit>_<n_steps>x<events_per_step>_<telescope>.<j><job_id>

    Raises MalformedFilenameError or UnrecognizedEnergyUnitError.
    """
    tok_energy, tok_steps, tok_events, tok_tel = split_tokens(basename, data_suffix)

    species, start_energy_kev = parse_energy_token(tok_energy)

    try:
        n_steps = int(tok_steps)
    except ValueError:
        raise MalformedFilenameError(f"step count {tok_steps!r} is not an integer: {basename!r}") from None

    try:
        events_per_step = int(float(tok_events))
    except (ValueError, OverflowError):
        raise MalformedFilenameError(f"events per step {tok_events!r} is not numeric: {basename!r}") from None

    telescope_type, job_id = _parse_telescope_job(tok_tel)

    _check_int64(int(start_energy_kev), "start energy [keV]", basename)
    _check_int64(n_steps, "step count", basename)
    _check_int64(events_per_step, "events per step", basename)
    _check_int64(job_id, "job id", basename)

    return RunMetadata(
        species=species,
        species_energy_token=tok_energy,
        start_energy_kev=float(start_energy_kev),
        n_steps=n_steps,
        events_per_step=events_per_step,
        telescope_type=telescope_type,
        job_id=job_id,
    )
