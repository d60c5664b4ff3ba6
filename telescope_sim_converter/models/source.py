from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os


@dataclass(frozen=True)
class SourceFile:
    """
    One simulation log on disk, captured once before processing.

    Notes
    - ctime/mtime are whole seconds since the epoch, as stored in the artifact.
    - ctime follows ``os.stat`` semantics (inode change time on POSIX).
    """
    path: Path
    size: int
    ctime: int
    mtime: int

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceFile":
        p = Path(path).expanduser().resolve()
        st = os.stat(p)
        return cls(path=p, size=int(st.st_size), ctime=int(st.st_ctime), mtime=int(st.st_mtime))


@dataclass(frozen=True)
class RunMetadata:
    """
    Run parameters mined from a simulation log filename.

    species: particle code (first character of the first token, e.g. 'p', 'e')
    species_energy_token: first filename token verbatim (e.g. 'p1.0MeV'), reused in output names
    start_energy_kev: start energy normalized to keV
    n_steps: number of energy steps
    events_per_step: simulated events per step
    telescope_type: detector configuration code (e.g. 'ptel', 'etel')
    job_id: simulation job identifier
    """
    species: str
    species_energy_token: str
    start_energy_kev: float
    n_steps: int
    events_per_step: int
    telescope_type: str
    job_id: int

    @classmethod
    def placeholder(cls) -> "RunMetadata":
        """Metadata used when a filename cannot be parsed and placeholders are allowed."""
        return cls(
            species="u",
            species_energy_token="u0keV",
            start_energy_kev=0.0,
            n_steps=0,
            events_per_step=0,
            telescope_type="utel",
            job_id=0,
        )

    @property
    def output_name(self) -> str:
        return f"{self.telescope_type}_{self.species_energy_token}_{self.job_id}.bin"
