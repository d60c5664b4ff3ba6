from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
import pandas as pd


# Fixed column layout of one event row in the simulation log.
EVENT_COLUMNS: Tuple[str, ...] = (
    "event_id",
    "x_mm", "y_mm", "z_mm",
    "px", "py", "pz",
    "e_incident_kev", "e_det1_kev", "e_det2_kev",
)
N_EVENT_COLUMNS = len(EVENT_COLUMNS)

COL_EVENT_ID = 0
COLS_POSITION = slice(1, 4)
COLS_MOMENTUM = slice(4, 7)
COLS_ENERGY = slice(7, 10)

RUN_PARAMETER_NAMES: Tuple[str, ...] = (
    "job_id",
    "start_energy_kev",
    "n_steps",
    "events_per_step",
    "source_ctime",
    "source_mtime",
)


@dataclass(frozen=True)
class BinaryArtifact:
    """
    In-memory form of one converted simulation run.

    Attributes
    ----------
    descriptor:
        Human-readable preamble documenting field order and provenance.
    run_parameters:
        int64 array of shape ``(6,)``, see ``RUN_PARAMETER_NAMES``.
    energy3, position3, momentum3:
        float64 arrays of shape ``(3, n_events)``.
    event_id:
        int64 array of shape ``(n_events,)``.
    header:
        Verbatim simulation-tool preamble preceding the first block, as raw bytes.
    """

    descriptor: str
    run_parameters: np.ndarray
    energy3: np.ndarray
    position3: np.ndarray
    momentum3: np.ndarray
    event_id: np.ndarray
    header: bytes

    @property
    def n_events(self) -> int:
        return int(self.event_id.shape[0])

    def run_parameters_dict(self) -> Dict[str, int]:
        return {k: int(v) for k, v in zip(RUN_PARAMETER_NAMES, self.run_parameters)}

    def events_frame(self) -> pd.DataFrame:
        """Return the events as a DataFrame with the ten named log columns."""
        data = {"event_id": self.event_id}
        for names, block in (
            (EVENT_COLUMNS[COLS_POSITION], self.position3),
            (EVENT_COLUMNS[COLS_MOMENTUM], self.momentum3),
            (EVENT_COLUMNS[COLS_ENERGY], self.energy3),
        ):
            for name, row in zip(names, block):
                data[name] = row
        return pd.DataFrame(data, columns=list(EVENT_COLUMNS))
