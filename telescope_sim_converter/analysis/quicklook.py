from __future__ import annotations

"""Quick-look plots of a converted run.

Read-only with respect to the artifact. Used to eyeball the detector-1 vs
detector-2 deposit correlation before handing a run to the geometric-factor
reduction.
"""

from typing import Optional

import numpy as np

from telescope_sim_converter.models.artifact import BinaryArtifact


def _decimate(x: np.ndarray, k: int) -> np.ndarray:
    k = int(k)
    if k <= 1:
        return x
    return x[..., ::k]


def _get_pyplot():
    """Import pyplot lazily (backend must already be configured)."""
    import matplotlib.pyplot as plt
    return plt


def plot_energy_deposits(
    artifact: BinaryArtifact,
    ax: Optional[object] = None,
    *,
    max_points: int = 200_000,
    title: Optional[str] = None,
):
    """
    Scatter detector-1 deposit against detector-2 deposit, both in keV.

    Events with zero deposit in both detectors are not drawn. Returns the figure.
    """
    e = artifact.energy3
    hit = (e[1] != 0.0) | (e[2] != 0.0)
    e_hit = e[:, hit]
    n_hit = int(e_hit.shape[1])
    k = max(1, int(np.ceil(n_hit / float(max_points)))) if max_points > 0 else 1
    e_plot = _decimate(e_hit, k)

    if ax is None:
        plt = _get_pyplot()
        fig, ax = plt.subplots(figsize=(6, 5))
    else:
        fig = ax.figure

    ax.scatter(e_plot[1], e_plot[2], s=2, alpha=0.5)
    ax.set_xlabel("detector-1 deposit [keV]")
    ax.set_ylabel("detector-2 deposit [keV]")
    params = artifact.run_parameters_dict()
    ax.set_title(title or f"job {params['job_id']}: {n_hit}/{artifact.n_events} events with deposit")
    if k > 1:
        ax.text(0.99, 0.01, f"decimated x{k}", transform=ax.transAxes, ha="right", va="bottom", fontsize=8)
    return fig
