"""Analysis package - read-only views of converted artifacts.

The geometric-factor reduction itself lives downstream; this package only
offers quick-look diagnostics.
"""

from .quicklook import plot_energy_deposits

__all__ = [
    "plot_energy_deposits",
]
