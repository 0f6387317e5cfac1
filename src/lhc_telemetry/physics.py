"""Relativistic speed from total beam energy.

Uses the proton rest mass for every species: the source reports ion beam
energies in the proton-equivalent convention, so the same mass applies.
"""

from __future__ import annotations

import math

PROTON_REST_MASS_GEV = 0.9382720813


def lorentz_factor(energy_gev: float) -> float:
    """Return gamma = E / m0, or 1.0 for a non-positive or NaN energy."""
    if energy_gev > 0:
        return energy_gev / PROTON_REST_MASS_GEV
    return 1.0


def beta_from_energy(energy_gev: float) -> float:
    """Convert total beam energy (GeV) to beta = v / c.

    Total over all floats: non-positive, NaN, and sub-rest-mass energies map
    to 0.0, infinite energy maps to 1.0. The result is clamped to [0, 1].

    Args:
        energy_gev: Total (not per-nucleon) beam energy in GeV.

    Returns:
        Beta in [0, 1].
    """
    gamma = lorentz_factor(energy_gev)
    if not gamma > 1.0:
        return 0.0
    beta_squared = 1.0 - 1.0 / (gamma * gamma)
    return math.sqrt(max(0.0, min(1.0, beta_squared)))
