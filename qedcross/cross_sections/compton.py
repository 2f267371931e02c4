"""
Compton scattering off a free lepton: γ e → γ e.

Two diagrams (s- and u-channel electron exchange). The result is the
differential cross section d(sigma)/dOmega of the final photon in the frame
the momenta are given in, in microbarns/sr.
"""
import logging
import math
from typing import Tuple
import numpy as np

from ..constants import ALPHA_QED, ELECTRON_MASS, HBARC_SQR
from ..dirac import DiracMatrix, bilinear, propagator
from ..kinematics import FourVector, ThreeVector
from .base import CrossSection
from .spin_sum import INCOMING, OUTGOING

logger = logging.getLogger(__name__)


class ComptonScattering(CrossSection):
    """
    Leading-order Compton scattering.

    Applies to:
        - γ e⁻ → γ e⁻ for any initial electron momentum
        - polarized photon beams and polarized targets via the leg SDMs

    It is assumed that the momenta conserve four-momentum and that the two
    leptons have the same mass; neither is checked.
    """

    name = "compton"
    description = "Compton scattering γ e → γ e, two-diagram tree level"
    units = "microbarns/sr"
    legs = ("photon_in", "lepton_in", "photon_out", "lepton_out")
    roles = (INCOMING, INCOMING, OUTGOING, OUTGOING)
    alpha_power = 2

    def amplitudes(self, g_in, e_in, g_out, e_out) -> np.ndarray:
        u_in = e_in.spinors()
        u_out = e_out.spinors()
        mass = e_in.mass

        denom1 = +2 * e_in.momentum.scalar_prod(g_in.momentum)
        denom2 = -2 * e_in.momentum.scalar_prod(g_out.momentum)
        logger.debug(f"compton: edenom1 = {denom1:.6e}, edenom2 = {denom2:.6e}")
        prop1 = propagator(e_in.momentum + g_in.momentum, mass, denom1)
        prop2 = propagator(e_in.momentum - g_out.momentum, mass, denom2)

        amps = np.zeros((2, 2, 2, 2), dtype=complex)
        for gi in range(2):
            eps_in = DiracMatrix.slash(g_in.eps(gi + 1))
            for gf in range(2):
                eps_out = DiracMatrix.slash(g_out.eps_star(gf + 1))
                D = eps_out * prop1 * eps_in + eps_in * prop2 * eps_out
                # bilinear is indexed [hf, hi]
                amps[gi, :, gf, :] = bilinear(u_out, D, u_in).T
        return amps

    def kinematic_factor(self, g_in, e_in, g_out, e_out) -> float:
        flux = 4 * g_in.momentum.E * (e_in.momentum.magnitude + e_in.momentum.E)
        rho = g_out.momentum.E ** 2 / e_out.momentum.scalar_prod(g_out.momentum) / 4
        return 4 * rho / flux


def klein_nishina(k_in: float, k_out: float, mass: float = ELECTRON_MASS,
                  alpha: float = ALPHA_QED, hbarc_sqr: float = HBARC_SQR) -> float:
    """
    Unpolarized Klein-Nishina d(sigma)/dOmega in microbarns/sr for a
    lepton at rest.

    The scattering angle is recovered from the Compton relation
    1 - cos(theta) = m (1/k_out - 1/k_in).
    """
    if k_in <= 0 or k_out <= 0:
        raise ValueError(f"photon energies must be positive, got {k_in}, {k_out}")
    cos_theta = 1 - mass * (1 / k_out - 1 / k_in)
    sin_sqr = max(0.0, 1 - cos_theta ** 2)
    ratio = k_out / k_in
    return (alpha / mass) ** 2 / 2 * ratio ** 2 * (ratio + 1 / ratio - sin_sqr) * hbarc_sqr


def compton_kinematics(energy: float, theta: float, phi: float = 0.0,
                       mass: float = ELECTRON_MASS) -> Tuple[FourVector, FourVector, FourVector, FourVector]:
    """
    Lab-frame Compton kinematics.

    Photon of the given energy along +z on a lepton at rest, final photon
    at polar angle theta and azimuth phi.

    Returns:
        (photon_in, lepton_in, photon_out, lepton_out) four-momenta
    """
    if energy <= 0:
        raise ValueError(f"photon energy must be positive, got {energy}")
    k_out = energy / (1 + (energy / mass) * (1 - math.cos(theta)))
    g_in = FourVector(energy, 0.0, 0.0, energy)
    e_in = FourVector(mass, 0.0, 0.0, 0.0)
    g_out = FourVector.from_three(k_out, ThreeVector.from_polar(k_out, theta, phi))
    e_out = g_in + e_in - g_out
    return g_in, e_in, g_out, e_out
