"""
Pair production by a photon in the field of a heavy target: γ → e⁻ e⁺ (+ q).

Partial cross section d(sigma)/(dE dphi d^3q) in microbarns/GeV^4/r, with E
the energy of the final electron; the form-factor integral over the recoil
q = k - p_e - p_p is left to the caller. Lab frame only.
"""
import logging
import math
import numpy as np

from ..constants import ELECTRON_MASS
from ..dirac import GAMMA0, DiracMatrix, bilinear, propagator
from ..kinematics import FourVector, ThreeVector
from .base import CrossSection
from .spin_sum import INCOMING, OUTGOING

logger = logging.getLogger(__name__)


class PairProduction(CrossSection):
    """
    Bethe-Heitler pair production in an external Coulomb field.

    The positron leg pairs its SDM like an incoming leg: its spinor enters
    the amplitude on the right, where an incoming lepton's would.
    """

    name = "pair_production"
    description = "Pair production γ → e⁻ e⁺ in an external field"
    units = "microbarns/GeV^4/r"
    legs = ("photon_in", "electron_out", "positron_out")
    roles = (INCOMING, OUTGOING, INCOMING)
    alpha_power = 3

    @staticmethod
    def recoil(g_in, e_out, p_out):
        return g_in.momentum - e_out.momentum - p_out.momentum

    def amplitudes(self, g_in, e_out, p_out) -> np.ndarray:
        u_out = e_out.spinors()
        v_out = p_out.antispinors()
        mass = e_out.mass

        denom1 = -2 * g_in.momentum.scalar_prod(e_out.momentum)
        denom2 = -2 * g_in.momentum.scalar_prod(p_out.momentum)
        logger.debug(f"pair_production: edenom1 = {denom1:.6e}, edenom2 = {denom2:.6e}")
        prop1 = propagator(e_out.momentum - g_in.momentum, mass, denom1)
        prop2 = propagator(g_in.momentum - p_out.momentum, mass, denom2)

        amps = np.zeros((2, 2, 2), dtype=complex)
        for gi in range(2):
            eps_in = DiracMatrix.slash(g_in.eps(gi + 1))
            D = eps_in * prop1 * GAMMA0 + GAMMA0 * prop2 * eps_in
            amps[gi] = bilinear(u_out, D, v_out)
        return amps

    def kinematic_factor(self, g_in, e_out, p_out) -> float:
        q = self.recoil(g_in, e_out, p_out)
        kin = 1 / (2 * np.pi * g_in.momentum.E) ** 2
        return kin / q.invariant_sqr() ** 2


def pair_kinematics(energy: float, fraction: float, theta_e: float, theta_p: float,
                    phi: float = 0.0, mass: float = ELECTRON_MASS):
    """
    Lab-frame pair kinematics with zero recoil energy.

    Photon of the given energy along +z; the electron takes `fraction` of
    it and leaves at (theta_e, phi), the positron takes the rest and leaves
    at (theta_p, phi + pi).

    Returns:
        (photon_in, electron_out, positron_out) four-momenta
    """
    e_minus = fraction * energy
    e_plus = energy - e_minus
    if not (e_minus > mass and e_plus > mass):
        raise ValueError(f"energy fraction {fraction} leaves a lepton below its mass")
    g_in = FourVector(energy, 0.0, 0.0, energy)
    electron = FourVector.from_three(
        e_minus, ThreeVector.from_polar(math.sqrt(e_minus ** 2 - mass ** 2), theta_e, phi))
    positron = FourVector.from_three(
        e_plus, ThreeVector.from_polar(math.sqrt(e_plus ** 2 - mass ** 2), theta_p, phi + math.pi))
    return g_in, electron, positron
