"""
Bremsstrahlung of a lepton in the field of a heavy target: e → e γ (+ q).

The target only absorbs the recoil momentum q = p_in - p_out - k through a
static Coulomb vertex (gamma0), so the result is a partial cross section
d(sigma)/(dk dphi d^3q) in microbarns/GeV^4/r that still has to be folded
with the target form factor. The calculation is performed in the lab frame,
the frame in which the recoil carries no energy.
"""
import logging
import math
import numpy as np

from ..constants import ELECTRON_MASS
from ..dirac import GAMMA0, DiracMatrix, bilinear, propagator
from ..kinematics import FourVector, ThreeVector
from .base import CrossSection
from .spin_sum import INCOMING, OUTGOING, partial_spin_sum

logger = logging.getLogger(__name__)


class Bremsstrahlung(CrossSection):
    """
    Radiation off a lepton scattering from an external Coulomb field.

    It is assumed that E_in = E_out + k and that both leptons have the same
    mass; neither is checked.
    """

    name = "bremsstrahlung"
    description = "Bremsstrahlung e → e γ in an external field"
    units = "microbarns/GeV^4/r"
    legs = ("lepton_in", "lepton_out", "photon_out")
    roles = (INCOMING, OUTGOING, OUTGOING)
    alpha_power = 3

    @staticmethod
    def recoil(e_in, e_out, g_out):
        return e_in.momentum - e_out.momentum - g_out.momentum

    def amplitudes(self, e_in, e_out, g_out) -> np.ndarray:
        u_in = e_in.spinors()
        u_out = e_out.spinors()
        mass = e_in.mass
        q = self.recoil(e_in, e_out, g_out)

        denom1 = q.invariant_sqr() - 2 * q.scalar_prod(e_in.momentum)
        denom2 = q.invariant_sqr() + 2 * q.scalar_prod(e_out.momentum)
        logger.debug(f"bremsstrahlung: edenom1 = {denom1:.6e}, edenom2 = {denom2:.6e}")
        prop1 = propagator(e_in.momentum - q, mass, denom1)
        prop2 = propagator(e_out.momentum + q, mass, denom2)

        amps = np.zeros((2, 2, 2), dtype=complex)
        for gf in range(2):
            eps_out = DiracMatrix.slash(g_out.eps_star(gf + 1))
            D = eps_out * prop1 * GAMMA0 + GAMMA0 * prop2 * eps_out
            amps[:, :, gf] = bilinear(u_out, D, u_in).T
        return amps

    def diagnostics(self, amps, states) -> dict:
        # photon helicity matrix: diagonal real positive, off-diagonal conjugate pairs
        aabar = partial_spin_sum(amps, [s.sdm for s in states], self.roles, keep=2)
        return {f"AAbar[{i}][{j}]": complex(aabar[i, j]) for i in range(2) for j in range(2)}

    def kinematic_factor(self, e_in, e_out, g_out) -> float:
        q = self.recoil(e_in, e_out, g_out)
        kin = 1 / (2 * np.pi * e_in.momentum.E) ** 2
        return kin / q.invariant_sqr() ** 2


def bremsstrahlung_kinematics(energy: float, k: float, theta_e: float, theta_g: float,
                              phi: float = 0.0, mass: float = ELECTRON_MASS):
    """
    Lab-frame bremsstrahlung kinematics with zero recoil energy.

    Lepton of total energy `energy` along +z radiates a photon of energy k
    at (theta_g, phi); the final lepton leaves at (theta_e, phi + pi).

    Returns:
        (lepton_in, lepton_out, photon_out) four-momenta
    """
    if not mass < energy - k:
        raise ValueError(f"photon energy {k} leaves no room for a lepton of mass {mass}")
    p_in = math.sqrt(energy ** 2 - mass ** 2)
    e_out = energy - k
    p_out = math.sqrt(e_out ** 2 - mass ** 2)
    e_in = FourVector(energy, 0.0, 0.0, p_in)
    lepton = FourVector.from_three(e_out, ThreeVector.from_polar(p_out, theta_e, phi + math.pi))
    photon = FourVector.from_three(k, ThreeVector.from_polar(k, theta_g, phi))
    return e_in, lepton, photon

