"""
Electron-electron bremsstrahlung: e⁻ e⁻ → e⁻ e⁻ γ.

The 8 tree-level diagrams:

    A1, A2  initial / final state radiation on the line 0 → 2
    B1, B2  initial / final state radiation on the line 1 → 3
    C, D    copies of A and B with the final electrons 2 and 3 swapped

The swapped copies enter with a relative minus sign. Each diagram joins a
chain holding electron 0 to a chain holding electron 1 through the virtual
photon, whose Lorentz index is summed with metric signs.

Partial cross section d(sigma)/(dk dphi d^3q) in microbarns/GeV^4/r.
"""
import logging
import numpy as np

from ..dirac import GAMMA, METRIC_SIGNS, DiracMatrix, bilinear, propagator
from .base import CrossSection
from .spin_sum import INCOMING, OUTGOING

logger = logging.getLogger(__name__)


class EEBremsstrahlung(CrossSection):
    """
    Radiative Møller scattering off a free target electron.

    Leg order: electron_in0, electron_in1, electron_out2, electron_out3,
    photon_out. Momentum conservation is assumed, not checked.
    """

    name = "ee_bremsstrahlung"
    description = "Electron-electron bremsstrahlung e⁻ e⁻ → e⁻ e⁻ γ, eight-diagram tree level"
    units = "microbarns/GeV^4/r"
    legs = ("electron_in0", "electron_in1", "electron_out2", "electron_out3", "photon_out")
    roles = (INCOMING, INCOMING, OUTGOING, OUTGOING, OUTGOING)
    alpha_power = 3

    def amplitudes(self, e0, e1, e2, e3, g) -> np.ndarray:
        mass = e0.mass
        u0 = e0.spinors()
        u1 = e1.spinors()
        u2 = e2.spinors()
        u3 = e3.spinors()
        k = g.momentum

        denom_a1 = -2 * k.scalar_prod(e0.momentum)
        denom_a2 = +2 * k.scalar_prod(e2.momentum)
        denom_b1 = -2 * k.scalar_prod(e1.momentum)
        denom_b2 = +2 * k.scalar_prod(e3.momentum)
        logger.debug(
            f"ee_bremsstrahlung: edenoms = {denom_a1:.6e}, {denom_a2:.6e}, "
            f"{denom_b1:.6e}, {denom_b2:.6e}"
        )
        prop_a1 = propagator(e0.momentum - k, mass, denom_a1)
        prop_a2 = propagator(e2.momentum + k, mass, denom_a2)
        prop_b1 = propagator(e1.momentum - k, mass, denom_b1)
        prop_b2 = propagator(e3.momentum + k, mass, denom_b2)
        prop_c1, prop_c2 = prop_a1, prop_b2
        prop_d1, prop_d2 = prop_b1, prop_a2

        gprop_a = 1 / (e1.momentum - e3.momentum).invariant_sqr()
        gprop_b = 1 / (e0.momentum - e2.momentum).invariant_sqr()
        gprop_c = 1 / (e1.momentum - e2.momentum).invariant_sqr()
        gprop_d = 1 / (e0.momentum - e3.momentum).invariant_sqr()

        # axes: (h0, h1, h2, h3, gf)
        amps = np.zeros((2, 2, 2, 2, 2), dtype=complex)
        for gf in range(2):
            eps_out = DiracMatrix.slash(g.eps_star(gf + 1))
            for mu in range(4):
                gmu = GAMMA[mu]
                A = (gmu * prop_a1 * eps_out + eps_out * prop_a2 * gmu) * gprop_a
                B = (gmu * prop_b1 * eps_out + eps_out * prop_b2 * gmu) * gprop_b
                C = (gmu * prop_c1 * eps_out + eps_out * prop_c2 * gmu) * gprop_c
                D = (gmu * prop_d1 * eps_out + eps_out * prop_d2 * gmu) * gprop_d

                # bilinear tables are indexed [final, initial]; a..d = h0..h3
                term = (
                    np.einsum("db,ca->abcd", bilinear(u3, gmu, u1), bilinear(u2, A, u0))
                    + np.einsum("ca,db->abcd", bilinear(u2, gmu, u0), bilinear(u3, B, u1))
                    - np.einsum("cb,da->abcd", bilinear(u2, gmu, u1), bilinear(u3, C, u0))
                    - np.einsum("da,cb->abcd", bilinear(u3, gmu, u0), bilinear(u2, D, u1))
                )
                amps[..., gf] += METRIC_SIGNS[mu] * term
        return amps

    def kinematic_factor(self, e0, e1, e2, e3, g) -> float:
        kin = 1 / (2 * np.pi * e0.momentum.E) ** 2
        return kin / (4 * e1.momentum.E * e3.momentum.E)
