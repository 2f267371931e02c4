"""
Triplet production on a free electron: γ e⁻ → e⁺ e⁻ e⁻.

There are 8 tree-level diagrams, grouped in pairs that share a structure:

    CD  Compton scattering followed by Dalitz splitting of the final photon
    BH  Bethe-Heitler pair production off the target electron

Each pair comes in two copies, "2" and "3", named after the final electron
that connects to the initial one. The copies differ by the exchange of the
two identical final electrons and enter with a relative minus sign.

Every diagram is a product of two Dirac chains joined by the virtual photon,
one chain holding the initial electron (0) and the other the final positron
(1). The Lorentz index mu of the virtual photon is summed with metric signs.

The result d(sigma)/(dE+ dphi+ d^3q) is in microbarns/GeV^4/r, valid in any
frame the momenta are given in.
"""
import logging
import numpy as np

from ..dirac import GAMMA, METRIC_SIGNS, DiracMatrix, bilinear, propagator
from .base import CrossSection
from .spin_sum import INCOMING, OUTGOING

logger = logging.getLogger(__name__)

PI_FACTOR = (2 * np.pi) ** (4 - 9) * (4 * np.pi) ** 3


class TripletProduction(CrossSection):
    """
    γ e⁻ → e⁺ e⁻ e⁻ with full exchange symmetry of the final electrons.

    Leg order: photon_in, electron_in (0), positron_out (1),
    electron_out2 (2), electron_out3 (3). Momentum conservation
    g + p0 = p1 + p2 + p3 and equal lepton masses are assumed, not checked.
    """

    name = "triplet_production"
    description = "Triplet production γ e⁻ → e⁺ e⁻ e⁻, eight-diagram tree level"
    units = "microbarns/GeV^4/r"
    legs = ("photon_in", "electron_in", "positron_out", "electron_out2", "electron_out3")
    roles = (INCOMING, INCOMING, INCOMING, OUTGOING, OUTGOING)
    alpha_power = 3

    def amplitudes(self, g0, e0, e1, e2, e3) -> np.ndarray:
        mass = e0.mass
        u0 = e0.spinors()
        v1 = e1.antispinors()
        u2 = e2.spinors()
        u3 = e3.spinors()
        k = g0.momentum

        # electron propagators, a/b for the two diagrams of each pair
        denom_cd2a = +2 * k.scalar_prod(e0.momentum)
        denom_cd2b = -2 * k.scalar_prod(e2.momentum)
        denom_bh2a = -2 * k.scalar_prod(e1.momentum)
        denom_bh2b = -2 * k.scalar_prod(e3.momentum)
        logger.debug(
            f"triplet_production: edenoms = {denom_cd2a:.6e}, {denom_cd2b:.6e}, "
            f"{denom_bh2a:.6e}, {denom_bh2b:.6e}"
        )
        prop_cd2a = propagator(k + e0.momentum, mass, denom_cd2a)
        prop_cd2b = propagator(e2.momentum - k, mass, denom_cd2b)
        prop_bh2a = propagator(k - e1.momentum, mass, denom_bh2a)
        prop_bh2b = propagator(e3.momentum - k, mass, denom_bh2b)
        prop_cd3a, prop_cd3b = prop_cd2a, prop_bh2b
        prop_bh3a, prop_bh3b = prop_bh2a, prop_cd2b

        # photon propagators
        gprop_cd2 = 1 / (e1.momentum + e3.momentum).invariant_sqr()
        gprop_bh2 = 1 / (e0.momentum - e2.momentum).invariant_sqr()
        gprop_cd3 = 1 / (e1.momentum + e2.momentum).invariant_sqr()
        gprop_bh3 = 1 / (e0.momentum - e3.momentum).invariant_sqr()

        # axes: (gi, h0, h1, h2, h3)
        amps = np.zeros((2, 2, 2, 2, 2), dtype=complex)
        for gi in range(2):
            eps_in = DiracMatrix.slash(g0.eps(gi + 1))
            for mu in range(4):
                gmu = GAMMA[mu]
                cd2 = (gmu * prop_cd2a * eps_in + eps_in * prop_cd2b * gmu) * gprop_cd2
                bh2 = (gmu * prop_bh2a * eps_in + eps_in * prop_bh2b * gmu) * gprop_bh2
                cd3 = (gmu * prop_cd3a * eps_in + eps_in * prop_cd3b * gmu) * gprop_cd3
                bh3 = (gmu * prop_bh3a * eps_in + eps_in * prop_bh3b * gmu) * gprop_bh3

                # bilinear tables are indexed [final, initial]; a..d = h0..h3
                term = (
                    np.einsum("db,ca->abcd", bilinear(u3, gmu, v1), bilinear(u2, cd2, u0))
                    - np.einsum("cb,da->abcd", bilinear(u2, gmu, v1), bilinear(u3, cd3, u0))
                    + np.einsum("ca,db->abcd", bilinear(u2, gmu, u0), bilinear(u3, bh2, v1))
                    - np.einsum("da,cb->abcd", bilinear(u3, gmu, u0), bilinear(u2, bh3, v1))
                )
                amps[gi] += METRIC_SIGNS[mu] * term
        return amps

    def kinematic_factor(self, g0, e0, e1, e2, e3) -> float:
        flux = 4 * g0.momentum.E * (e0.momentum.magnitude + e0.momentum.E)
        rho = 1 / (8 * e3.momentum.E * (e1.momentum + e2.momentum).magnitude)
        return rho * PI_FACTOR / flux
