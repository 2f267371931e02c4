"""
External-line particle states: photons and leptons.

Every state carries a four-momentum and a 2x2 spin-density matrix (SDM).
Lepton SDMs are indexed by helicity (+1/2, -1/2); photon SDMs by the
polarization index j = 1, 2 of eps(j), which are the helicity +1 and -1
states respectively.

The same SDM conventions apply to initial and final states:
  * a pure-state SDM selects that polarization;
  * the unit matrix sums a final leg over its polarizations
    (use unpolarized_sdm(), trace 1, to average an initial leg);
  * a general Hermitian SDM acts as a polarization-dependent efficiency.
"""

from __future__ import annotations
import cmath
import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Union
import numpy as np

from .constants import ELECTRON_MASS
from .dirac import DiracSpinor, spinor_pair
from .kinematics import ComplexFourVector, FourVector, ThreeVector

SDM_TOLERANCE = 1e-12


# -------------------- SDM helpers --------------------

def unpolarized_sdm() -> np.ndarray:
    """Unpolarized ensemble, trace 1."""
    return 0.5 * np.eye(2, dtype=complex)


def summed_sdm() -> np.ndarray:
    """Unit matrix: sum over the polarizations of a final-state leg."""
    return np.eye(2, dtype=complex)


def pure_sdm(coeffs: Sequence[complex]) -> np.ndarray:
    """Pure state sum_j coeffs[j] |j>, normalized to trace 1."""
    c = np.asarray(coeffs, dtype=complex)
    if c.shape != (2,):
        raise ValueError(f"pure_sdm needs 2 coefficients, got shape {c.shape}")
    norm = float(np.vdot(c, c).real)
    if norm == 0.0:
        raise ValueError("pure_sdm needs a non-zero state vector")
    return np.outer(c, c.conj()) / norm


def helicity_sdm(helicity: float) -> np.ndarray:
    """Pure helicity state: +-1/2 for leptons, +-1 for photons."""
    if helicity in (+0.5, +1):
        return pure_sdm([1.0, 0.0])
    if helicity in (-0.5, -1):
        return pure_sdm([0.0, 1.0])
    raise ValueError(f"helicity must be +-1/2 or +-1, got {helicity}")


def linear_polarization_sdm(phi: float) -> np.ndarray:
    """
    Photon linearly polarized at angle phi from e1 towards e2 of the
    photon's transverse frame, in the helicity basis of eps(1), eps(2).
    """
    c1 = -cmath.exp(-1j * phi) / math.sqrt(2.0)
    c2 = cmath.exp(1j * phi) / math.sqrt(2.0)
    return pure_sdm([c1, c2])


def validate_sdm(sdm) -> np.ndarray:
    rho = np.array(sdm, dtype=complex)
    if rho.shape != (2, 2):
        raise ValueError(f"SDM must be 2x2, got shape {rho.shape}")
    scale = max(1.0, float(np.max(np.abs(rho))))
    if np.max(np.abs(rho - rho.conj().T)) > SDM_TOLERANCE * scale:
        raise ValueError(f"SDM must be Hermitian, got {rho.tolist()}")
    return rho


# -------------------- Particle states --------------------

@dataclass(frozen=True, eq=False)
class Lepton:
    """Lepton (or antilepton) leg with helicity-basis SDM."""

    momentum: FourVector
    mass: float = ELECTRON_MASS
    sdm: np.ndarray = field(default_factory=unpolarized_sdm)

    def __post_init__(self):
        object.__setattr__(self, "sdm", validate_sdm(self.sdm))

    def spinors(self) -> List[DiracSpinor]:
        """u spinors for helicity [+1/2, -1/2]."""
        return spinor_pair(self.momentum, "U", self.mass)

    def antispinors(self) -> List[DiracSpinor]:
        """v spinors for helicity [+1/2, -1/2]."""
        return spinor_pair(self.momentum, "V", self.mass)

    def with_momentum(self, momentum: FourVector) -> "Lepton":
        return replace(self, momentum=momentum)

    def with_sdm(self, sdm) -> "Lepton":
        return replace(self, sdm=sdm)

    def transformed(self, xform) -> "Lepton":
        return self.with_momentum(self.momentum.transform(xform))

    def __repr__(self) -> str:
        return f"Lepton(momentum={self.momentum!r}, mass={self.mass:.6g})"


@dataclass(frozen=True, eq=False)
class Photon:
    """Real photon leg with SDM in the basis of eps(1), eps(2)."""

    momentum: FourVector
    sdm: np.ndarray = field(default_factory=unpolarized_sdm)

    def __post_init__(self):
        object.__setattr__(self, "sdm", validate_sdm(self.sdm))

    @property
    def mass(self) -> Optional[float]:
        return None

    def transverse_frame(self):
        """Unit vectors (e1, e2) = (theta-hat, phi-hat) of the photon direction."""
        k = self.momentum.vect
        theta, phi = k.polar(), k.azimuth()
        e1 = ThreeVector(math.cos(theta) * math.cos(phi),
                         math.cos(theta) * math.sin(phi),
                         -math.sin(theta))
        e2 = ThreeVector(-math.sin(phi), math.cos(phi), 0.0)
        return e1, e2

    def eps(self, j: int) -> ComplexFourVector:
        """Polarization vector for j = 1 (helicity +1) or j = 2 (helicity -1)."""
        e1, e2 = self.transverse_frame()
        a1, a2 = e1.as_array(), e2.as_array()
        if j == 1:
            space = -(a1 + 1j * a2) / math.sqrt(2.0)
        elif j == 2:
            space = (a1 - 1j * a2) / math.sqrt(2.0)
        else:
            raise ValueError(f"photon polarization index must be 1 or 2, got {j}")
        return ComplexFourVector(0j, complex(space[0]), complex(space[1]), complex(space[2]))

    def eps_star(self, j: int) -> ComplexFourVector:
        return self.eps(j).conj()

    def with_momentum(self, momentum: FourVector) -> "Photon":
        return replace(self, momentum=momentum)

    def with_sdm(self, sdm) -> "Photon":
        return replace(self, sdm=sdm)

    def transformed(self, xform) -> "Photon":
        return self.with_momentum(self.momentum.transform(xform))

    def __repr__(self) -> str:
        return f"Photon(momentum={self.momentum!r})"


ParticleState = Union[Photon, Lepton]
