"""
Dirac matrices and spinors in the Dirac representation.

    gamma0 = [[1, 0], [0, -1]],   gamma_i = [[0, sigma_i], [-sigma_i, 0]]

slash(p) = gamma^mu p_mu = gamma0 p^0 - gamma . p, with the (+,-,-,-) metric
baked in. Spinors are normalized to ubar u = 2m, vbar v = -2m.
"""

from __future__ import annotations
import cmath
import math
from typing import List, Sequence
import numpy as np

from .kinematics import FourVector, ThreeVector

# Pauli matrices
SIGMA = np.array([
    [[0, 1], [1, 0]],
    [[0, -1j], [1j, 0]],
    [[1, 0], [0, -1]],
], dtype=complex)

_I2 = np.eye(2, dtype=complex)
_Z2 = np.zeros((2, 2), dtype=complex)

_GAMMA_MATRICES = np.array(
    [np.block([[_I2, _Z2], [_Z2, -_I2]])]
    + [np.block([[_Z2, s], [-s, _Z2]]) for s in SIGMA]
)

# sign of g^{mu mu}
METRIC_SIGNS = (1.0, -1.0, -1.0, -1.0)

HELICITIES = (+0.5, -0.5)


# -----------------------------
# DiracMatrix
# -----------------------------
class DiracMatrix:
    """Complex 4x4 matrix in the algebra generated by the gamma matrices."""

    __slots__ = ("matrix",)

    def __init__(self, matrix=None):
        if matrix is None:
            self.matrix = np.zeros((4, 4), dtype=complex)
        else:
            matrix = np.array(matrix, dtype=complex)
            if matrix.shape != (4, 4):
                raise ValueError(f"Dirac matrix must be 4x4, got shape {matrix.shape}")
            self.matrix = matrix

    @classmethod
    def zero(cls) -> "DiracMatrix":
        return cls()

    @classmethod
    def identity(cls) -> "DiracMatrix":
        return cls(np.eye(4, dtype=complex))

    @classmethod
    def gamma(cls, mu: int) -> "DiracMatrix":
        if mu not in (0, 1, 2, 3):
            raise ValueError(f"gamma matrix index must be 0..3, got {mu}")
        return cls(_GAMMA_MATRICES[mu].copy())

    @classmethod
    def slash(cls, vec) -> "DiracMatrix":
        """Contract a (real or complex) four-vector with the gamma matrices."""
        comps = vec.as_array()
        return cls(_GAMMA_MATRICES[0] * comps[0]
                   - _GAMMA_MATRICES[1] * comps[1]
                   - _GAMMA_MATRICES[2] * comps[2]
                   - _GAMMA_MATRICES[3] * comps[3])

    def bar(self) -> "DiracMatrix":
        """Dirac adjoint gamma0 M^dagger gamma0."""
        g0 = _GAMMA_MATRICES[0]
        return DiracMatrix(g0 @ self.matrix.conj().T @ g0)

    def trace(self) -> complex:
        return complex(np.trace(self.matrix))

    def __add__(self, other) -> "DiracMatrix":
        if isinstance(other, DiracMatrix):
            return DiracMatrix(self.matrix + other.matrix)
        return DiracMatrix(self.matrix + other * np.eye(4))

    __radd__ = __add__

    def __sub__(self, other) -> "DiracMatrix":
        if isinstance(other, DiracMatrix):
            return DiracMatrix(self.matrix - other.matrix)
        return DiracMatrix(self.matrix - other * np.eye(4))

    def __rsub__(self, other) -> "DiracMatrix":
        return DiracMatrix(other * np.eye(4) - self.matrix)

    def __neg__(self) -> "DiracMatrix":
        return DiracMatrix(-self.matrix)

    def __mul__(self, other):
        if isinstance(other, DiracMatrix):
            return DiracMatrix(self.matrix @ other.matrix)
        if isinstance(other, DiracSpinor):
            return DiracSpinor(self.matrix @ other.components)
        return DiracMatrix(self.matrix * other)

    def __rmul__(self, factor) -> "DiracMatrix":
        return DiracMatrix(factor * self.matrix)

    def __truediv__(self, factor) -> "DiracMatrix":
        return DiracMatrix(self.matrix / factor)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiracMatrix):
            return NotImplemented
        return bool(np.allclose(self.matrix, other.matrix, rtol=1e-12, atol=1e-12))

    __hash__ = None

    def __repr__(self) -> str:
        return f"DiracMatrix({np.array2string(self.matrix, precision=4)})"


GAMMA0 = DiracMatrix.gamma(0)
GAMMA1 = DiracMatrix.gamma(1)
GAMMA2 = DiracMatrix.gamma(2)
GAMMA3 = DiracMatrix.gamma(3)
GAMMA5 = DiracMatrix(1j * _GAMMA_MATRICES[0] @ _GAMMA_MATRICES[1]
                     @ _GAMMA_MATRICES[2] @ _GAMMA_MATRICES[3])
GAMMA = (GAMMA0, GAMMA1, GAMMA2, GAMMA3)


def slash(vec) -> DiracMatrix:
    return DiracMatrix.slash(vec)


def propagator(p: FourVector, mass: float, denominator: float) -> DiracMatrix:
    """Fermion propagator (pslash + m) / denominator."""
    return (slash(p) + mass) / denominator


# -----------------------------
# Two-component helicity states
# -----------------------------
def helicity_spinor(direction: ThreeVector, helicity: float) -> np.ndarray:
    """
    Eigenstate of sigma . n with eigenvalue 2*helicity, n the unit vector
    along direction. A zero direction quantizes along +z.
    """
    theta = direction.polar()
    phi = direction.azimuth()
    c, s = math.cos(theta / 2.0), math.sin(theta / 2.0)
    if helicity == +0.5:
        return np.array([c, cmath.exp(1j * phi) * s], dtype=complex)
    if helicity == -0.5:
        return np.array([-cmath.exp(-1j * phi) * s, c], dtype=complex)
    raise ValueError(f"helicity must be +0.5 or -0.5, got {helicity}")


# -----------------------------
# DiracSpinor
# -----------------------------
class DiracSpinor:
    """Four-component spinor, optionally tagged with the state it describes."""

    __slots__ = ("components", "momentum", "helicity", "kind")

    def __init__(self, components=None, momentum=None, helicity=None, kind=None):
        if components is None:
            self.components = np.zeros(4, dtype=complex)
        else:
            components = np.array(components, dtype=complex)
            if components.shape != (4,):
                raise ValueError(f"Dirac spinor needs 4 components, got shape {components.shape}")
            self.components = components
        self.momentum = momentum
        self.helicity = helicity
        self.kind = kind

    @classmethod
    def state_u(cls, p: FourVector, helicity: float, mass: float = None) -> "DiracSpinor":
        """Positive-energy solution u(p, h) of definite helicity."""
        if mass is None:
            mass = p.invariant()
        chi = helicity_spinor(p.vect, helicity)
        upper = math.sqrt(p.E + mass)
        lower = 2.0 * helicity * p.magnitude / upper
        return cls(np.concatenate([upper * chi, lower * chi]), p, helicity, "U")

    @classmethod
    def state_v(cls, p: FourVector, helicity: float, mass: float = None) -> "DiracSpinor":
        """
        Negative-energy solution v(p, h) for an antifermion of helicity h.

        The antifermion spin is carried by the two-spinor of opposite helicity.
        """
        if mass is None:
            mass = p.invariant()
        eta = helicity_spinor(p.vect, -helicity)
        lower = math.sqrt(p.E + mass)
        upper = -2.0 * helicity * p.magnitude / lower
        return cls(np.concatenate([upper * eta, lower * eta]), p, helicity, "V")

    def bar(self) -> np.ndarray:
        """Dirac adjoint psi^dagger gamma0 as a row of 4 components."""
        return self.components.conj() @ _GAMMA_MATRICES[0]

    def scalar_prod(self, other: "DiracSpinor") -> complex:
        """Adjoint bilinear psibar(self) . other."""
        return complex(self.bar() @ other.components)

    def __add__(self, other: "DiracSpinor") -> "DiracSpinor":
        return DiracSpinor(self.components + other.components)

    def __sub__(self, other: "DiracSpinor") -> "DiracSpinor":
        return DiracSpinor(self.components - other.components)

    def __neg__(self) -> "DiracSpinor":
        return DiracSpinor(-self.components)

    def __mul__(self, factor) -> "DiracSpinor":
        return DiracSpinor(self.components * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor) -> "DiracSpinor":
        return DiracSpinor(self.components / factor)

    def __repr__(self) -> str:
        tag = f", kind={self.kind}, helicity={self.helicity:+.1f}" if self.kind else ""
        return f"DiracSpinor({np.array2string(self.components, precision=4)}{tag})"


def bilinear(finals: Sequence[DiracSpinor], matrix: DiracMatrix,
             initials: Sequence[DiracSpinor]) -> np.ndarray:
    """Table [f, i] of the adjoint bilinears finals[f]bar . matrix . initials[i]."""
    return np.array([[f.scalar_prod(matrix * i) for i in initials] for f in finals],
                    dtype=complex)


def spinor_pair(p: FourVector, kind: str = "U", mass: float = None) -> List[DiracSpinor]:
    """Both helicity states [+1/2, -1/2] for momentum p."""
    if kind == "U":
        return [DiracSpinor.state_u(p, h, mass) for h in HELICITIES]
    if kind == "V":
        return [DiracSpinor.state_v(p, h, mass) for h in HELICITIES]
    raise ValueError(f"spinor kind must be 'U' or 'V', got {kind!r}")
