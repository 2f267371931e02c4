"""
Three- and four-vector algebra for QEDCross.

Units: GeV (natural units c = 1). Metric signature (+, -, -, -).

Equality between vectors is tolerance based: two vectors compare equal when
their Euclidean distance is below the resolution of the left operand, which
scales with its magnitude.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np

from .constants import RESOLUTION

logger = logging.getLogger(__name__)

_resolution = RESOLUTION


def get_resolution() -> float:
    """Relative tolerance used by vector equality and invariant()."""
    return _resolution


def set_resolution(value: float) -> float:
    """
    Change the relative equality tolerance for all vector types.

    Returns the previous value so callers can restore it.
    """
    global _resolution
    if not value > 0:
        raise ValueError(f"resolution must be positive, got {value}")
    previous, _resolution = _resolution, float(value)
    return previous


# Minkowski metric
METRIC = np.diag([1.0, -1.0, -1.0, -1.0])


# -----------------------------
# ThreeVector
# -----------------------------
@dataclass(frozen=True, eq=False)
class ThreeVector:
    x: float
    y: float
    z: float

    @classmethod
    def from_array(cls, array: Sequence[float]) -> "ThreeVector":
        x, y, z = array
        return cls(float(x), float(y), float(z))

    @classmethod
    def from_polar(cls, r: float, theta: float, phi: float) -> "ThreeVector":
        return cls(r * math.sin(theta) * math.cos(phi),
                   r * math.sin(theta) * math.sin(phi),
                   r * math.cos(theta))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def __getitem__(self, index: int) -> float:
        if index not in (0, 1, 2):
            raise IndexError(f"ThreeVector index {index} out of range")
        return (self.x, self.y, self.z)[index]

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def length_sqr(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.length_sqr())

    def resolution(self) -> float:
        scale = self.length()
        return _resolution * scale if scale > 0 else _resolution

    def dot(self, other: "ThreeVector") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "ThreeVector") -> "ThreeVector":
        return ThreeVector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def unit(self) -> "ThreeVector":
        """Unit vector along self; the zero vector maps onto the z axis."""
        r = self.length()
        if r == 0.0:
            return ThreeVector(0.0, 0.0, 1.0)
        return self / r

    def polar(self) -> float:
        r = self.length()
        if r == 0.0:
            return 0.0
        return math.acos(max(-1.0, min(1.0, self.z / r)))

    def azimuth(self) -> float:
        if self.x == 0.0 and self.y == 0.0:
            return 0.0
        return math.atan2(self.y, self.x)

    def distance_to(self, other: "ThreeVector") -> float:
        return (self - other).length()

    def __add__(self, other: "ThreeVector") -> "ThreeVector":
        return ThreeVector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "ThreeVector") -> "ThreeVector":
        return ThreeVector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "ThreeVector":
        return ThreeVector(-self.x, -self.y, -self.z)

    def __mul__(self, factor: float) -> "ThreeVector":
        return ThreeVector(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> "ThreeVector":
        return ThreeVector(self.x / factor, self.y / factor, self.z / factor)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ThreeVector):
            return NotImplemented
        return self.distance_to(other) < self.resolution()

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __repr__(self) -> str:
        return f"ThreeVector(x={self.x:.6g}, y={self.y:.6g}, z={self.z:.6g})"


# -----------------------------
# FourVector
# -----------------------------
@dataclass(frozen=True, eq=False)
class FourVector:
    E: float
    px: float
    py: float
    pz: float

    @classmethod
    def from_array(cls, array: Sequence[float]) -> "FourVector":
        t, x, y, z = array
        return cls(float(t), float(x), float(y), float(z))

    @classmethod
    def from_three(cls, t: float, r: ThreeVector) -> "FourVector":
        return cls(float(t), r.x, r.y, r.z)

    @property
    def vect(self) -> ThreeVector:
        return ThreeVector(self.px, self.py, self.pz)

    @property
    def p(self) -> np.ndarray:
        return np.array([self.px, self.py, self.pz], dtype=float)

    @property
    def magnitude(self) -> float:
        return float(np.linalg.norm(self.p))

    def length(self) -> float:
        """Length of the space part."""
        return self.magnitude

    def as_array(self) -> np.ndarray:
        return np.array([self.E, self.px, self.py, self.pz], dtype=float)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.E, self.px, self.py, self.pz)

    def __getitem__(self, index: int) -> float:
        if index not in (0, 1, 2, 3):
            raise IndexError(f"FourVector index {index} out of range")
        return self.to_tuple()[index]

    def __iter__(self):
        return iter(self.to_tuple())

    def resolution(self) -> float:
        scale = math.sqrt(self.E * self.E + self.magnitude ** 2)
        return _resolution * scale if scale > 0 else _resolution

    def invariant_sqr(self) -> float:
        return self.E * self.E - (self.px * self.px + self.py * self.py + self.pz * self.pz)

    def invariant(self) -> float:
        """
        Proper length sqrt(t^2 - r^2) of the vector.

        Vectors whose squared invariant sits within the resolution below zero
        count as null. Anything more space-like is a precondition violation:
        it is logged and -1 is returned instead of raising.
        """
        inv2 = self.invariant_sqr()
        if inv2 > 0:
            return math.sqrt(inv2)
        if inv2 > -self.resolution():
            return 0.0
        logger.error(f"invariant() invoked on a vector with negative norm: {self!r}")
        return -1.0

    def scalar_prod(self, other) -> float:
        """Minkowski inner product with (+,-,-,-) signature."""
        return (self.E * other.E
                - self.px * other.px - self.py * other.py - self.pz * other.pz)

    def beta(self) -> np.ndarray:
        if self.E == 0.0:
            return np.zeros(3, dtype=float)
        return self.p / self.E

    def distance_to(self, other: "FourVector") -> float:
        return float(np.linalg.norm(self.as_array() - other.as_array()))

    # -------------------- Lorentz transformations --------------------

    def transform(self, xform) -> "FourVector":
        """Apply a LorentzTransform and return the transformed vector."""
        return FourVector.from_array(xform.matrix @ self.as_array())

    def boost(self, beta) -> "FourVector":
        """
        Boost into the frame moving with velocity beta.

        beta may be a LorentzBoost, a ThreeVector or a 3-sequence.
        """
        from .lorentz import LorentzBoost

        if not isinstance(beta, LorentzBoost):
            beta = LorentzBoost(beta)
        return self.transform(beta)

    def boost_to_rest(self, p: "FourVector") -> "FourVector":
        """Express self in the rest frame of p."""
        from .lorentz import LorentzBoost

        return self.transform(LorentzBoost.to_rest(p))

    def boost_from_rest(self, p: "FourVector") -> "FourVector":
        """Inverse of boost_to_rest: self is given in the rest frame of p."""
        from .lorentz import LorentzBoost

        return self.transform(LorentzBoost.from_rest(p))

    # -------------------- Arithmetic --------------------

    def __add__(self, other: "FourVector") -> "FourVector":
        return FourVector(self.E + other.E, self.px + other.px, self.py + other.py, self.pz + other.pz)

    def __sub__(self, other: "FourVector") -> "FourVector":
        return FourVector(self.E - other.E, self.px - other.px, self.py - other.py, self.pz - other.pz)

    def __neg__(self) -> "FourVector":
        return FourVector(-self.E, -self.px, -self.py, -self.pz)

    def __mul__(self, factor: float) -> "FourVector":
        return FourVector(self.E * factor, self.px * factor, self.py * factor, self.pz * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> "FourVector":
        return FourVector(self.E / factor, self.px / factor, self.py / factor, self.pz / factor)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FourVector):
            return NotImplemented
        return self.distance_to(other) < self.resolution()

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __repr__(self) -> str:
        return f"FourVector(E={self.E:.6f}, px={self.px:.6f}, py={self.py:.6f}, pz={self.pz:.6f})"


# -----------------------------
# ComplexFourVector
# -----------------------------
@dataclass(frozen=True, eq=False)
class ComplexFourVector:
    """Four-vector with complex components, e.g. a photon polarization."""

    E: complex
    px: complex
    py: complex
    pz: complex

    @classmethod
    def from_array(cls, array: Sequence[complex]) -> "ComplexFourVector":
        t, x, y, z = array
        return cls(complex(t), complex(x), complex(y), complex(z))

    @classmethod
    def from_real(cls, vec: FourVector) -> "ComplexFourVector":
        return cls.from_array(vec.as_array())

    def as_array(self) -> np.ndarray:
        return np.array([self.E, self.px, self.py, self.pz], dtype=complex)

    def __getitem__(self, index: int) -> complex:
        if index not in (0, 1, 2, 3):
            raise IndexError(f"ComplexFourVector index {index} out of range")
        return (self.E, self.px, self.py, self.pz)[index]

    def conj(self) -> "ComplexFourVector":
        return ComplexFourVector(self.E.conjugate(), self.px.conjugate(),
                                 self.py.conjugate(), self.pz.conjugate())

    @property
    def real(self) -> FourVector:
        return FourVector.from_array(self.as_array().real)

    @property
    def imag(self) -> FourVector:
        return FourVector.from_array(self.as_array().imag)

    def scalar_prod(self, other) -> complex:
        """Bilinear Minkowski product; neither operand is conjugated."""
        return (self.E * other.E
                - self.px * other.px - self.py * other.py - self.pz * other.pz)

    def resolution(self) -> float:
        scale = float(np.linalg.norm(self.as_array()))
        return _resolution * scale if scale > 0 else _resolution

    def distance_to(self, other) -> float:
        return float(np.linalg.norm(self.as_array() - other.as_array()))

    def transform(self, xform) -> "ComplexFourVector":
        return ComplexFourVector.from_array(xform.matrix @ self.as_array())

    def __add__(self, other) -> "ComplexFourVector":
        return ComplexFourVector.from_array(self.as_array() + other.as_array())

    def __sub__(self, other) -> "ComplexFourVector":
        return ComplexFourVector.from_array(self.as_array() - other.as_array())

    def __neg__(self) -> "ComplexFourVector":
        return ComplexFourVector.from_array(-self.as_array())

    def __mul__(self, factor: complex) -> "ComplexFourVector":
        return ComplexFourVector.from_array(self.as_array() * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: complex) -> "ComplexFourVector":
        return ComplexFourVector.from_array(self.as_array() / factor)

    def __eq__(self, other) -> bool:
        if not isinstance(other, (ComplexFourVector, FourVector)):
            return NotImplemented
        return self.distance_to(other) < self.resolution()

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __repr__(self) -> str:
        return (f"ComplexFourVector(E={self.E:.6g}, px={self.px:.6g}, "
                f"py={self.py:.6g}, pz={self.pz:.6g})")
