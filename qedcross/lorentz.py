"""
Lorentz transformations acting on four-vectors.

A LorentzTransform is a real 4x4 matrix M with M^T g M = g for the metric
g = diag(1, -1, -1, -1). LorentzBoost and ThreeRotation are the two
constrained families used to build general transforms.

Boost convention: LorentzBoost(beta) takes coordinates into the frame that
moves with velocity beta, so a particle at rest picks up velocity -beta.
"""

from __future__ import annotations
import math
from typing import Tuple
import numpy as np

from .kinematics import METRIC, ThreeVector, FourVector, ComplexFourVector


# -----------------------------
# General transform
# -----------------------------
class LorentzTransform:

    def __init__(self, matrix=None):
        if matrix is None:
            self.matrix = np.eye(4, dtype=float)
        else:
            matrix = np.array(matrix, dtype=float)
            if matrix.shape != (4, 4):
                raise ValueError(f"Lorentz transform must be 4x4, got shape {matrix.shape}")
            self.matrix = matrix

    @classmethod
    def identity(cls) -> "LorentzTransform":
        return cls()

    def is_valid(self, tol: float = 1e-9) -> bool:
        """Check the pseudo-orthogonality condition M^T g M = g."""
        residual = self.matrix.T @ METRIC @ self.matrix - METRIC
        scale = max(1.0, float(np.max(np.abs(self.matrix))) ** 2)
        return bool(np.max(np.abs(residual)) < tol * scale)

    def inverse(self) -> "LorentzTransform":
        """Group inverse g M^T g."""
        return LorentzTransform(METRIC @ self.matrix.T @ METRIC)

    def transpose(self) -> "LorentzTransform":
        return LorentzTransform(self.matrix.T)

    def apply(self, vec):
        return vec.transform(self)

    def __mul__(self, other):
        if isinstance(other, LorentzTransform):
            return LorentzTransform(self.matrix @ other.matrix)
        if isinstance(other, (FourVector, ComplexFourVector)):
            return other.transform(self)
        return NotImplemented

    def __eq__(self, other) -> bool:
        if not isinstance(other, LorentzTransform):
            return NotImplemented
        return bool(np.allclose(self.matrix, other.matrix, rtol=1e-12, atol=1e-12))

    __hash__ = None

    def __repr__(self) -> str:
        rows = ", ".join("[" + ", ".join(f"{v:.6g}" for v in row) + "]" for row in self.matrix)
        return f"{type(self).__name__}([{rows}])"


# -----------------------------
# Lorentz boost
# -----------------------------
def boost_matrix(beta: np.ndarray) -> np.ndarray:
    """Matrix of the boost into a frame moving with velocity beta."""
    beta = np.asarray(beta, dtype=float)
    beta2 = float(np.dot(beta, beta))
    if beta2 >= 1.0:
        raise ValueError("beta^2 < 1 required.")
    matrix = np.eye(4, dtype=float)
    if beta2 <= 1e-36:
        return matrix
    gamma = 1.0 / math.sqrt(1.0 - beta2)
    matrix[0, 0] = gamma
    matrix[0, 1:] = -gamma * beta
    matrix[1:, 0] = -gamma * beta
    matrix[1:, 1:] += (gamma - 1.0) * np.outer(beta, beta) / beta2
    return matrix


class LorentzBoost(LorentzTransform):

    def __init__(self, beta=(0.0, 0.0, 0.0)):
        if isinstance(beta, ThreeVector):
            beta = beta.as_array()
        super().__init__(boost_matrix(np.asarray(beta, dtype=float)))

    @classmethod
    def from_components(cls, beta_x: float, beta_y: float, beta_z: float) -> "LorentzBoost":
        return cls((beta_x, beta_y, beta_z))

    @classmethod
    def from_direction(cls, bhat: ThreeVector, beta: float) -> "LorentzBoost":
        return cls(bhat.unit() * beta)

    @classmethod
    def from_gamma(cls, bhat: ThreeVector, gamma: float) -> "LorentzBoost":
        if gamma < 1.0:
            raise ValueError(f"gamma >= 1 required, got {gamma}")
        return cls.from_direction(bhat, math.sqrt(1.0 - 1.0 / (gamma * gamma)))

    @classmethod
    def to_rest(cls, p: FourVector) -> "LorentzBoost":
        """Boost taking the current frame to the rest frame of p."""
        if p.E <= 0.0:
            raise ValueError(f"Cannot boost to the rest frame of {p!r}")
        return cls(p.beta())

    @classmethod
    def from_rest(cls, p: FourVector) -> "LorentzBoost":
        """Boost taking the rest frame of p back to the current frame."""
        if p.E <= 0.0:
            raise ValueError(f"Cannot boost from the rest frame of {p!r}")
        return cls(-p.beta())

    def gamma(self) -> float:
        return float(self.matrix[0, 0])

    def beta(self) -> ThreeVector:
        return ThreeVector.from_array(-self.matrix[0, 1:] / self.matrix[0, 0])

    def inverse(self) -> "LorentzBoost":
        return LorentzBoost(-self.beta().as_array())


# -----------------------------
# Space rotation
# -----------------------------
def _rz(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _rx(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


class ThreeRotation(LorentzTransform):
    """
    Active rotation of the space components.

    Euler angles follow the z-x-z convention R = Rz(phi) Rx(theta) Rz(psi).
    """

    def __init__(self, axis=None):
        super().__init__()
        if axis is not None:
            if not isinstance(axis, ThreeVector):
                axis = ThreeVector.from_array(axis)
            self._set_rotation(_axis_matrix(axis.unit(), axis.length()))

    def _set_rotation(self, rot: np.ndarray):
        self.matrix = np.eye(4, dtype=float)
        self.matrix[1:, 1:] = rot

    @classmethod
    def from_rotation_matrix(cls, rot) -> "ThreeRotation":
        rot = np.array(rot, dtype=float)
        if rot.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got shape {rot.shape}")
        result = cls()
        result._set_rotation(rot)
        return result

    @classmethod
    def from_axis_angle(cls, ahat: ThreeVector, angle: float) -> "ThreeRotation":
        return cls.from_rotation_matrix(_axis_matrix(ahat.unit(), angle))

    @classmethod
    def from_euler(cls, phi: float, theta: float, psi: float) -> "ThreeRotation":
        return cls.from_rotation_matrix(_rz(phi) @ _rx(theta) @ _rz(psi))

    @property
    def rotation(self) -> np.ndarray:
        return self.matrix[1:, 1:]

    def get_axis(self) -> Tuple[ThreeVector, float]:
        """Return (unit axis, angle) with the angle in [0, pi]."""
        rot = self.rotation
        cos_angle = max(-1.0, min(1.0, (float(np.trace(rot)) - 1.0) / 2.0))
        angle = math.acos(cos_angle)
        if angle < 1e-12:
            return ThreeVector(0.0, 0.0, 1.0), 0.0
        if math.pi - angle > 1e-6:
            axis = np.array([rot[2, 1] - rot[1, 2],
                             rot[0, 2] - rot[2, 0],
                             rot[1, 0] - rot[0, 1]]) / (2.0 * math.sin(angle))
            return ThreeVector.from_array(axis).unit(), angle
        # half turn: R = 2 n n^T - 1
        nn = (rot + np.eye(3)) / 2.0
        k = int(np.argmax(np.diag(nn)))
        axis = nn[:, k] / math.sqrt(nn[k, k])
        return ThreeVector.from_array(axis).unit(), angle

    def axis(self) -> ThreeVector:
        """Rotation axis scaled by the rotation angle."""
        ahat, angle = self.get_axis()
        return ahat * angle

    def get_euler(self) -> Tuple[float, float, float]:
        rot = self.rotation
        theta = math.acos(max(-1.0, min(1.0, float(rot[2, 2]))))
        if math.sin(theta) > 1e-12:
            phi = math.atan2(rot[0, 2], -rot[1, 2])
            psi = math.atan2(rot[2, 0], rot[2, 1])
        else:
            # only phi +/- psi is defined, put it all in phi
            phi = math.atan2(rot[1, 0], rot[0, 0])
            psi = 0.0
        return phi, theta, psi

    def inverse(self) -> "ThreeRotation":
        return ThreeRotation.from_rotation_matrix(self.rotation.T)

    def __mul__(self, other):
        if isinstance(other, ThreeRotation):
            return ThreeRotation.from_rotation_matrix(self.rotation @ other.rotation)
        if isinstance(other, ThreeVector):
            return ThreeVector.from_array(self.rotation @ other.as_array())
        return super().__mul__(other)


def _axis_matrix(ahat: ThreeVector, angle: float) -> np.ndarray:
    """Rodrigues formula for a rotation by angle about unit vector ahat."""
    n = ahat.as_array()
    k = np.array([[0.0, -n[2], n[1]],
                  [n[2], 0.0, -n[0]],
                  [-n[1], n[0], 0.0]])
    return np.eye(3) + math.sin(angle) * k + (1.0 - math.cos(angle)) * (k @ k)
