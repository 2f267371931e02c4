# conservation.py
# Four-momentum bookkeeping for building consistent kinematics.
#
# The cross-section engine never calls these: momentum conservation and mass
# shells are the caller's contract. They are here so that callers and tests
# can build consistent kinematics and verify it before evaluating a process.
import math
from typing import Optional, Sequence

from .kinematics import FourVector, ThreeVector


def total_momentum(vectors: Sequence[FourVector]) -> FourVector:
    total = FourVector(0.0, 0.0, 0.0, 0.0)
    for v in vectors:
        total = total + v
    return total


def missing_momentum(initial_vectors, final_vectors) -> FourVector:
    """
    Four-momentum that the listed final state does not account for.

    For the external-field processes this is the recoil q taken up by the
    target, e.g. q = p_in - p_out - k for bremsstrahlung.
    """
    return total_momentum(initial_vectors) - total_momentum(final_vectors)


def check_energy_conservation(initial_vectors, final_vectors, tol=1e-9):
    """
    True if the summed energies agree within tol (GeV).

    Examples
    --------
    >>> from qedcross.kinematics import FourVector
    >>> k = FourVector(1.0, 0, 0, 1.0)
    >>> e = FourVector(0.000511, 0, 0, 0)
    >>> check_energy_conservation([k, e], [FourVector(1.000511, 0, 0, 1.0)])
    True
    """
    return abs(missing_momentum(initial_vectors, final_vectors).E) < tol


def check_momentum_conservation(initial_vectors, final_vectors, tol=1e-9):
    """True if every component of the summed 3-momenta agrees within tol."""
    q = missing_momentum(initial_vectors, final_vectors)
    return max(abs(q.px), abs(q.py), abs(q.pz)) < tol


def check_conservation(initial_vectors, final_vectors, tol=1e-9):
    """
    Check full 4-momentum conservation (energy + momentum).

    Notes
    -----
    - For the external-field processes (bremsstrahlung, pair production) the
      recoil momentum q has to be included in final_vectors, or use
      external_field_recoil.
    """
    return (
        check_energy_conservation(initial_vectors, final_vectors, tol) and
        check_momentum_conservation(initial_vectors, final_vectors, tol)
    )


def external_field_recoil(initial_vectors, final_vectors, tol=1e-9) -> FourVector:
    """
    Recoil q absorbed by a static target.

    In the target rest frame the recoil carries momentum but no energy, so
    the energy balance of the listed particles must close on its own.

    Raises:
        ValueError: if the energies of initial and final particles differ
    """
    q = missing_momentum(initial_vectors, final_vectors)
    if abs(q.E) >= tol:
        raise ValueError(f"static target cannot absorb energy, recoil has E = {q.E:.3e} GeV")
    return q


def two_body_decay(parent: FourVector, m1: float, m2: float,
                   direction: Optional[ThreeVector] = None):
    """Deterministic two-body decay helper.

    Uses standard relativistic two-body decay kinematics in the parent
    rest frame, sending daughter 1 along direction (default +z) and
    daughter 2 opposite, then boosting to the frame parent is given in.
    """
    M2 = parent.invariant_sqr()
    M = math.sqrt(M2) if M2 > 0 else 0.0
    if m1 + m2 > M + 1e-12:
        raise ValueError("Kinematically forbidden decay: m1+m2 > parent mass")
    if abs(M - (m1 + m2)) < 1e-15:
        p_star = 0.0
        E1 = m1; E2 = m2
    else:
        term1 = M**2 - (m1 + m2)**2
        term2 = M**2 - (m1 - m2)**2
        inside = max(term1 * term2, 0.0)
        p_star = math.sqrt(inside) / (2*M)
        E1 = math.sqrt(m1**2 + p_star**2)
        E2 = math.sqrt(m2**2 + p_star**2)
    nhat = (direction or ThreeVector(0.0, 0.0, 1.0)).unit()
    d1_rf = FourVector.from_three(E1, nhat * p_star)
    d2_rf = FourVector.from_three(E2, nhat * -p_star)
    if parent.magnitude < 1e-15:  # parent at rest
        return d1_rf, d2_rf
    return d1_rf.boost_from_rest(parent), d2_rf.boost_from_rest(parent)
