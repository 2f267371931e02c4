"""
Spin-density weighted summation of helicity amplitudes.

An amplitude tensor carries one axis of length 2 per external leg. The
squared amplitude is the contraction

    sum  A[i1..in] conj(A[j1..jn]) W1[i1, j1] ... Wn[in, jn]

where Wk is the SDM of leg k for legs that pair as sdm[i, ibar] (incoming
legs, outgoing antileptons) and its transpose for outgoing photons and
leptons, which pair as sdm[ibar, i].
"""

import logging
import math
from dataclasses import dataclass, field
from string import ascii_lowercase, ascii_uppercase
from typing import Callable, Dict, Optional, Sequence
import numpy as np

from ..constants import AMPLITUDE_TOLERANCE

logger = logging.getLogger(__name__)

# SDM pairing of a leg
INCOMING = "incoming"
OUTGOING = "outgoing"


@dataclass(frozen=True)
class AmplitudeWarning:
    """Sanity-check failure on a spin-summed squared amplitude."""

    process: str
    amp_squared: complex
    message: str
    details: Dict[str, complex] = field(default_factory=dict)


def weight_matrix(sdm: np.ndarray, role: str) -> np.ndarray:
    if role == INCOMING:
        return sdm
    if role == OUTGOING:
        return sdm.T
    raise ValueError(f"Unknown SDM role {role!r}")


def spin_sum(amplitudes: np.ndarray, sdms: Sequence[np.ndarray],
             roles: Sequence[str]) -> complex:
    """Contract an amplitude tensor with one SDM per leg."""
    amplitudes = np.asarray(amplitudes, dtype=complex)
    rank = amplitudes.ndim
    if len(sdms) != rank or len(roles) != rank:
        raise ValueError(
            f"Amplitude of rank {rank} needs {rank} SDMs and roles, "
            f"got {len(sdms)} and {len(roles)}"
        )
    ket = ascii_lowercase[:rank]
    bra = ascii_uppercase[:rank]
    subscripts = ",".join([ket, bra] + [k + b for k, b in zip(ket, bra)])
    weights = [weight_matrix(np.asarray(s, dtype=complex), r) for s, r in zip(sdms, roles)]
    # keep every term so the final accumulation can be compensated
    terms = np.einsum(f"{subscripts}->{ket}{bra}", amplitudes, amplitudes.conj(), *weights)
    terms = terms.ravel()
    return complex(math.fsum(terms.real), math.fsum(terms.imag))


def partial_spin_sum(amplitudes: np.ndarray, sdms: Sequence[np.ndarray],
                     roles: Sequence[str], keep: int) -> np.ndarray:
    """
    Like spin_sum, but leave leg `keep` open: returns the 2x2 matrix
    AAbar[i, ibar] of the contraction over all other legs.
    """
    amplitudes = np.asarray(amplitudes, dtype=complex)
    rank = amplitudes.ndim
    ket = ascii_lowercase[:rank]
    bra = ascii_uppercase[:rank]
    operands = [amplitudes, amplitudes.conj()]
    pairs = []
    for axis, (s, r) in enumerate(zip(sdms, roles)):
        if axis == keep:
            continue
        operands.append(weight_matrix(np.asarray(s, dtype=complex), r))
        pairs.append(ket[axis] + bra[axis])
    subscripts = ",".join([ket, bra] + pairs)
    return np.einsum(f"{subscripts}->{ket[keep]}{bra[keep]}", *operands)


def check_amplitude_squared(process: str, amp_squared: complex,
                            on_warning: Optional[Callable[[AmplitudeWarning], None]] = None,
                            details: Optional[Callable[[], Dict[str, complex]]] = None,
                            tolerance: float = AMPLITUDE_TOLERANCE) -> bool:
    """
    Flag a squared amplitude that is negative or has a non-negligible
    imaginary part. Returns True when the value passes.

    details is called only on failure, to attach partial sums to the report.
    """
    logger.debug(f"{process}: ampSquared = {amp_squared:.6e}")
    if amp_squared.real >= 0 and abs(amp_squared.imag) <= tolerance * abs(amp_squared):
        return True

    record = AmplitudeWarning(
        process=process,
        amp_squared=amp_squared,
        message=f"bad {process} amplitudes: ampSquared should be real positive, got {amp_squared}",
        details=details() if details is not None else {},
    )
    if on_warning is not None:
        on_warning(record)
    else:
        extra = "".join(f"\n    {k} = {v}" for k, v in record.details.items())
        logger.warning(f"{record.message}{extra}")
    return False
