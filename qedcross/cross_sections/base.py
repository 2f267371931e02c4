from abc import ABC, abstractmethod
import logging
from typing import Callable, Optional, Sequence, Tuple
import numpy as np

from ..constants import ALPHA_QED, HBARC_SQR
from .spin_sum import AmplitudeWarning, check_amplitude_squared, spin_sum

logger = logging.getLogger(__name__)


class CrossSection(ABC):
    """
    Base class for all tree-level QED cross sections.

    Subclasses build the helicity amplitude tensor and the kinematic factor;
    the base class folds in the spin-density matrices and the couplings:

        dsigma = hbarc^2 * alpha^alpha_power * Re(ampSquared) * kinematic_factor

    All implementations must be pure functions of their inputs. Momentum
    conservation and mass shells are not checked.
    """

    name: str = "abstract"
    description: str = ""
    units: str = ""
    legs: Tuple[str, ...] = ()
    roles: Tuple[str, ...] = ()
    alpha_power: int = 2

    def __init__(self, alpha: float = ALPHA_QED, hbarc_sqr: float = HBARC_SQR,
                 on_warning: Optional[Callable[[AmplitudeWarning], None]] = None):
        self.alpha = alpha
        self.hbarc_sqr = hbarc_sqr
        self.on_warning = on_warning

    @abstractmethod
    def amplitudes(self, *states) -> np.ndarray:
        """
        Return the helicity amplitude tensor.

        One axis of length 2 per external leg, in the order of `legs`.
        """

    @abstractmethod
    def kinematic_factor(self, *states) -> float:
        """Flux, phase-space and any external propagator factors."""

    def diagnostics(self, amps: np.ndarray, states: Sequence) -> dict:
        """Partial sums attached to an amplitude sanity warning."""
        return {}

    def _check_legs(self, states: Sequence):
        if len(states) != len(self.legs):
            raise ValueError(
                f"{self.name} takes {len(self.legs)} particle states "
                f"({', '.join(self.legs)}), got {len(states)}"
            )

    def amplitude_squared(self, *states, on_warning=None) -> complex:
        """Spin-density weighted |M|^2 with all couplings stripped."""
        self._check_legs(states)
        amps = self.amplitudes(*states)
        amp_squared = spin_sum(amps, [s.sdm for s in states], self.roles)
        check_amplitude_squared(self.name, amp_squared, on_warning or self.on_warning,
                                details=lambda: self.diagnostics(amps, states))
        return amp_squared

    def __call__(self, *states, on_warning=None) -> float:
        amp_squared = self.amplitude_squared(*states, on_warning=on_warning)
        kin = self.kinematic_factor(*states)
        result = self.hbarc_sqr * self.alpha ** self.alpha_power * amp_squared.real * kin
        logger.debug(f"{self.name}: kinFactor = {kin:.6e}, dsigma = {result:.6e} {self.units}")
        return float(result)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(alpha={self.alpha:.9g}, hbarc_sqr={self.hbarc_sqr:.9g})"
