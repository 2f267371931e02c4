"""
Process registry: maps process keys to cross-section models.

Keys are the lower-case process names, e.g. "compton".
"""
from .base import CrossSection
from .bremsstrahlung import Bremsstrahlung
from .compton import ComptonScattering
from .ee_bremsstrahlung import EEBremsstrahlung
from .pair_production import PairProduction
from .triplet_production import TripletProduction


# Global registry: process key -> CrossSection instance
_REGISTRY: dict = {}


def register(key: str, model: CrossSection):
    """
    Register a cross-section model under a process key.

    Args:
        key: Process name used for lookup
        model: CrossSection instance

    Example:
        >>> register("compton", ComptonScattering())
    """
    if not isinstance(model, CrossSection):
        raise TypeError(f"Expected a CrossSection instance, got {type(model).__name__}")
    _REGISTRY[key] = model


def get_cross_section(key: str) -> CrossSection:
    """
    Resolve the cross-section model for a process.

    Raises:
        KeyError: if nothing is registered under key
    """
    try:
        return _REGISTRY[key]
    except KeyError:
        known = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"No cross section registered for {key!r} (known: {known})") from None


def list_registered_processes():
    """List all registered processes."""
    return {k: v.description for k, v in _REGISTRY.items()}


# ========== AUTO-REGISTER KNOWN PROCESSES ==========
register("compton", ComptonScattering())
register("bremsstrahlung", Bremsstrahlung())
register("pair_production", PairProduction())
register("triplet_production", TripletProduction())
register("ee_bremsstrahlung", EEBremsstrahlung())
