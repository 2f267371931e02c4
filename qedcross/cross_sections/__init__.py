"""
Tree-level QED cross sections.

Usage:
    from qedcross.cross_sections import compton

    dsigma = compton(g_in, e_in, g_out, e_out)   # microbarns/sr

Each function takes the external particle states (Photon / Lepton, initial
legs first) and returns the differential cross section as a float. Pass
on_warning to receive AmplitudeWarning records instead of log messages.
"""
from .base import CrossSection
from .bremsstrahlung import Bremsstrahlung, bremsstrahlung_kinematics
from .compton import ComptonScattering, compton_kinematics, klein_nishina
from .ee_bremsstrahlung import EEBremsstrahlung
from .pair_production import PairProduction, pair_kinematics
from .registry import get_cross_section, list_registered_processes, register
from .spin_sum import INCOMING, OUTGOING, AmplitudeWarning, spin_sum
from .triplet_production import TripletProduction


def compton(g_in, e_in, g_out, e_out, on_warning=None) -> float:
    """Compton scattering d(sigma)/dOmega, microbarns/sr."""
    return get_cross_section("compton")(g_in, e_in, g_out, e_out, on_warning=on_warning)


def bremsstrahlung(e_in, e_out, g_out, on_warning=None) -> float:
    """Bremsstrahlung d(sigma)/(dk dphi d^3q), microbarns/GeV^4/r."""
    return get_cross_section("bremsstrahlung")(e_in, e_out, g_out, on_warning=on_warning)


def pair_production(g_in, e_out, p_out, on_warning=None) -> float:
    """Pair production d(sigma)/(dE dphi d^3q), microbarns/GeV^4/r."""
    return get_cross_section("pair_production")(g_in, e_out, p_out, on_warning=on_warning)


def triplet_production(g_in, e_in, p_out, e_out2, e_out3, on_warning=None) -> float:
    """Triplet production d(sigma)/(dE+ dphi+ d^3q), microbarns/GeV^4/r."""
    return get_cross_section("triplet_production")(
        g_in, e_in, p_out, e_out2, e_out3, on_warning=on_warning)


def ee_bremsstrahlung(e_in0, e_in1, e_out2, e_out3, g_out, on_warning=None) -> float:
    """Electron-electron bremsstrahlung d(sigma)/(dk dphi d^3q), microbarns/GeV^4/r."""
    return get_cross_section("ee_bremsstrahlung")(
        e_in0, e_in1, e_out2, e_out3, g_out, on_warning=on_warning)


__all__ = [
    "CrossSection",
    "ComptonScattering",
    "Bremsstrahlung",
    "PairProduction",
    "TripletProduction",
    "EEBremsstrahlung",
    "AmplitudeWarning",
    "INCOMING",
    "OUTGOING",
    "spin_sum",
    "klein_nishina",
    "compton_kinematics",
    "bremsstrahlung_kinematics",
    "pair_kinematics",
    "register",
    "get_cross_section",
    "list_registered_processes",
    "compton",
    "bremsstrahlung",
    "pair_production",
    "triplet_production",
    "ee_bremsstrahlung",
]
