"""
qedcross: tree-level QED differential cross sections with full
spin-density-matrix control of every external leg.

Usage:
    from qedcross import FourVector, Photon, Lepton
    from qedcross.cross_sections import compton
"""
from .constants import ALPHA_QED, ELECTRON_MASS, HBARC_SQR
from .dirac import DiracMatrix, DiracSpinor
from .kinematics import ComplexFourVector, FourVector, ThreeVector, get_resolution, set_resolution
from .lorentz import LorentzBoost, LorentzTransform, ThreeRotation
from .particles import (
    Lepton,
    Photon,
    helicity_sdm,
    linear_polarization_sdm,
    pure_sdm,
    summed_sdm,
    unpolarized_sdm,
)

__version__ = "0.1.0"

__all__ = [
    "ALPHA_QED",
    "ELECTRON_MASS",
    "HBARC_SQR",
    "ThreeVector",
    "FourVector",
    "ComplexFourVector",
    "get_resolution",
    "set_resolution",
    "LorentzTransform",
    "LorentzBoost",
    "ThreeRotation",
    "DiracMatrix",
    "DiracSpinor",
    "Lepton",
    "Photon",
    "unpolarized_sdm",
    "summed_sdm",
    "pure_sdm",
    "helicity_sdm",
    "linear_polarization_sdm",
]
