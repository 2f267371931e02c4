# main.py
import logging
import math

from qedcross import Lepton, Photon, summed_sdm, unpolarized_sdm
from qedcross.cross_sections import compton, compton_kinematics, klein_nishina

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# 1 GeV photon along +z on an electron at rest, photon scattered at 90 degrees
g_in, e_in, g_out, e_out = compton_kinematics(1.0, math.pi / 2)

dsigma = compton(
    Photon(g_in, sdm=unpolarized_sdm()),
    Lepton(e_in, sdm=unpolarized_sdm()),
    Photon(g_out, sdm=summed_sdm()),
    Lepton(e_out, sdm=summed_sdm()),
)
reference = klein_nishina(g_in.E, g_out.E)

print("Incident photon  :", g_in)
print("Scattered photon :", g_out)
print("Recoil electron  :", e_out)
print(f"dsigma/dOmega    = {dsigma:.6e} microbarns/sr")
print(f"Klein-Nishina    = {reference:.6e} microbarns/sr")
print(f"Ratio            = {dsigma / reference:.9f}")
