import sys
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

sys.path.append(str(Path(__file__).resolve().parents[1]))

from qedcross import Lepton, Photon, helicity_sdm, summed_sdm, unpolarized_sdm
from qedcross.cross_sections import compton, compton_kinematics, klein_nishina

ENERGIES = (0.001, 0.01, 0.1)   # GeV
N = 91


def angular_distribution(energy, photon_sdm, electron_sdm):
    thetas = np.linspace(0.0, np.pi, N)
    engine, reference = [], []
    for theta in thetas:
        g_in, e_in, g_out, e_out = compton_kinematics(energy, theta)
        engine.append(compton(
            Photon(g_in, sdm=photon_sdm),
            Lepton(e_in, sdm=electron_sdm),
            Photon(g_out, sdm=summed_sdm()),
            Lepton(e_out, sdm=summed_sdm()),
        ))
        reference.append(klein_nishina(g_in.E, g_out.E))
    return np.degrees(thetas), np.array(engine), np.array(reference)


def main():
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))

    for energy in ENERGIES:
        deg, engine, reference = angular_distribution(energy, unpolarized_sdm(), unpolarized_sdm())
        ax1.plot(deg, reference, linewidth=2, alpha=0.5, label=f"Klein-Nishina, {energy*1e3:g} MeV")
        ax1.plot(deg, engine, "k:", linewidth=1)

        _, same, _ = angular_distribution(energy, helicity_sdm(+1), helicity_sdm(+0.5))
        _, opposite, _ = angular_distribution(energy, helicity_sdm(+1), helicity_sdm(-0.5))
        ax2.plot(deg, (same - opposite) / (same + opposite), label=f"{energy*1e3:g} MeV")

    ax1.set_yscale("log")
    ax1.set_xlabel(r"$\theta_\gamma$ (deg)")
    ax1.set_ylabel(r"$d\sigma/d\Omega$ ($\mu$b/sr)")
    ax1.set_title("Compton scattering: engine (dotted) vs Klein-Nishina")
    ax1.grid(alpha=0.3)
    ax1.legend()

    ax2.set_xlabel(r"$\theta_\gamma$ (deg)")
    ax2.set_ylabel("asymmetry")
    ax2.set_title("Circular photon on polarized electron")
    ax2.grid(alpha=0.3)
    ax2.legend()

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
