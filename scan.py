#!/usr/bin/env python3
"""
Kinematic scan driver for qedcross

Examples:
    python scan.py compton --energy 1.0 --points 19
    python scan.py compton --energy 0.01 --photon-helicity +1 --electron-helicity -0.5
    python scan.py pair --energy 5.0 --points 20 --output pair.csv
"""

import argparse
import csv
import logging
import math

from qedcross import Lepton, Photon, helicity_sdm, summed_sdm, unpolarized_sdm
from qedcross.conservation import external_field_recoil
from qedcross.constants import ELECTRON_MASS
from qedcross.cross_sections import (
    compton,
    compton_kinematics,
    klein_nishina,
    pair_kinematics,
    pair_production,
)

logger = logging.getLogger("scan")


def initial_sdm(helicity):
    return unpolarized_sdm() if helicity is None else helicity_sdm(helicity)


def scan_compton(args):
    """Compton d(sigma)/dOmega versus lab scattering angle."""
    rows = []
    for i in range(args.points):
        theta = math.pi * i / max(args.points - 1, 1)
        g_in, e_in, g_out, e_out = compton_kinematics(args.energy, theta)
        dsigma = compton(
            Photon(g_in, sdm=initial_sdm(args.photon_helicity)),
            Lepton(e_in, sdm=initial_sdm(args.electron_helicity)),
            Photon(g_out, sdm=summed_sdm()),
            Lepton(e_out, sdm=summed_sdm()),
        )
        rows.append({
            "theta_deg": math.degrees(theta),
            "k_out": g_out.E,
            "dsigma": dsigma,
            "klein_nishina": klein_nishina(g_in.E, g_out.E),
        })
        logger.debug(f"theta = {theta:.4f} rad: k_out = {g_out.E:.6e} GeV, dsigma = {dsigma:.6e}")
    return rows


def scan_pair(args):
    """Pair production versus electron energy fraction at fixed angles."""
    theta = args.theta if args.theta is not None else ELECTRON_MASS / args.energy
    lo, hi = args.xmin, args.xmax
    rows = []
    for i in range(args.points):
        x = lo + (hi - lo) * i / max(args.points - 1, 1)
        g_in, e_out, p_out = pair_kinematics(args.energy, x, theta, theta)
        dsigma = pair_production(
            Photon(g_in, sdm=initial_sdm(args.photon_helicity)),
            Lepton(e_out, sdm=summed_sdm()),
            Lepton(p_out, sdm=summed_sdm()),
        )
        q = external_field_recoil([g_in], [e_out, p_out])
        logger.debug(f"x = {x:.4f}: |q| = {q.magnitude:.6e} GeV, dsigma = {dsigma:.6e}")
        rows.append({"fraction": x, "q_mag": q.magnitude, "dsigma": dsigma})
    return rows


SCANS = {
    "compton": (scan_compton, "microbarns/sr"),
    "pair": (scan_pair, "microbarns/GeV^4/r"),
}


def write_csv(rows, filename):
    with open(filename, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)
    print(f"📄 Wrote {len(rows)} rows to {filename}")


def build_parser():
    parser = argparse.ArgumentParser(
        description="qedcross kinematic scans",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  python scan.py compton --energy 1.0 --points 19
  python scan.py pair --energy 5.0 --xmin 0.05 --xmax 0.95 --output pair.csv"""
    )
    parser.add_argument("process", choices=sorted(SCANS), help="Process to scan")
    parser.add_argument("--energy", type=float, default=1.0, help="Beam photon energy in GeV (default 1.0)")
    parser.add_argument("--points", type=int, default=19, help="Number of scan points (default 19)")
    parser.add_argument("--photon-helicity", type=int, choices=(1, -1), default=None,
                        help="Circular polarization of the beam photon (default unpolarized)")
    parser.add_argument("--electron-helicity", type=float, choices=(0.5, -0.5), default=None,
                        help="Target electron helicity, Compton only (default unpolarized)")
    parser.add_argument("--theta", type=float, default=None,
                        help="Lepton polar angle in rad for the pair scan (default m/E)")
    parser.add_argument("--xmin", type=float, default=0.05, help="Lowest electron energy fraction")
    parser.add_argument("--xmax", type=float, default=0.95, help="Highest electron energy fraction")
    parser.add_argument("--verbose", action="store_true", help="Log intermediate values")
    parser.add_argument("--output", type=str, help="Write the scan to a CSV file")
    return parser


def main():
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    if args.points < 1:
        raise SystemExit("--points must be at least 1")

    scan, units = SCANS[args.process]
    logger.info(f"Scanning {args.process} at {args.energy} GeV over {args.points} points")
    rows = scan(args)

    print("\n" + "=" * 60)
    print(f"qedcross scan: {args.process} at {args.energy} GeV")
    print("=" * 60)
    for row in rows:
        print("  ".join(f"{k}={v:.6g}" for k, v in row.items()))
    print("=" * 60)
    peak = max(rows, key=lambda r: r["dsigma"])
    print(f"Peak dsigma : {peak['dsigma']:.6e} {units}")
    print("=" * 60 + "\n")

    if args.output:
        write_csv(rows, args.output)


if __name__ == "__main__":
    main()
