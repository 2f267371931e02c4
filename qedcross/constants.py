"""
Physical constants and numeric tolerances for QEDCross.

Units: GeV (natural units c = 1), cross sections in microbarns.
"""

import math

# Fine structure constant
ALPHA_QED = 1.0 / 137.035999084

# (hbar c)^2 in microbarn * GeV^2
HBARC_SQR = 389.3793721

# Electron mass [GeV]
ELECTRON_MASS = 0.51099895e-3

# Relative equality tolerance for three- and four-vectors
RESOLUTION = 1e-12

# Relative size of Im(ampSquared) tolerated before a sanity warning
AMPLITUDE_TOLERANCE = 1e-8

PI = math.pi
