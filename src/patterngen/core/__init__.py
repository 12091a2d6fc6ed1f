"""
Attractor simulation and accumulation-rendering engine.
"""

from patterngen.core.bounds import BoundsTracker
from patterngen.core.coefficients import CoefficientSet, Family, generate_coefficients
from patterngen.core.kernels import Orbit
from patterngen.core.palette import blend, hsv_to_rgb, pick_palette
from patterngen.core.rng import PatternRandom
from patterngen.core.stepper import SimulationState, get_stepper, step
