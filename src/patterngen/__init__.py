"""
Random abstract pattern generator.

Clifford, DeJong and Fujii attractor orbits accumulated into a pixel buffer,
one randomized pattern at a time.
"""

__version__ = "0.1.0"

from patterngen.config import ConfigurationError, PatternConfig, ViewerConfig, default_config
from patterngen.core.coefficients import Family
from patterngen.session import PatternSession, SessionState
from patterngen.surface import PixelSurface
