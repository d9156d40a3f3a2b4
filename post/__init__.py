"""
MAC2D Post-Processing Toolkit
=============================

A modular post-processing and visualisation toolkit for MAC2D simulation output.

Modules:
    io: Data loading and file I/O utilities
    visualisation: Plotting functions for time series and velocity/pressure snapshots
    analysis: Analysis utilities (vorticity, divergence statistics, decay rates)
"""

__version__ = "0.1.0"

from . import io
from . import visualisation
from . import analysis

__all__ = ["io", "visualisation", "analysis"]
