"""Fluid simulation kernels."""

from .Kernel import Kernel
from .Inject import Inject
from .Advect import Advect
from .Divergence import Divergence
from .JacobiPressure import JacobiPressure
from .Gradient import Gradient
from .JacobiDiffusion import JacobiDiffusion
from .Border import Border

__all__ = [
    "Kernel",
    "Inject",
    "Advect",
    "Divergence",
    "JacobiPressure",
    "Gradient",
    "JacobiDiffusion",
    "Border",
]
