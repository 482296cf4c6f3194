from .Definitions import Splat, FluidStats
from .FluidFlow import FluidFlow, FluidFlowConfig
