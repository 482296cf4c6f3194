# Base classes
from .FlowBase import FlowBase
from .FlowUtil import FlowUtil

__all__ = ['FlowBase', 'FlowUtil']

# Layers
from .fluid import FluidFlow, FluidFlowConfig, FluidStats, Splat
