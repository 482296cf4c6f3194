from .ConfigBase import ConfigBase, config_field
from .flow import FluidFlow, FluidFlowConfig, FluidStats, Splat
from .pour import PourConfig, PourSource, ScriptedPour
from .Settings import Settings
from .Main import Main
