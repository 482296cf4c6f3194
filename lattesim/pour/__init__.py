from .PourConfig import PourConfig
from .PourSource import PourSource
from .PourStroke import PourStroke
from .MilkBudget import MilkBudget
from .Shaping import flow_scale_from_tilt, radius_from_height
from .ScriptedPour import ScriptedPour, PourSample
