from .Field import Field, FieldFormat
from .SwapField import SwapField
