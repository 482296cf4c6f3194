"""Base class for flow simulation layers."""

from abc import ABC, abstractmethod

from lattesim.field import Field, FieldFormat, SwapField
from .FlowUtil import FlowUtil


class FlowBase(ABC):
    """Base class for flow processing with input/output swap fields.

    Provides input and output SwapFields for ping-pong passes.

    Derived classes must:
    1. Set _input_format and _output_format in __init__()
    2. Implement step(delta_time) to advance the simulation one tick
    3. Expose domain-specific public APIs (e.g. set_velocity(), .dye property)
    """

    def __init__(self) -> None:
        self._input_field: SwapField = SwapField()
        self._output_field: SwapField = SwapField()
        self._allocated: bool = False

        # Subclasses must set these in __init__
        self._input_format: FieldFormat | None = None
        self._output_format: FieldFormat | None = None

    @property
    def _input(self) -> Field:
        """Protected: current input field. Access via domain-specific properties in derived classes."""
        return self._input_field.read

    @property
    def _output(self) -> Field:
        """Protected: current output field. Access via domain-specific properties in derived classes."""
        return self._output_field.read

    @property
    def allocated(self) -> bool:
        return self._allocated

    def allocate(self, width: int, height: int, output_width: int | None = None, output_height: int | None = None) -> None:
        """Allocate and zero the input/output fields.

        Args:
            width: Input field width
            height: Input field height
            output_width: Output field width (defaults to width)
            output_height: Output field height (defaults to height)

        Raises:
            RuntimeError: If the derived class did not set its formats.
            ValueError: If a size is not positive.
        """
        if self._input_format is None or self._output_format is None:
            raise RuntimeError(f"{self.__class__.__name__} must set _input_format and _output_format in __init__")

        out_w: int = output_width if output_width is not None else width
        out_h: int = output_height if output_height is not None else height

        self._input_field.allocate(width, height, self._input_format)
        FlowUtil.zero(self._input_field)

        self._output_field.allocate(out_w, out_h, self._output_format)
        FlowUtil.zero(self._output_field)

        self._allocated = True

    def deallocate(self) -> None:
        self._input_field.deallocate()
        self._output_field.deallocate()
        self._allocated = False

    def clear(self) -> None:
        """Clear input and output fields to zero without reallocating."""
        FlowUtil.zero(self._input_field)
        FlowUtil.zero(self._output_field)

    @abstractmethod
    def step(self, delta_time: float | None = None) -> None:
        ...
