from enum import IntEnum

import numpy as np


class FieldFormat(IntEnum):
    """Storage format of a grid field. The value is the channel count."""
    R32F =      1
    RG32F =     2
    RGBA32F =   4

    @property
    def channels(self) -> int:
        return int(self.value)


class Field():
    """Fixed resolution 2D grid of float32 vectors, shape (height, width, channels)."""

    def __init__(self) -> None :
        self.width: int = 0
        self.height: int = 0
        self.internal_format: FieldFormat | None = None
        self.data: np.ndarray = np.zeros((0, 0, 0), dtype=np.float32)
        self.allocated: bool = False

    @property
    def channels(self) -> int:
        if self.internal_format is None:
            return 0
        return self.internal_format.channels

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.height, self.width, self.channels)

    def allocate(self, width: int, height: int, internal_format: FieldFormat) -> None :
        if width <= 0 or height <= 0:
            raise ValueError(f"Field size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.internal_format = FieldFormat(internal_format)
        self.data = np.zeros((height, width, self.internal_format.channels), dtype=np.float32)
        self.allocated = True

    def deallocate(self) -> None :
        self.width = 0
        self.height = 0
        self.data = np.zeros((0, 0, 0), dtype=np.float32)
        self.allocated = False

    def clear(self, *values: float) -> None :
        """Fill every cell. One value fills all channels, otherwise one value per channel."""
        if not self.allocated:
            return
        if not values:
            values = (0.0,)
        if len(values) == 1:
            self.data.fill(values[0])
        else:
            self.data[...] = np.asarray(values[:self.channels], dtype=np.float32)

    def view(self) -> np.ndarray:
        """Read-only view of the field data."""
        view: np.ndarray = self.data.view()
        view.flags.writeable = False
        return view
