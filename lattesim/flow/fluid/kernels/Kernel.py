import logging

import numpy as np

from lattesim.field import Field


class Kernel():
    """Base class for per-cell field passes.

    A pass is a pure function from read fields to one or more write fields.
    allocate() caches the grid coordinates a kernel needs for a resolution.
    """

    def __init__(self) -> None:
        self.allocated: bool = False
        self.kernel_name: str = self.__class__.__name__
        self.width: int = 0
        self.height: int = 0
        # cell index coordinates, shape (height, width)
        self._xs: np.ndarray = np.zeros((0, 0), dtype=np.float32)
        self._ys: np.ndarray = np.zeros((0, 0), dtype=np.float32)

    def allocate(self, width: int, height: int) -> None:
        """Prepare the kernel for a grid size. Safe to call multiple times."""
        if self.allocated and width == self.width and height == self.height:
            return
        self.width = width
        self.height = height
        self._xs, self._ys = np.meshgrid(
            np.arange(width, dtype=np.float32),
            np.arange(height, dtype=np.float32)
        )
        self.allocated = True
        logging.debug(f"{self.kernel_name}: allocated for {width}x{height}")

    def deallocate(self) -> None:
        self.allocated = False
        self.width = 0
        self.height = 0
        self._xs = np.zeros((0, 0), dtype=np.float32)
        self._ys = np.zeros((0, 0), dtype=np.float32)

    def _check(self, inputs: list[Field], outputs: list[Field]) -> None:
        """Validate a pass before it runs.

        Raises:
            RuntimeError: If the kernel or a field is not allocated.
            ValueError: If a field has the wrong size or an output shares memory with an input.
        """
        if not self.allocated:
            raise RuntimeError(f"{self.kernel_name} kernel not allocated")
        for f in inputs + outputs:
            if not f.allocated:
                raise RuntimeError(f"{self.kernel_name}: field not allocated")
            if f.width != self.width or f.height != self.height:
                raise ValueError(f"{self.kernel_name}: field is {f.width}x{f.height}, kernel is {self.width}x{self.height}")
        for out in outputs:
            for f in inputs:
                if np.may_share_memory(out.data, f.data):
                    raise ValueError(f"{self.kernel_name}: output field aliases an input field")
