"""Flow utility functions for field operations."""

import numpy as np

from lattesim.field import Field, SwapField


class FlowUtil:
    """Static helpers shared by the flow layers and kernels."""

    @staticmethod
    def zero(field: Field | SwapField) -> None:
        """Clear a field, or both halves of a swap pair, to zero."""
        if isinstance(field, SwapField):
            field.clear_all(0.0)
        else:
            field.clear(0.0)

    @staticmethod
    def copy(dst: Field, src: Field) -> None:
        """Copy source field data into destination field.

        Raises:
            ValueError: If the fields differ in shape.
        """
        if dst.shape != src.shape:
            raise ValueError(f"Cannot copy field of shape {src.shape} into {dst.shape}")
        np.copyto(dst.data, src.data)

    @staticmethod
    def set(dst: SwapField, src: np.ndarray, strength: float = 1.0) -> None:
        """Replace a swap field with an attenuated source array.

        Writes into the write half, then swaps.

        Args:
            dst: Target swap field
            src: Array of the target's shape
            strength: Attenuation factor (1.0 = full copy, 0.0 = clear)
        """
        FlowUtil._check_shape(dst, src)
        np.multiply(src, strength, out=dst.write.data, casting='unsafe')
        dst.swap()

    @staticmethod
    def add(dst: SwapField, src: np.ndarray, strength: float = 1.0) -> None:
        """Add source array to a swap field: write = read + src * strength."""
        FlowUtil._check_shape(dst, src)
        np.add(dst.read.data, np.asarray(src, dtype=np.float32) * strength, out=dst.write.data)
        dst.swap()

    @staticmethod
    def clamp(dst: SwapField, min_value: float = 0.0, max_value: float = 1.0) -> None:
        """Clamp swap field values to a range."""
        np.clip(dst.read.data, min_value, max_value, out=dst.write.data)
        dst.swap()

    @staticmethod
    def magnitude(data: np.ndarray) -> np.ndarray:
        """Per-cell vector length over the channel axis, shape (height, width)."""
        return np.sqrt(np.sum(np.square(data), axis=-1))

    @staticmethod
    def neighbours(data: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Left, right, down and up neighbour arrays of a (height, width, channels) grid.

        Lookups past the border return the edge cell itself (zero gradient).
        Rows grow along +y, so "up" is the next row.
        """
        padded: np.ndarray = np.pad(data, ((1, 1), (1, 1), (0, 0)), mode='edge')
        left: np.ndarray = padded[1:-1, :-2]
        right: np.ndarray = padded[1:-1, 2:]
        down: np.ndarray = padded[:-2, 1:-1]
        up: np.ndarray = padded[2:, 1:-1]
        return left, right, down, up

    @staticmethod
    def _check_shape(dst: SwapField, src: np.ndarray) -> None:
        shape: tuple[int, int, int] = dst.read.shape
        if np.shape(src) != shape:
            raise ValueError(f"Expected array of shape {shape}, got {np.shape(src)}")
