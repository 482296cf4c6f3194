"""Border kernel - zero the outer ring of a field."""

from lattesim.field import Field
from .Kernel import Kernel


class Border(Kernel):
    """Copy a field with its outermost cells set to zero (no-slip walls)."""

    def use(self, source: Field, out: Field, border: int = 1) -> None:
        """Apply the border.

        Args:
            source: Field to copy
            out: Write field
            border: Border width in cells
        """
        self._check([source], [out])

        out.data[...] = source.data
        if border <= 0:
            return
        out.data[:border] = 0.0
        out.data[-border:] = 0.0
        out.data[:, :border] = 0.0
        out.data[:, -border:] = 0.0
