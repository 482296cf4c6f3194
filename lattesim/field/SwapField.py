from lattesim.field.Field import Field, FieldFormat


class SwapField():
    """Ping-pong pair of fields.

    Kernel passes read from `read` and write to `write`; `swap()` then flips the
    roles by toggling a single index, the data itself is never copied.
    """

    def __init__(self) -> None :
        self.width: int = 0
        self.height: int = 0
        self.internal_format: FieldFormat | None = None
        self.fields: list[Field] = [Field(), Field()]
        self.swap_state: bool = False
        self.allocated: bool = False

    def allocate(self, width: int, height: int, internal_format: FieldFormat) -> None :
        self.width = width
        self.height = height
        self.internal_format = FieldFormat(internal_format)
        self.fields[0].allocate(width, height, internal_format)
        self.fields[1].allocate(width, height, internal_format)
        self.swap_state = False
        self.allocated = self.fields[0].allocated and self.fields[1].allocated

    def deallocate(self) -> None :
        self.fields[0].deallocate()
        self.fields[1].deallocate()
        self.allocated = False

    @property
    def read(self) -> Field:
        return self.fields[self.swap_state]

    @property
    def write(self) -> Field:
        return self.fields[not self.swap_state]

    def swap(self) -> None :
        self.swap_state = not self.swap_state

    def clear_all(self, *values: float) -> None :
        self.fields[0].clear(*values)
        self.fields[1].clear(*values)
