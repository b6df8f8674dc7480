class WindowedDatasetError(Exception):
    """Base class for hard failures raised by the windowed dataset."""


class InvalidColumnError(WindowedDatasetError, KeyError):
    """A referenced column does not exist in the buffer schema."""

    def __init__(self, column: str, message: str | None = None):
        self.column = column
        super().__init__(message or f"Column '{column}' not found in dataset")

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise
        return str(self.args[0])


class MalformedRecordError(WindowedDatasetError, ValueError):
    """A record is missing values for one or more declared columns."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Record is missing declared columns: {', '.join(missing)}")
