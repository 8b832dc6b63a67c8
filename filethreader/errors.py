class FileThreaderError(Exception):
    pass


class ResourceNotFound(FileThreaderError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"resource not found: {path}")
        self.path = path


class IngestIOError(FileThreaderError, OSError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"failed reading {path}: {reason}")
        self.path = path
        self.reason = reason


class MalformedRow(FileThreaderError, ValueError):
    """A row that does not split into the expected number of fields."""

    def __init__(self, line_number: int, field_count: int, expected: int) -> None:
        super().__init__(f"line {line_number}: expected {expected} fields, got {field_count}")
        self.line_number = line_number
        self.field_count = field_count
        self.expected = expected


class PersistenceFailure(FileThreaderError):
    pass


class PoolClosed(FileThreaderError, RuntimeError):
    pass


class PoolSaturated(FileThreaderError, RuntimeError):
    pass
