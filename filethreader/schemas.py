from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Record:
    first_name: str
    last_name: str
    email: str
    gender: str
    ip_address: str
    id: int | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "gender": self.gender,
            "ip_address": self.ip_address,
        }


@dataclass(frozen=True)
class ParseResult:
    path: str
    records: tuple[Record, ...]
    skipped_lines: tuple[int, ...] = ()

    @property
    def skipped(self) -> int:
        return len(self.skipped_lines)


@dataclass(frozen=True)
class FileTask:
    index: int
    path: str
    run: Callable[[], "FileOutcome"]


@dataclass(frozen=True)
class FileOutcome:
    """Result of one file task; `error` is None when the file was read."""

    path: str
    records: tuple[Record, ...] = ()
    error: Exception | None = None
    persisted: bool = False
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FileStatus:
    path: str
    success: bool


@dataclass(frozen=True)
class BatchSummary:
    total: int
    succeeded: int
    failed: int
    failed_paths: tuple[str, ...] = field(default_factory=tuple)
