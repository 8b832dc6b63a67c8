from collections.abc import Callable, Iterator
import logging
from pathlib import Path
import threading
from typing import TextIO

from filethreader.errors import IngestIOError, MalformedRow, ResourceNotFound
from filethreader.schemas import ParseResult, Record


logger = logging.getLogger(__name__)

FILE_PREFIX = "file:"
RECORD_FIELDS = 6

Opener = Callable[[str], TextIO]


def resolve_path(path: str) -> Path:
    if path.startswith(FILE_PREFIX):
        path = path[len(FILE_PREFIX):]
    return Path(path)


def open_resource(path: str, encoding: str = "utf-8") -> TextIO:
    """Open a filesystem path, optionally written as ``file:<path>``, for reading."""
    resolved = resolve_path(path)
    try:
        return resolved.open("r", encoding=encoding, newline="")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError) as exc:
        raise ResourceNotFound(path) from exc


def split_row(line: str, delimiter: str, expected_fields: int, line_number: int) -> list[str]:
    fields = line.split(delimiter)
    if len(fields) < expected_fields:
        raise MalformedRow(line_number, len(fields), expected_fields)
    return fields


class RecordParser:
    def __init__(
        self,
        *,
        delimiter: str = ",",
        header_token: str = "id",
        expected_fields: int = RECORD_FIELDS,
        encoding: str = "utf-8",
        opener: Opener | None = None,
    ) -> None:
        if expected_fields < RECORD_FIELDS:
            raise ValueError(f"expected_fields must be at least {RECORD_FIELDS}")
        self.delimiter = delimiter
        self.header_token = header_token
        self.expected_fields = expected_fields
        self.encoding = encoding
        self.opener = opener or (lambda path: open_resource(path, encoding=self.encoding))

    def parse(self, path: str) -> ParseResult:
        logger.info(
            "parsing file",
            extra={"path": path, "worker": threading.current_thread().name},
        )
        records: list[Record] = []
        skipped: list[int] = []
        for line_number, outcome in self._iter_rows(path):
            if isinstance(outcome, MalformedRow):
                skipped.append(line_number)
                continue
            records.append(outcome)

        if skipped:
            logger.warning(
                "skipped malformed rows",
                extra={"path": path, "skipped": len(skipped), "lines": skipped[:20]},
            )
        return ParseResult(path=path, records=tuple(records), skipped_lines=tuple(skipped))

    def iter_records(self, path: str) -> Iterator[Record]:
        for _, outcome in self._iter_rows(path):
            if not isinstance(outcome, MalformedRow):
                yield outcome

    def _iter_rows(self, path: str) -> Iterator[tuple[int, Record | MalformedRow]]:
        with self.opener(path) as infile:
            try:
                for line_number, raw in enumerate(infile, start=1):
                    line = raw.rstrip("\r\n")
                    if not line.strip():
                        continue
                    # Any row whose first field is the header token is a header, data rows included.
                    if line.split(self.delimiter, 1)[0] == self.header_token:
                        continue
                    try:
                        fields = split_row(line, self.delimiter, self.expected_fields, line_number)
                    except MalformedRow as malformed:
                        yield line_number, malformed
                        continue
                    yield line_number, self._to_record(fields)
            except (OSError, UnicodeDecodeError) as exc:
                raise IngestIOError(path, str(exc)) from exc

    def _to_record(self, fields: list[str]) -> Record:
        # Column 0 is the source id; the store assigns its own.
        return Record(
            first_name=fields[1],
            last_name=fields[2],
            email=fields[3],
            gender=fields[4],
            ip_address=fields[5],
        )
