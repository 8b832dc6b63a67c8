from collections.abc import Sequence
from concurrent.futures import ALL_COMPLETED, Future
from concurrent.futures import wait as wait_futures
from enum import Enum
from functools import partial
import logging

from sqlalchemy.orm import Session, sessionmaker

from filethreader.config import Settings
from filethreader.errors import ResourceNotFound
from filethreader.parser import RecordParser
from filethreader.reporting import file_status
from filethreader.schemas import FileOutcome, FileStatus, FileTask, Record
from filethreader.store import PersistenceGateway
from filethreader.worker_pool import BoundedWorkerPool


logger = logging.getLogger(__name__)


class BatchState(str, Enum):
    DISPATCHED = "dispatched"
    DRAINING = "draining"
    AGGREGATED = "aggregated"


class Batch:
    """Handle on a dispatched set of file tasks, one future per input path."""

    def __init__(self, tasks: Sequence[FileTask], futures: Sequence[Future[FileOutcome]]) -> None:
        self.tasks = tuple(tasks)
        self._futures = tuple(futures)
        self._outcomes: list[FileOutcome] | None = None

    @property
    def paths(self) -> list[str]:
        return [task.path for task in self.tasks]

    @property
    def state(self) -> BatchState:
        if self._outcomes is not None:
            return BatchState.AGGREGATED
        if any(future.done() for future in self._futures):
            return BatchState.DRAINING
        return BatchState.DISPATCHED

    def wait(self) -> list[FileOutcome]:
        """Block until every task is done; outcomes follow submission order."""
        if self._outcomes is None:
            wait_futures(self._futures, return_when=ALL_COMPLETED)
            self._outcomes = [future.result() for future in self._futures]
        return list(self._outcomes)


class IngestionOrchestrator:
    def __init__(
        self,
        parser: RecordParser,
        pool: BoundedWorkerPool,
        gateway: PersistenceGateway | None = None,
    ) -> None:
        self.parser = parser
        self.pool = pool
        self.gateway = gateway

    def ingest_read_only(self, paths: Sequence[str]) -> list[Record]:
        outcomes = self.dispatch(paths).wait()
        records = [record for outcome in outcomes for record in outcome.records]
        logger.info(
            "read-only batch aggregated",
            extra={
                "files": len(outcomes),
                "failed_files": sum(1 for outcome in outcomes if not outcome.ok),
                "record_count": len(records),
            },
        )
        return records

    def ingest_and_persist(self, paths: Sequence[str]) -> list[FileStatus]:
        outcomes = self.dispatch(paths, persist=True).wait()
        statuses = [file_status(outcome.path, outcome.ok and outcome.persisted) for outcome in outcomes]
        logger.info(
            "persist batch aggregated",
            extra={
                "files": len(statuses),
                "failed_files": sum(1 for status in statuses if not status.success),
            },
        )
        return statuses

    def dispatch(self, paths: Sequence[str], *, persist: bool = False) -> Batch:
        if persist and self.gateway is None:
            raise ValueError("a persistence gateway is required to persist records")

        tasks = [
            FileTask(index=index, path=path, run=partial(self._process_file, path, persist))
            for index, path in enumerate(paths)
        ]
        futures = [self.pool.submit(task.run) for task in tasks]
        logger.info("batch dispatched", extra={"files": len(tasks), "persist": persist})
        return Batch(tasks, futures)

    def _process_file(self, path: str, persist: bool) -> FileOutcome:
        try:
            parsed = self.parser.parse(path)
        except ResourceNotFound as exc:
            logger.warning("input file not found", extra={"path": path})
            return FileOutcome(path=path, error=exc)
        except Exception as exc:
            logger.exception("file ingestion failed", extra={"path": path})
            return FileOutcome(path=path, error=exc)

        persisted = False
        if persist:
            # Each file is written on its own so its status reflects only its rows.
            try:
                persisted = self.gateway.bulk_save(parsed.records)
            except Exception:
                logger.exception("persisting file records failed", extra={"path": path})
        return FileOutcome(path=path, records=parsed.records, persisted=persisted, skipped=parsed.skipped)


def build_orchestrator(
    settings: Settings,
    session_factory: sessionmaker[Session] | None = None,
    *,
    pool: BoundedWorkerPool | None = None,
) -> IngestionOrchestrator:
    parser = RecordParser(delimiter=settings.field_delimiter, header_token=settings.header_token)
    if pool is None:
        pool = BoundedWorkerPool(
            max_workers=settings.worker_count,
            queue_capacity=settings.queue_capacity,
            thread_name_prefix=settings.worker_thread_prefix,
        )
    gateway = PersistenceGateway(session_factory) if session_factory is not None else None
    return IngestionOrchestrator(parser, pool, gateway)
