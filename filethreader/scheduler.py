import logging
from pathlib import Path

from apscheduler.schedulers.blocking import BlockingScheduler

from filethreader.config import Settings
from filethreader.orchestrator import IngestionOrchestrator
from filethreader.reporting import summarize
from filethreader.schemas import FileStatus


logger = logging.getLogger(__name__)


def discover_input_files(settings: Settings) -> list[str]:
    input_dir = Path(settings.input_dir)
    if not input_dir.is_dir():
        return []
    return [str(path) for path in sorted(input_dir.glob(settings.input_glob)) if path.is_file()]


def _run_scheduled_ingest(settings: Settings, orchestrator: IngestionOrchestrator) -> list[FileStatus]:
    paths = discover_input_files(settings)
    if not paths:
        logger.info("scheduled ingest found no input files", extra={"input_dir": settings.input_dir})
        return []

    statuses = orchestrator.ingest_and_persist(paths)
    summary = summarize(statuses)
    if summary.failed:
        logger.error(
            "scheduled ingest had failures",
            extra={"total": summary.total, "failed": summary.failed, "failed_paths": list(summary.failed_paths)},
        )
        return statuses
    logger.info("scheduled ingest completed", extra={"total": summary.total})
    return statuses


def start_scheduler(settings: Settings, orchestrator: IngestionOrchestrator, *, run_now: bool = False) -> None:
    scheduler = BlockingScheduler(timezone="UTC")
    scheduler.add_job(
        _run_scheduled_ingest,
        "cron",
        args=[settings, orchestrator],
        hour=settings.schedule_hour_utc,
        minute=settings.schedule_minute_utc,
        id="daily_ingest",
        replace_existing=True,
    )

    logger.info(
        "scheduler started",
        extra={
            "input_dir": settings.input_dir,
            "schedule_hour_utc": settings.schedule_hour_utc,
            "schedule_minute_utc": settings.schedule_minute_utc,
        },
    )

    if run_now:
        _run_scheduled_ingest(settings, orchestrator)

    try:
        scheduler.start()
    finally:
        orchestrator.pool.shutdown(wait=True)
