from collections.abc import Sequence

from filethreader.schemas import BatchSummary, FileStatus


def file_status(path: str, success: bool) -> FileStatus:
    return FileStatus(path=path, success=success)


def summarize(statuses: Sequence[FileStatus]) -> BatchSummary:
    failed = tuple(status.path for status in statuses if not status.success)
    return BatchSummary(
        total=len(statuses),
        succeeded=len(statuses) - len(failed),
        failed=len(failed),
        failed_paths=failed,
    )
