from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from filethreader.config import Settings
from filethreader.scheduler import _run_scheduled_ingest, discover_input_files
from filethreader.store import PersistenceGateway


def test_discover_matches_glob_in_sorted_order(test_settings: Settings, write_users, user_row) -> None:
    write_users("b.csv", [user_row(2)])
    write_users("a.csv", [user_row(1)])
    write_users("notes.txt", [user_row(3)])

    paths = discover_input_files(test_settings)

    assert [Path(path).name for path in paths] == ["a.csv", "b.csv"]


def test_scheduled_ingest_persists_input_directory(
    test_settings: Settings,
    orchestrator,
    session_factory: sessionmaker[Session],
    write_users,
    user_row,
) -> None:
    write_users("a.csv", [user_row(1), user_row(2)])
    write_users("b.csv", [user_row(3), "broken"])

    statuses = _run_scheduled_ingest(test_settings, orchestrator)

    assert [status.success for status in statuses] == [True, True]
    assert len(PersistenceGateway(session_factory).find_all()) == 3


def test_scheduled_ingest_with_empty_directory(test_settings: Settings, orchestrator) -> None:
    assert _run_scheduled_ingest(test_settings, orchestrator) == []
