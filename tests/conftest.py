from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from filethreader.config import Settings
from filethreader.database import build_session_factory
from filethreader.orchestrator import IngestionOrchestrator, build_orchestrator
from filethreader.worker_pool import BoundedWorkerPool


HEADER = "id,first_name,last_name,email,gender,ip_address"


def _user_row(index: int) -> str:
    return f"{index},First{index},Last{index},user{index}@example.com,Female,10.0.0.{index}"


@pytest.fixture()
def user_row() -> Callable[[int], str]:
    return _user_row


@pytest.fixture()
def temp_workspace(tmp_path: Path) -> Path:
    (tmp_path / "data" / "input").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def test_settings(temp_workspace: Path) -> Settings:
    return Settings(
        app_name="filethreader",
        database_url=f"sqlite:///{temp_workspace / 'test.db'}",
        log_level="INFO",
        input_dir=str(temp_workspace / "data" / "input"),
        input_glob="*.csv",
        field_delimiter=",",
        header_token="id",
        worker_count=4,
        queue_capacity=16,
        worker_thread_prefix="test-worker",
        schedule_hour_utc=2,
        schedule_minute_utc=0,
    )


@pytest.fixture()
def write_users(temp_workspace: Path) -> Callable[..., str]:
    def _write(name: str, lines: list[str], *, header: bool = True) -> str:
        path = temp_workspace / "data" / "input" / name
        content = [HEADER] if header else []
        content.extend(lines)
        path.write_text("\n".join(content) + "\n", encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture()
def session_factory(test_settings: Settings) -> sessionmaker[Session]:
    return build_session_factory(test_settings.database_url)


@pytest.fixture()
def pool() -> Generator[BoundedWorkerPool, None, None]:
    worker_pool = BoundedWorkerPool(max_workers=4, queue_capacity=16, thread_name_prefix="test-worker")
    yield worker_pool
    worker_pool.shutdown(wait=True)


@pytest.fixture()
def orchestrator(
    test_settings: Settings,
    session_factory: sessionmaker[Session],
    pool: BoundedWorkerPool,
) -> IngestionOrchestrator:
    return build_orchestrator(test_settings, session_factory, pool=pool)
