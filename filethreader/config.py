from dataclasses import dataclass
import os

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    log_level: str
    input_dir: str
    input_glob: str
    field_delimiter: str
    header_token: str
    worker_count: int
    queue_capacity: int
    worker_thread_prefix: str
    schedule_hour_utc: int
    schedule_minute_utc: int


def get_settings() -> Settings:
    return Settings(
        app_name=os.getenv("APP_NAME", "filethreader"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./filethreader.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        input_dir=os.getenv("INPUT_DIR", "./data/input"),
        input_glob=os.getenv("INPUT_GLOB", "*.csv"),
        field_delimiter=os.getenv("FIELD_DELIMITER", ","),
        header_token=os.getenv("HEADER_TOKEN", "id"),
        worker_count=int(os.getenv("WORKER_COUNT", "10")),
        queue_capacity=int(os.getenv("QUEUE_CAPACITY", "100")),
        worker_thread_prefix=os.getenv("WORKER_THREAD_PREFIX", "ingest-worker"),
        schedule_hour_utc=int(os.getenv("SCHEDULE_HOUR_UTC", "2")),
        schedule_minute_utc=int(os.getenv("SCHEDULE_MINUTE_UTC", "0")),
    )
