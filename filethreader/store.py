from collections.abc import Sequence
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from filethreader.db_models import UserRow
from filethreader.errors import PersistenceFailure
from filethreader.schemas import Record


logger = logging.getLogger(__name__)


def save_records(db: Session, records: Sequence[Record]) -> int:
    rows = [UserRow.from_record(record) for record in records]
    db.add_all(rows)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceFailure(f"bulk write of {len(rows)} records failed: {exc}") from exc
    return len(rows)


def list_records(db: Session) -> list[Record]:
    stmt = select(UserRow).order_by(UserRow.id)
    return [row.to_record() for row in db.execute(stmt).scalars()]


class PersistenceGateway:
    """Bulk writes records, reporting only whether the whole call succeeded."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def bulk_save(self, records: Sequence[Record]) -> bool:
        if not records:
            return True
        try:
            with self.session_factory() as db:
                saved = save_records(db, records)
        except PersistenceFailure:
            logger.exception("bulk save failed", extra={"record_count": len(records)})
            return False
        except SQLAlchemyError:
            # Raised opening the session or connection, before the commit.
            logger.exception("bulk save failed before commit", extra={"record_count": len(records)})
            return False
        logger.info("bulk save committed", extra={"record_count": saved})
        return True

    def find_all(self) -> list[Record]:
        with self.session_factory() as db:
            return list_records(db)
