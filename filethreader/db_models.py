from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from filethreader.schemas import Record


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(255))
    last_name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320), index=True)
    gender: Mapped[str] = mapped_column(String(64))
    ip_address: Mapped[str] = mapped_column(String(64))

    @classmethod
    def from_record(cls, record: Record) -> "UserRow":
        # Ids are always assigned by the store.
        return cls(
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email,
            gender=record.gender,
            ip_address=record.ip_address,
        )

    def to_record(self) -> Record:
        return Record(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            gender=self.gender,
            ip_address=self.ip_address,
        )
