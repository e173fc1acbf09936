"""SQLAlchemy ORM models for the QuakeAlert application."""

import datetime

from sqlalchemy import Column, DateTime, String, Text

from .database import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class ConfigEntry(Base):
    """One persisted key/value pair; the value is JSON text."""

    __tablename__ = "config_entries"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self):
        return f"<ConfigEntry(key='{self.key}')>"
