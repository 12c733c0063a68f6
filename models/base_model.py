#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the Social API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps
- save() and delete() that use the DBStorage singleton

Timestamps get a Python-side default so they are available on the instance
right after commit (sessions are created with expire_on_commit=False).
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if none was passed
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def save(self):
        """Touch updated_at and commit the instance through DBStorage."""
        self.updated_at = utcnow()
        models.storage.new(self)
        models.storage.save()

    def delete(self):
        """
        Hard delete the current instance using DBStorage.
        Not committed here; the caller decides when to commit.
        """
        models.storage.delete(self)
