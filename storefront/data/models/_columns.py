# storefront/data/models/_columns.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def id_column() -> Column:
    return Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)


def created_at_column() -> Column:
    return Column(DateTime(timezone=True), nullable=False, default=utcnow)


def deleted_at_column() -> Column:
    #soft delete marker, NULL means live
    return Column(DateTime(timezone=True), nullable=True, index=True)
