"""Shared column sets for identity tables."""
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime


def new_uuid() -> str:
    return str(uuid.uuid4())


class AuditMixin:
    """External UUID plus created/updated stamps."""

    uuid = Column(String(36), nullable=False, unique=True, default=new_uuid)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_by = Column(Integer, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
