"""Dependency injection for FastAPI endpoints"""

import uuid
from datetime import date
from typing import Optional
from fastapi import HTTPException, Request
from sqlalchemy.orm import Session
from fintcs_records.infrastructure.database.repositories import SocietyRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Business date used to stamp loan and voucher numbers"""
    return date.today()


def parse_record_id(value: str, label: str) -> uuid.UUID:
    """Parse a path parameter as UUID, 400 on malformed input"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")


def ensure_society_exists(db: Session, society_id: Optional[uuid.UUID]) -> None:
    """Records may be unscoped; a given society must exist"""
    if society_id is not None and SocietyRepository(db).get_society(society_id) is None:
        raise HTTPException(status_code=404, detail="Society not found")
