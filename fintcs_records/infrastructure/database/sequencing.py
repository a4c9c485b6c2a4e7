"""Identifier lookup and conflict-retrying inserts for numbered records"""

import logging
from typing import Callable, Optional, TypeVar
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fintcs_records.config import settings
from fintcs_records.domain.exceptions import (
    DuplicateIdentifierError,
    SequenceConflictError,
    SequenceStalledError,
)
from fintcs_records.infrastructure.observability.metrics import sequence_conflict_counter

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def last_identifier(db: Session, column, prefix: str, *criteria) -> Optional[str]:
    """
    Highest identifier in `column` that starts with `prefix`.

    Ordered by length first so MEM_1000 ranks above MEM_999.
    """
    return (
        db.query(column)
        .filter(column.startswith(prefix, autoescape=True), *criteria)
        .order_by(func.length(column).desc(), column.desc())
        .limit(1)
        .scalar()
    )


def unique_constraint_name(column) -> str:
    """Name the metadata naming convention gives a single-column UNIQUE constraint"""
    return f"uq_{column.table.name}_{column.name}"


def is_identifier_collision(error: IntegrityError, column) -> bool:
    """
    True when `error` was raised by the UNIQUE constraint on `column`.

    PostgreSQL reports the constraint name; SQLite only names the column.
    """
    diag = getattr(error.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == unique_constraint_name(column)

    message = str(error.orig)
    return "UNIQUE" in message.upper() and f"{column.table.name}.{column.name}" in message


def insert_with_identifier(
    db: Session,
    entity: str,
    column,
    build: Callable[[str], RecordT],
    generate: Callable[[], str],
    explicit: Optional[str] = None,
    max_attempts: Optional[int] = None,
) -> RecordT:
    """
    Insert a numbered record, relying on the UNIQUE constraint on `column`.

    Generated identifiers that collide with a concurrent insert are discarded
    and regenerated; each retry rolls the session back, so call this before
    adding anything else to the session. Any other integrity failure is
    re-raised untouched.

    Raises:
        DuplicateIdentifierError: If an explicit identifier is already taken
        SequenceStalledError: If regenerating yields the identifier that just collided
        SequenceConflictError: If every generated identifier collided
    """
    if max_attempts is None:
        max_attempts = settings.sequence_max_attempts
    attempt = 0
    collided = None

    while True:
        identifier = explicit or generate()
        if identifier == collided:
            # The lookup cannot see whatever holds this number; retrying would loop
            raise SequenceStalledError(identifier)

        record = build(identifier)
        db.add(record)
        try:
            db.flush()
            return record

        except IntegrityError as e:
            db.rollback()
            if not is_identifier_collision(e, column):
                raise
            if explicit:
                raise DuplicateIdentifierError(f"{entity} number {identifier} already exists") from e

            attempt += 1
            collided = identifier
            sequence_conflict_counter.labels(entity=entity).inc()
            logger.warning(
                "Generated identifier already taken",
                extra={"entity": entity, "number": identifier, "attempt": attempt},
            )
            if attempt >= max_attempts:
                raise SequenceConflictError(
                    f"Could not allocate a {entity} number after {max_attempts} attempts"
                ) from e
