"""Translate domain failures on write paths into HTTP errors"""

import logging
from contextlib import contextmanager
from fastapi import HTTPException
from sqlalchemy.orm import Session
from fintcs_records.domain.exceptions import (
    DataIntegrityError,
    DuplicateIdentifierError,
    SequenceConflictError,
    SequenceFormatError,
    ValidationError,
)
from fintcs_records.infrastructure.observability.metrics import sequence_format_error_counter


@contextmanager
def domain_errors_as_http(db: Session, entity: str, request_id: str):
    """
    Roll back and map domain errors raised while reading or persisting records.

    - SequenceFormatError → 500 (stored data is corrupt, retrying won't help)
    - other DataIntegrityError → 500
    - ValidationError → 422
    - DuplicateIdentifierError → 409
    - SequenceConflictError → 503
    - anything else → 500
    """
    try:
        yield

    except SequenceFormatError as e:
        sequence_format_error_counter.labels(entity=entity).inc()
        db.rollback()
        logging.error(f"Malformed {entity} number: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=str(e))

    except DataIntegrityError as e:
        db.rollback()
        logging.error(f"Inconsistent {entity} numbering: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=str(e))

    except ValidationError as e:
        db.rollback()
        logging.warning(f"Invalid {entity}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except DuplicateIdentifierError as e:
        db.rollback()
        logging.warning(f"Duplicate {entity} number: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except SequenceConflictError as e:
        db.rollback()
        logging.error(f"Numbering contention: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail=f"Could not allocate a {entity} number, retry later")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
