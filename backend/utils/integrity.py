# utils/integrity.py
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from utils.errors import ConflictError

logger = logging.getLogger(__name__)


def find_duplicate(db: Session, model, field: str, value, exclude_id: Optional[int] = None):
    """Return a row of ``model`` whose ``field`` equals ``value``, ignoring ``exclude_id``."""
    if value is None:
        return None
    query = db.query(model).filter(getattr(model, field) == value)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return query.first()


def commit_or_conflict(db: Session, message: str):
    """Commit, turning a unique index violation into a ConflictError.

    Covers concurrent inserts that slipped past :func:`find_duplicate`.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Commit rejected by a unique constraint: %s", message)
        raise ConflictError(message)
