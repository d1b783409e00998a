"""ADSCOUT — Ad Record Persistence."""

from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from adscout.models.ad_models import AdRecord
from adscout.core.logging import get_logger

logger = get_logger("ingestion.storage")


class StorageError(Exception):
    """Raised when the batch insert fails; nothing from the batch is kept."""


def insert_ads(session: Session, records: List[AdRecord]) -> List[AdRecord]:
    """Append all records in one transaction and return them with ids."""
    try:
        session.add_all(records)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error inserting ads: {e}")
        raise StorageError(str(e)) from e

    # Rows are committed from here on; a failed refresh only loses the ids
    try:
        for record in records:
            session.refresh(record)
    except SQLAlchemyError as e:
        logger.warning(f"Inserted ads could not be refreshed: {e}")
    return records
