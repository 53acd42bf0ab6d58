"""
Cleanup module for purging the joke store.

Deletes every stored joke and resets the id sequence so the next joke
stored gets id 1 again. Both steps share one transaction.
"""

from sqlalchemy.orm import Session

from .database import delete_all_jokes, reset_identity
from .logger import get_logger

logger = get_logger()


def cleanup_jokes(session: Session) -> int:
    """
    Remove all stored jokes and reset the id sequence.

    Errors are not handled here; the transaction is rolled back and the
    exception propagates.

    Args:
        session: Open database session

    Returns:
        Number of jokes removed
    """
    try:
        removed = delete_all_jokes(session)
        reset_identity(session)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.record_deleted(removed)
    logger.info(f"Cleanup complete: {removed} jokes removed", jokes_removed=removed)
    return removed
