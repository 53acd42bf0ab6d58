"""
Transactional joke importer.

All jokes requested by one run are written inside a single transaction:
either every joke is committed or none is.
"""

import re
from dataclasses import dataclass
from typing import Callable, ContextManager, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import Joke, count_jokes
from .errors import (
    ErrorKind,
    ImportCountMismatchError,
    InvalidCountError,
    JokeVaultError,
    StorageError,
    TooManyJokesError,
)
from .fetcher import JokeFetcher
from .logger import get_logger

logger = get_logger()

MAX_JOKES_PER_RUN = 10

COUNT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass
class ImportResult:
    requested: Optional[int]
    stored: int = 0
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.error is None else self.error.exit_code


def parse_count(token: str) -> int:
    """
    Parse the command-line count token.

    Raises:
        InvalidCountError: If the token is not a non-negative integer
        TooManyJokesError: If more than MAX_JOKES_PER_RUN jokes are requested
    """
    text = token.strip() if isinstance(token, str) else ""
    if not COUNT_PATTERN.fullmatch(text):
        raise InvalidCountError(f"Number of jokes must be an integer, got '{token}'")
    count = int(text)
    if count < 0:
        raise InvalidCountError(f"Number of jokes must not be negative: {count}")
    if count > MAX_JOKES_PER_RUN:
        raise TooManyJokesError(f"Too many jokes: {count} requested, at most {MAX_JOKES_PER_RUN} allowed")
    return count


def import_jokes(session: Session, fetcher: JokeFetcher, count: int) -> List[Joke]:
    """
    Fetch and store count unique jokes in one transaction.

    Each joke is flushed as soon as it is fetched, so later duplicate
    checks in the same run see it. Nothing is committed unless all jokes
    were written.

    Args:
        session: Open database session
        fetcher: Fetcher bound to the same session
        count: Number of jokes to import

    Returns:
        The stored Joke rows

    Raises:
        JokeVaultError: On any fetch or storage failure; the transaction
            is rolled back first
    """
    stored: List[Joke] = []
    try:
        before = count_jokes(session)
        for _ in range(count):
            data = fetcher.fetch_unique_joke()
            joke = Joke(joke_id=data.id, url=data.url, joke=data.value)
            session.add(joke)
            session.flush()
            stored.append(joke)
            logger.debug("Joke written", id=joke.id, joke_id=joke.joke_id)

        written = count_jokes(session) - before
        if written != count:
            raise ImportCountMismatchError(f"Expected to write {count} jokes, wrote {written}")
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Database error: {e}") from e
    except Exception:
        session.rollback()
        raise

    logger.record_stored(len(stored))
    return stored


def run_import(token: str, open_fetcher: Callable[[], ContextManager[JokeFetcher]]) -> ImportResult:
    """
    Top-level import operation: parse the count, open the store, import, report.

    The count is validated before open_fetcher is called, so a rejected
    request never touches the database or the API. Errors are logged to
    stderr and returned as an ImportResult instead of being raised.

    Args:
        token: Command-line count token
        open_fetcher: Context manager factory yielding a JokeFetcher bound
            to an open session
    """
    requested: Optional[int] = None
    try:
        requested = parse_count(token)
        with open_fetcher() as fetcher:
            stored = import_jokes(fetcher.session, fetcher, requested)
    except JokeVaultError as e:
        logger.record_error(type(e).__name__)
        logger.error(f"Something bad happened: {e}")
        return ImportResult(requested=requested, error=e.kind, message=str(e))
    except Exception as e:
        logger.record_error(type(e).__name__)
        logger.error(f"Something bad happened: {e}")
        return ImportResult(requested=requested, error=ErrorKind.UNEXPECTED, message=str(e))

    logger.info(f"Imported {len(stored)} jokes", requested=requested)
    return ImportResult(requested=requested, stored=len(stored))
