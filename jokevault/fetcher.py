"""
Deduplicating fetcher.

Pulls random jokes from the API until one is found whose external id is
not stored yet, giving up after a fixed number of attempts.
"""

from sqlalchemy.orm import Session

from .client import ChuckNorrisClient
from .database import joke_exists
from .errors import ExhaustedSupplyError
from .logger import get_logger
from .schema import JokeData

logger = get_logger()

MAX_ATTEMPTS = 9


class JokeFetcher:
    """
    Fetch jokes that are not in the store yet.

    Explicit jokes are accepted without the duplicate check unless
    dedupe_explicit is set.
    """

    def __init__(
        self,
        client: ChuckNorrisClient,
        session: Session,
        max_attempts: int = MAX_ATTEMPTS,
        dedupe_explicit: bool = False,
    ):
        self.client = client
        self.session = session
        self.max_attempts = max_attempts
        self.dedupe_explicit = dedupe_explicit

    def fetch_unique_joke(self) -> JokeData:
        """
        Fetch one joke not yet present in the store.

        Returns:
            The accepted JokeData

        Raises:
            DeserializationError: On a malformed response (not retried)
            ApiError: On HTTP failures (not retried)
            ExhaustedSupplyError: If every attempt returned a stored joke
        """
        attempts = 0
        while attempts < self.max_attempts:
            joke = self.client.fetch_random()

            if joke.is_explicit and not self.dedupe_explicit:
                logger.record_fetch(explicit=True)
                logger.debug("Accepting explicit joke without duplicate check", joke_id=joke.id)
                return joke

            if not joke_exists(self.session, joke.id):
                logger.record_fetch()
                return joke

            attempts += 1
            logger.record_duplicate()
            logger.debug("Duplicate joke, retrying", joke_id=joke.id, attempt=attempts)

        logger.record_error("ExhaustedSupplyError")
        raise ExhaustedSupplyError(
            f"Got only already stored jokes in {self.max_attempts} attempts, "
            "we have all of the Chuck Norris jokes in the world"
        )
