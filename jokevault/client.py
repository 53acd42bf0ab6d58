"""HTTP client for the api.chucknorris.io joke API."""

from typing import Optional

import requests

from .config import DEFAULT_API_URL
from .errors import ApiError, DeserializationError
from .logger import get_logger
from .schema import JokeData

logger = get_logger()

RANDOM_JOKE_PATH = "/jokes/random"


class ChuckNorrisClient:
    """Thin wrapper around a requests.Session for the random joke endpoint."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 15,
    ):
        self.session = session if session is not None else requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def random_url(self) -> str:
        return f"{self.base_url}{RANDOM_JOKE_PATH}"

    def __enter__(self) -> "ChuckNorrisClient":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def fetch_random(self) -> JokeData:
        """Fetch one random joke.

        Raises:
            ApiError: On any HTTP error, timeout, or request failure
            DeserializationError: If the body is not a usable joke object
        """
        url = self.random_url
        logger.record_api_call()
        try:
            resp = self.session.get(url, timeout=self.timeout, headers={"Accept": "application/json"})
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            logger.record_error(f"HTTPError_{status}")
            logger.error("Joke API request failed", url=url, status=status)
            raise ApiError(f"Joke API request failed ({status}): {url}") from e
        except requests.exceptions.Timeout as e:
            logger.record_error("Timeout")
            logger.warning("Joke API request timed out", url=url)
            raise ApiError("Joke API request timed out. Try again later.") from e
        except requests.exceptions.RequestException as e:
            logger.record_error("RequestException")
            logger.error("Joke API request error", url=url, error=str(e))
            raise ApiError(f"Joke API request error: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            logger.record_error("DeserializationError")
            raise DeserializationError(f"Could not deserialize json: {e}") from e

        return JokeData.from_payload(payload)
