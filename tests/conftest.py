"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List, Union

from jokevault.database import Joke, get_session, init_database
from jokevault.fetcher import logger as run_logger
from jokevault.schema import JokeData


def make_payload(joke_id: str, categories=None, value: str = None) -> Dict[str, Any]:
    """Build an api.chucknorris.io style response body."""
    return {
        "categories": list(categories or []),
        "created_at": "2020-01-05 13:42:19.324003",
        "icon_url": "https://api.chucknorris.io/img/avatar/chuck-norris.png",
        "id": joke_id,
        "updated_at": "2020-01-05 13:42:19.324003",
        "url": f"https://api.chucknorris.io/jokes/{joke_id}",
        "value": value or f"Chuck Norris joke {joke_id}.",
    }


def make_joke(joke_id: str, categories=None) -> JokeData:
    return JokeData.from_payload(make_payload(joke_id, categories))


class FakeClient:
    """Scripted stand-in for ChuckNorrisClient.

    Returns (or raises) the scripted items in order.
    """

    def __init__(self, script: List[Union[JokeData, Exception]]):
        self.script = list(script)
        self.calls = 0
        self.closed = False

    def fetch_random(self) -> JokeData:
        self.calls += 1
        if not self.script:
            raise AssertionError("FakeClient ran out of scripted jokes")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()


@pytest.fixture(autouse=True)
def fresh_metrics():
    """Start every test with zeroed run metrics."""
    run_logger.reset_metrics()
    yield


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """Valid API response body."""
    return make_payload("abc123", categories=["dev"], value="Chuck Norris writes code that optimizes itself.")


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'jokes.db'}"


@pytest.fixture
def db_engine(database_url):
    engine = init_database(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session on a fresh temporary SQLite database."""
    session = get_session(db_engine)
    yield session
    session.close()


@pytest.fixture
def stored_jokes(db_session) -> List[Joke]:
    """Store with three jokes already in it."""
    jokes = [
        Joke(joke_id=f"stored{i}", url=f"https://api.chucknorris.io/jokes/stored{i}", joke=f"Stored joke {i}")
        for i in range(3)
    ]
    db_session.add_all(jokes)
    db_session.commit()
    return jokes
