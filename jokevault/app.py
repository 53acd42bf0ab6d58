import argparse
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .cleanup import cleanup_jokes
from .client import ChuckNorrisClient
from .config import Settings, load_settings
from .database import get_session, init_database
from .env import load_env
from .errors import ErrorKind, StorageError
from .fetcher import JokeFetcher
from .importer import run_import
from .logger import get_logger

logger = get_logger()

CLEAN_COMMAND = "clean"


def cmd_clean(settings: Settings) -> int:
    engine = init_database(settings.database_url)
    try:
        with get_session(engine) as session:
            cleanup_jokes(session)
    finally:
        engine.dispose()
    return 0


@contextmanager
def open_fetcher(settings: Settings, client: Optional[ChuckNorrisClient] = None) -> Iterator[JokeFetcher]:
    """Open the store and the API client, yield a fetcher over both.

    Failures to open the database surface as StorageError.
    """
    try:
        engine = init_database(settings.database_url)
    except (SQLAlchemyError, OSError) as e:
        raise StorageError(f"Cannot open database: {e}") from e
    try:
        with get_session(engine) as session, (client or ChuckNorrisClient(base_url=settings.api_url)) as api:
            yield JokeFetcher(api, session, dedupe_explicit=settings.dedupe_explicit)
    finally:
        engine.dispose()


def cmd_import(token: str, settings: Settings, client: Optional[ChuckNorrisClient] = None) -> int:
    result = run_import(token, lambda: open_fetcher(settings, client=client))
    return result.exit_code


def dispatch(tokens: List[str], settings: Settings, client: Optional[ChuckNorrisClient] = None) -> int:
    """Route a single command-line token to cleanup or import.

    Returns the process exit code.
    """
    if len(tokens) != 1:
        logger.error("Wrong command-line arguments")
        return ErrorKind.WRONG_ARGUMENTS.exit_code

    token = tokens[0]
    try:
        if token == CLEAN_COMMAND:
            return cmd_clean(settings)
        return cmd_import(token, settings, client=client)
    finally:
        logger.log_metrics_summary()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jokevault",
        description="Store random Chuck Norris jokes in a database",
        epilog="Pass 'clean' to delete every stored joke, or a number (at most 10) to import that many jokes.",
    )
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("tokens", nargs="*", metavar="clean|N", help="'clean' or the number of jokes to import")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    # Load .env if present (JOKEVAULT_DATABASE_URL, JOKEVAULT_LOG_LEVEL, etc.)
    load_env()
    args = build_parser().parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    settings = load_settings()
    logger.configure(level=settings.log_level, log_dir=settings.log_dir, enable_file=settings.log_to_file)
    if settings.sql_echo:
        logger.enable_sql_logging()

    return dispatch(args.tokens, settings)


if __name__ == "__main__":
    raise SystemExit(main())
