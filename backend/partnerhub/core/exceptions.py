# partnerhub/core/exceptions.py
# Cross-module exceptions. Domain errors live in each module's exceptions.py

from contextlib import contextmanager
from typing import Any, Optional
from loguru import logger
from pymongo.errors import PyMongoError

class RepositoryError(Exception):
    """Unexpected database failure raised from repository code."""
    pass

@contextmanager
def translate_db_errors(action: str, session: Optional[Any] = None, **context):
    """Wraps driver errors in RepositoryError.

    Inside a transaction the original error is re-raised untouched so that
    ``with_transaction`` can still read its error labels and retry.
    """
    try:
        yield
    except PyMongoError as e:
        if session is not None:
            raise
        logger.bind(**context).exception(f"Database error {action}.")
        raise RepositoryError(f"Error {action}: {e}") from e
