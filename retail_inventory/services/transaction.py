"""
Transaction boundary for write operations
"""

import functools
import logging

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError

from retail_inventory.database import db
from retail_inventory.exceptions import TransactionConflict

logger = logging.getLogger(__name__)

# Deadlocks, lock-wait timeouts, dropped connections and unique-key races
RETRYABLE_ERRORS = (OperationalError, IntegrityError)

_ACTIVE_KEY = 'retail_inventory.transaction_active'


def apply_lock_timeout(session):
    """Bound row-lock waits for the current transaction"""
    seconds = current_app.config.get('LOCK_WAIT_TIMEOUT_SECONDS')
    if not seconds:
        return

    dialect = session.get_bind().dialect.name
    if dialect == 'mysql':
        session.execute(
            text('SET SESSION innodb_lock_wait_timeout = :seconds'),
            {'seconds': int(seconds)}
        )
    elif dialect == 'postgresql':
        # SET does not take bind parameters
        session.execute(text(f"SET LOCAL lock_timeout = '{int(seconds)}s'"))


def transactional(func):
    """
    Run ``func`` as one all-or-nothing unit of work.

    Commits on success. Any exception rolls back every write made inside the
    unit. Database conflicts re-run the whole unit up to TRANSACTION_RETRY_LIMIT
    times before surfacing as TransactionConflict; every other error is re-raised
    unchanged. Calls made from inside an active unit join it instead of
    committing on their own.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        session = db.session
        if session.info.get(_ACTIVE_KEY):
            return func(*args, **kwargs)

        retries = current_app.config.get('TRANSACTION_RETRY_LIMIT', 1)
        attempt = 0
        while True:
            session.info[_ACTIVE_KEY] = True
            try:
                apply_lock_timeout(session)
                result = func(*args, **kwargs)
                session.commit()
                return result
            except RETRYABLE_ERRORS as e:
                session.rollback()
                if attempt >= retries:
                    logger.error(
                        f"Transaction {func.__qualname__} failed after {attempt + 1} attempt(s): {e}"
                    )
                    raise TransactionConflict(
                        'The operation conflicted with a concurrent update; please retry'
                    ) from e
                attempt += 1
                logger.warning(f"Retrying {func.__qualname__} after database conflict: {e}")
            except Exception:
                session.rollback()
                raise
            finally:
                session.info.pop(_ACTIVE_KEY, None)

    return wrapper
