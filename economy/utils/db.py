import logging
from contextlib import contextmanager

from django.conf import settings
from django.db import OperationalError, connection, transaction

from economy.exceptions import TransientError

logger = logging.getLogger(__name__)


def _apply_timeouts():
    """Bound lock waits and statement time for the current transaction."""
    if connection.vendor != "postgresql":
        return
    lock_timeout = int(getattr(settings, "LEDGER_LOCK_TIMEOUT_MS", 5000))
    statement_timeout = int(getattr(settings, "LEDGER_STATEMENT_TIMEOUT_MS", 15000))
    with connection.cursor() as cursor:
        cursor.execute(f"SET LOCAL lock_timeout = {lock_timeout}")
        cursor.execute(f"SET LOCAL statement_timeout = {statement_timeout}")


@contextmanager
def ledger_unit():
    """
    Run a block as one atomic unit of work against the ledger.

    Nested units become savepoints of the outermost one. Lock timeouts,
    deadlocks and other operational failures surface as TransientError once
    the transaction has been rolled back, so callers can retry safely.
    Usable as a decorator or a context manager.
    """
    outermost = not connection.in_atomic_block
    try:
        with transaction.atomic():
            if outermost:
                _apply_timeouts()
            yield
    except OperationalError as exc:
        logger.warning("Ledger unit rolled back on transient error: %s", exc)
        raise TransientError() from exc
