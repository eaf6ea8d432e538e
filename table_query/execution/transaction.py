"""
Scoped transactions over a database gateway.
"""

from contextlib import contextmanager
from typing import Iterator

import structlog

from table_query.core.interfaces import IDatabaseGateway

logger = structlog.get_logger()


@contextmanager
def transaction(gateway: IDatabaseGateway) -> Iterator[IDatabaseGateway]:
    """
    Run a block inside a transaction.

    Commits when the block finishes, rolls back and re-raises when it fails.
    Inside an already open transaction the block joins it: the outer scope
    alone commits or rolls back.

    Args:
        gateway: Database gateway owning the connection

    Yields:
        The same gateway, for convenience
    """
    if gateway.in_transaction:
        yield gateway
        return

    gateway.begin_transaction()
    try:
        yield gateway
    except BaseException as e:
        gateway.rollback()
        logger.warning("transaction_rolled_back", error=str(e))
        raise
    else:
        gateway.commit()
