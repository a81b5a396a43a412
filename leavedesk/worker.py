"""Worker process for scheduled balance reconciliation.

Runs an asyncio loop that compares every cached balance against its audit
trail and logs any divergence.
"""

from __future__ import annotations

import asyncio
import logging

from leavedesk.config import get_settings
from leavedesk.db import get_session_factory
from leavedesk.services.ledger import reconcile_all

logger = logging.getLogger(__name__)


async def run_reconciliation_once() -> int:
    """Reconcile all balances once and return the number of mismatches."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        mismatches = await reconcile_all(session)
    if mismatches:
        logger.warning("Reconciliation found %d inconsistent balances", len(mismatches))
    else:
        logger.info("Reconciliation complete: all balances consistent")
    return len(mismatches)


async def run_reconciliation_loop() -> None:
    """Main worker loop."""
    interval = get_settings().reconciliation_interval_seconds
    logger.info("Reconciliation worker started (interval=%ds)", interval)

    while True:
        try:
            await run_reconciliation_once()
        except Exception:
            logger.exception("Reconciliation run failed")

        await asyncio.sleep(interval)


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(run_reconciliation_loop())


if __name__ == "__main__":
    main()
