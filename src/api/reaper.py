"""
Expired-code reaper - periodic purge of stale OTP records.

Issued codes are never deleted by the verification flow. When enabled,
this loop removes records that expired longer than the retention window
ago. Each purge runs in a worker thread so the blocking store call does
not stall the event loop.
"""

import asyncio
import logging
from datetime import timedelta

from src.domain.otp import VerificationEngine

logger = logging.getLogger(__name__)


async def purge_expired_codes_periodically(
    engine: VerificationEngine, interval_seconds: float, retention: timedelta
) -> None:
    """Purge forever until cancelled; a failed pass is logged and retried next interval."""
    logger.info(
        "Expired-code reaper started (interval=%ss, retention=%s)", interval_seconds, retention
    )
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(engine.purge_expired, retention)
        except Exception:
            logger.exception("Expired-code purge failed")
