#!/usr/bin/env python3
"""Delete expired verification codes.

Expired codes are already unusable; this only keeps the table small.
Meant to run from cron or a scheduled job:

    python scripts/purge_expired_codes.py
"""

import asyncio
import sys

import logfire

from bizops.config import Settings
from bizops.domain.service import OneTimeCodeService
from bizops.util.di.container import create_container
from bizops.util.observability import configure_logfire


async def purge_expired_codes() -> int:
    """Remove every code past its expiry and return how many went."""
    container = create_container()
    try:
        async with container() as request_container:
            otp_service = await request_container.get(OneTimeCodeService)
            return await otp_service.purge_expired()
    finally:
        await container.close()


def main() -> int:
    configure_logfire(Settings())

    try:
        removed = asyncio.run(purge_expired_codes())
    except Exception as e:
        logfire.error(
            "Verification code purge failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise

    print(f"Removed {removed} expired verification codes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
