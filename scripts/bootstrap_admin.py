#!/usr/bin/env python3
"""Create the first admin identity.

Self-service signup only ever creates ``user`` accounts and team members
are created by admins, so the first admin has to come from here.

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD='S3cure!pass' python scripts/bootstrap_admin.py

    python scripts/bootstrap_admin.py --email admin@example.com --password 'S3cure!pass' --name Admin
"""

import argparse
import asyncio
import os
import sys
from uuid import uuid4

import logfire

from bizops.application.usecase.base import parse_email
from bizops.config import Settings
from bizops.domain.error import DomainError
from bizops.domain.model import Identity
from bizops.domain.service import IdentityService, PasswordService
from bizops.domain.value import IdentityId, Role
from bizops.util.di.container import create_container
from bizops.util.logging import redact_email
from bizops.util.observability import configure_logfire


async def bootstrap_admin(email: str, password: str, name: str | None) -> Identity:
    """Create an admin identity with a verified email.

    Raises:
        DomainError: If the email is invalid, the password weak or taken
    """
    container = create_container()
    try:
        async with container() as request_container:
            identity_service = await request_container.get(IdentityService)
            password_service = await request_container.get(PasswordService)

            address = parse_email(email)
            password_service.ensure_strong(password)
            await identity_service.ensure_available(address)

            return await identity_service.create(
                Identity(
                    id=IdentityId(uuid4()),
                    email=address,
                    name=name,
                    password_hash=await password_service.hash(password),
                    is_email_verified=True,
                    role=Role.ADMIN,
                )
            )
    finally:
        await container.close()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Create the first Bizops admin",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--email",
        default=os.environ.get("ADMIN_EMAIL"),
        help="Admin email (or set ADMIN_EMAIL env var)",
    )
    parser.add_argument(
        "--password",
        default=os.environ.get("ADMIN_PASSWORD"),
        help="Admin password (or set ADMIN_PASSWORD env var)",
    )
    parser.add_argument("--name", default=os.environ.get("ADMIN_NAME"), help="Display name")
    args = parser.parse_args()

    if not args.email or not args.password:
        parser.error("--email and --password (or ADMIN_EMAIL/ADMIN_PASSWORD) are required")

    configure_logfire(Settings())

    try:
        identity = asyncio.run(bootstrap_admin(args.email, args.password, args.name))
    except DomainError as e:
        logfire.error(
            "Admin bootstrap refused", email=redact_email(args.email), code=e.code
        )
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    logfire.info("Admin created", identity_id=str(identity.id))
    print(f"Created admin {identity.email} (id: {identity.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
