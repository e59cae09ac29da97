"""Test configuration and fixtures."""

import os

# Settings are read from the environment; these must be set before any
# bizops module builds a Settings instance.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("AUTH__REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("AUTH__BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH__GOOGLE__CLIENT_ID", "test-client-id.apps.googleusercontent.com")

import logfire  # noqa: E402

# Keep telemetry local during tests
logfire.configure(send_to_logfire=False, console=False)
