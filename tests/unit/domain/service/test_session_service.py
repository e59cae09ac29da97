"""Unit tests for SessionService."""

import pytest

from bizops.domain.error import (
    AccountInactiveError,
    TokenMalformedError,
    UnauthorizedError,
)
from bizops.domain.service import IdentityService, SessionService, TokenService
from bizops.domain.value import AccountStatus
from tests.factories import make_identity
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestOpenSession:
    """Tests for open_session method."""

    @pytest.mark.asyncio
    async def test_open_session_records_refresh_fingerprint(self, unit_env):
        """Only a fingerprint of the refresh token is stored."""
        # Arrange
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        token_service = await unit_env.get(TokenService)
        identity = await identity_service.create(make_identity())

        # Act
        session = await session_service.open_session(identity)

        # Assert
        stored = await identity_service.get_by_id(identity.id)
        assert stored.refresh_token_fingerprint == token_service.fingerprint(
            session.refresh_token
        )
        assert session.identity.id == identity.id
        assert token_service.verify_access_token(session.access_token).sub == str(
            identity.id
        )

    @pytest.mark.asyncio
    async def test_public_identity_has_no_credentials(self, unit_env):
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        identity = await identity_service.create(make_identity())

        session = await session_service.open_session(identity)

        dumped = session.identity.model_dump()
        assert "password_hash" not in dumped
        assert "refresh_token_fingerprint" not in dumped
        assert "google_subject_id" not in dumped


class TestRotate:
    """Tests for rotate method."""

    @pytest.mark.asyncio
    async def test_rotate_issues_new_pair_and_retires_old(self, unit_env):
        """After rotation the previous refresh token is refused."""
        # Arrange
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        identity = await identity_service.create(make_identity())
        first = await session_service.open_session(identity)

        # Act
        second = await session_service.rotate(first.refresh_token)

        # Assert
        assert second.refresh_token != first.refresh_token
        with pytest.raises(UnauthorizedError, match="no longer valid"):
            await session_service.rotate(first.refresh_token)
        await session_service.rotate(second.refresh_token)

    @pytest.mark.asyncio
    async def test_newer_login_supersedes_older_session(self, unit_env):
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        identity = await identity_service.create(make_identity())
        older = await session_service.open_session(identity)
        await session_service.open_session(identity)

        with pytest.raises(UnauthorizedError):
            await session_service.rotate(older.refresh_token)

    @pytest.mark.asyncio
    async def test_rotate_rejects_access_token(self, unit_env):
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        identity = await identity_service.create(make_identity())
        session = await session_service.open_session(identity)

        with pytest.raises(TokenMalformedError):
            await session_service.rotate(session.access_token)

    @pytest.mark.asyncio
    async def test_rotate_for_deleted_identity_is_unauthorized(self, unit_env):
        """A token whose subject no longer exists is refused."""
        # Arrange
        session_service = await unit_env.get(SessionService)
        token_service = await unit_env.get(TokenService)
        orphan = make_identity()
        refresh_token = token_service.issue_refresh_token(orphan.id, orphan.email.root)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await session_service.rotate(refresh_token)

    @pytest.mark.asyncio
    async def test_rotate_for_inactive_identity_is_forbidden(self, unit_env):
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        token_service = await unit_env.get(TokenService)
        identity = await identity_service.create(
            make_identity(status=AccountStatus.INACTIVE)
        )
        refresh_token = token_service.issue_refresh_token(identity.id, identity.email.root)
        await identity_service.set_refresh_fingerprint(
            identity.id, token_service.fingerprint(refresh_token)
        )

        with pytest.raises(AccountInactiveError):
            await session_service.rotate(refresh_token)


    @pytest.mark.asyncio
    async def test_rotation_that_loses_the_race_is_refused(self, unit_env, monkeypatch):
        """Two rotations that both read the old fingerprint yield one session."""
        # Arrange
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        identity = await identity_service.create(make_identity())
        first = await session_service.open_session(identity)
        stale = await identity_service.get_by_id(identity.id)
        await session_service.rotate(first.refresh_token)

        async def read_before_concurrent_rotation(identity_id):
            return stale

        monkeypatch.setattr(identity_service, "get_by_id", read_before_concurrent_rotation)

        # Act & Assert
        with pytest.raises(UnauthorizedError, match="no longer valid"):
            await session_service.rotate(first.refresh_token)


class TestCloseSession:
    """Tests for close_session method."""

    @pytest.mark.asyncio
    async def test_close_session_revokes_refresh_token(self, unit_env):
        session_service = await unit_env.get(SessionService)
        identity_service = await unit_env.get(IdentityService)
        identity = await identity_service.create(make_identity())
        session = await session_service.open_session(identity)

        await session_service.close_session(identity.id)

        with pytest.raises(UnauthorizedError):
            await session_service.rotate(session.refresh_token)
