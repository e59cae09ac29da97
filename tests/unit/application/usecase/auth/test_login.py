"""Unit tests for LoginUseCase."""

import pytest

from bizops.adapter.google import MockGoogleIdentityVerifier
from bizops.application.usecase.auth import LoginUseCase
from bizops.application.usecase.auth.login import IdentityTokenLogin, PasswordLogin
from bizops.domain.error import (
    AccountInactiveError,
    AccountNotLinkedError,
    EmailUnverifiedError,
    InvalidCredentialsError,
    InvalidEmailError,
)
from bizops.domain.service import IdentityService, PasswordService, TokenService
from bizops.domain.value import AccountStatus, Role
from tests.factories import STRONG_PASSWORD, make_identity
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestPasswordLogin:
    """Tests for email/password login."""

    @pytest.mark.asyncio
    async def test_login_returns_session_for_valid_credentials(self, unit_env):
        # Arrange
        login = await unit_env.get(LoginUseCase)
        identity_service = await unit_env.get(IdentityService)
        token_service = await unit_env.get(TokenService)
        identity = await identity_service.create(make_identity(role=Role.MEMBER))

        # Act
        response = await login.execute(
            PasswordLogin(email="ALICE@example.com", password=STRONG_PASSWORD)
        )

        # Assert
        assert response.message == "Login successful."
        assert response.session.identity.id == identity.id
        claims = token_service.verify_access_token(response.session.access_token)
        assert claims.role == Role.MEMBER

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_are_indistinguishable(self, unit_env):
        """Both failures raise the same error with the same message."""
        # Arrange
        login = await unit_env.get(LoginUseCase)
        identity_service = await unit_env.get(IdentityService)
        await identity_service.create(make_identity())

        # Act
        with pytest.raises(InvalidCredentialsError) as unknown:
            await login.execute(
                PasswordLogin(email="nobody@example.com", password=STRONG_PASSWORD)
            )
        with pytest.raises(InvalidCredentialsError) as wrong:
            await login.execute(
                PasswordLogin(email="alice@example.com", password="Wr0ng!pass")
            )

        # Assert
        assert unknown.value.message == wrong.value.message
        assert unknown.value.code == wrong.value.code

    @pytest.mark.asyncio
    async def test_unknown_email_still_verifies_a_password(self, unit_env, monkeypatch):
        # Arrange
        login = await unit_env.get(LoginUseCase)
        password_service = await unit_env.get(PasswordService)
        calls = []
        real_verify = password_service.verify

        async def recording_verify(password, password_hash):
            calls.append(password_hash)
            return await real_verify(password, password_hash)

        monkeypatch.setattr(password_service, "verify", recording_verify)

        # Act
        with pytest.raises(InvalidCredentialsError):
            await login.execute(
                PasswordLogin(email="nobody@example.com", password=STRONG_PASSWORD)
            )

        # Assert
        assert calls == [None]

    @pytest.mark.asyncio
    async def test_google_only_account_cannot_use_password(self, unit_env):
        login = await unit_env.get(LoginUseCase)
        identity_service = await unit_env.get(IdentityService)
        await identity_service.create(
            make_identity(password=None, google_subject_id="google-123")
        )

        with pytest.raises(InvalidCredentialsError):
            await login.execute(
                PasswordLogin(email="alice@example.com", password=STRONG_PASSWORD)
            )

    @pytest.mark.asyncio
    async def test_inactive_account_is_refused(self, unit_env):
        login = await unit_env.get(LoginUseCase)
        identity_service = await unit_env.get(IdentityService)
        await identity_service.create(make_identity(status=AccountStatus.INACTIVE))

        with pytest.raises(AccountInactiveError):
            await login.execute(
                PasswordLogin(email="alice@example.com", password=STRONG_PASSWORD)
            )

    @pytest.mark.asyncio
    async def test_malformed_email_rejected(self, unit_env):
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(InvalidEmailError):
            await login.execute(PasswordLogin(email="alice", password=STRONG_PASSWORD))


class TestIdentityTokenLogin:
    """Tests for Google login."""

    @pytest.mark.asyncio
    async def test_login_matches_by_subject_id(self, unit_env):
        # Arrange
        login = await unit_env.get(LoginUseCase)
        identity_service = await unit_env.get(IdentityService)
        verifier = await unit_env.get(MockGoogleIdentityVerifier)
        identity = await identity_service.create(
            make_identity(password=None, google_subject_id="google-123")
        )
        token = verifier.issue("google-123", "alice@example.com")

        # Act
        response = await login.execute(IdentityTokenLogin(identity_token=token))

        # Assert
        assert response.session.identity.id == identity.id

    @pytest.mark.asyncio
    async def test_unlinked_subject_raises_not_linked(self, unit_env):
        """A Google account with the same email but no link is not logged in."""
        login = await unit_env.get(LoginUseCase)
        identity_service = await unit_env.get(IdentityService)
        verifier = await unit_env.get(MockGoogleIdentityVerifier)
        await identity_service.create(make_identity())
        token = verifier.issue("google-999", "alice@example.com")

        with pytest.raises(AccountNotLinkedError):
            await login.execute(IdentityTokenLogin(identity_token=token))

    @pytest.mark.asyncio
    async def test_unverified_email_is_forbidden(self, unit_env):
        login = await unit_env.get(LoginUseCase)
        identity_service = await unit_env.get(IdentityService)
        verifier = await unit_env.get(MockGoogleIdentityVerifier)
        await identity_service.create(
            make_identity(password=None, google_subject_id="google-123")
        )
        token = verifier.issue("google-123", "alice@example.com", verified=False)

        with pytest.raises(EmailUnverifiedError):
            await login.execute(IdentityTokenLogin(identity_token=token))
