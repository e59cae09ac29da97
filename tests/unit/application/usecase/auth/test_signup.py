"""Unit tests for SignupUseCase."""

import pytest
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from bizops.adapter.google import MockGoogleIdentityVerifier
from bizops.adapter.smtp import MockEmailSender
from bizops.application.usecase.auth import SignupUseCase
from bizops.application.usecase.auth.signup import (
    IdentityTokenSignup,
    PasswordSignupComplete,
    PasswordSignupStart,
    SignupRequest,
)
from bizops.domain.error import (
    CodeMismatchError,
    CodeNotFoundError,
    ConflictError,
    EmailUnverifiedError,
    InvalidEmailError,
    InvalidIdentityTokenError,
    InvalidMobileNumberError,
    WeakPasswordError,
)
from bizops.domain.repository import VerificationCodeRepository
from bizops.domain.service import IdentityService, PasswordService
from bizops.domain.value import EmailAddress, Role
from tests.factories import STRONG_PASSWORD, make_identity
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestSignupRequestShapes:
    """The request body picks the signup path."""

    def test_body_without_otp_is_start(self):
        request = TypeAdapter(SignupRequest).validate_python(
            {"email": "alice@example.com", "password": STRONG_PASSWORD}
        )
        assert isinstance(request, PasswordSignupStart)

    def test_body_with_otp_is_complete(self):
        request = TypeAdapter(SignupRequest).validate_python(
            {"email": "alice@example.com", "password": STRONG_PASSWORD, "otp": "123456"}
        )
        assert isinstance(request, PasswordSignupComplete)

    def test_body_with_identity_token_is_google(self):
        request = TypeAdapter(SignupRequest).validate_python(
            {"identityToken": "tok", "mobileNumber": "+15550100"}
        )
        assert isinstance(request, IdentityTokenSignup)
        assert request.mobile_number == "+15550100"

    def test_empty_body_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            TypeAdapter(SignupRequest).validate_python({})

    def test_unknown_field_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            TypeAdapter(SignupRequest).validate_python(
                {"email": "a@example.com", "password": STRONG_PASSWORD, "role": "admin"}
            )


class TestPasswordSignup:
    """Tests for the two-step password signup."""

    @pytest.mark.asyncio
    async def test_start_sends_code_without_creating_identity(self, unit_env):
        # Arrange
        signup = await unit_env.get(SignupUseCase)
        identity_service = await unit_env.get(IdentityService)
        sender = await unit_env.get(MockEmailSender)

        # Act
        response = await signup.execute(
            PasswordSignupStart(email="Alice@Example.com", password=STRONG_PASSWORD)
        )

        # Assert
        assert response.created is False
        assert response.session is None
        assert response.message == "Verification code sent to your email."
        assert sender.last_code_for("alice@example.com") is not None
        assert await identity_service.find_by_email(EmailAddress("alice@example.com")) is None

    @pytest.mark.asyncio
    async def test_complete_creates_verified_user_with_session(self, unit_env):
        # Arrange
        signup = await unit_env.get(SignupUseCase)
        identity_service = await unit_env.get(IdentityService)
        password_service = await unit_env.get(PasswordService)
        sender = await unit_env.get(MockEmailSender)
        await signup.execute(
            PasswordSignupStart(email="alice@example.com", password=STRONG_PASSWORD)
        )
        code = sender.last_code_for("alice@example.com")

        # Act
        response = await signup.execute(
            PasswordSignupComplete(
                email="alice@example.com",
                password=STRONG_PASSWORD,
                otp=code,
                name="Alice",
                profession="Designer",
                mobile_number="+1 (555) 010-0999",
            )
        )

        # Assert
        assert response.created is True
        assert response.message == "Account created successfully."
        assert response.session is not None
        assert response.session.identity.role == Role.USER
        assert response.session.identity.is_email_verified is True
        assert response.session.identity.is_google_signup is False

        stored = await identity_service.find_by_email(EmailAddress("alice@example.com"))
        assert stored is not None
        assert stored.mobile_number == "+15550100999"
        assert stored.profession == "Designer"
        assert await password_service.verify(STRONG_PASSWORD, stored.password_hash)
        assert stored.refresh_token_fingerprint is not None

    @pytest.mark.asyncio
    async def test_complete_with_wrong_code_creates_nothing(self, unit_env):
        signup = await unit_env.get(SignupUseCase)
        identity_service = await unit_env.get(IdentityService)
        sender = await unit_env.get(MockEmailSender)
        await signup.execute(
            PasswordSignupStart(email="alice@example.com", password=STRONG_PASSWORD)
        )
        code = sender.last_code_for("alice@example.com")
        wrong = "000000" if code != "000000" else "111111"

        with pytest.raises(CodeMismatchError):
            await signup.execute(
                PasswordSignupComplete(
                    email="alice@example.com", password=STRONG_PASSWORD, otp=wrong
                )
            )
        assert await identity_service.find_by_email(EmailAddress("alice@example.com")) is None

    @pytest.mark.asyncio
    async def test_complete_without_prior_code_raises_not_found(self, unit_env):
        signup = await unit_env.get(SignupUseCase)

        with pytest.raises(CodeNotFoundError):
            await signup.execute(
                PasswordSignupComplete(
                    email="alice@example.com", password=STRONG_PASSWORD, otp="123456"
                )
            )

    @pytest.mark.asyncio
    async def test_weak_password_rejected_before_code_is_sent(self, unit_env):
        """No code is stored or mailed for a request that fails validation."""
        # Arrange
        signup = await unit_env.get(SignupUseCase)
        repo = await unit_env.get(VerificationCodeRepository)
        sender = await unit_env.get(MockEmailSender)

        # Act & Assert
        with pytest.raises(WeakPasswordError):
            await signup.execute(
                PasswordSignupStart(email="alice@example.com", password="password")
            )
        assert await repo.find(EmailAddress("alice@example.com")) is None
        assert sender.outbox == []

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, unit_env):
        signup = await unit_env.get(SignupUseCase)

        with pytest.raises(InvalidEmailError):
            await signup.execute(
                PasswordSignupStart(email="not-an-email", password=STRONG_PASSWORD)
            )

    @pytest.mark.asyncio
    async def test_invalid_mobile_number_rejected(self, unit_env):
        signup = await unit_env.get(SignupUseCase)

        with pytest.raises(InvalidMobileNumberError):
            await signup.execute(
                PasswordSignupStart(
                    email="alice@example.com",
                    password=STRONG_PASSWORD,
                    mobile_number="call me",
                )
            )

    @pytest.mark.asyncio
    async def test_existing_email_conflicts_on_complete(self, unit_env):
        """Uniqueness is checked after the code is verified."""
        # Arrange
        signup = await unit_env.get(SignupUseCase)
        identity_service = await unit_env.get(IdentityService)
        sender = await unit_env.get(MockEmailSender)
        await identity_service.create(make_identity(email="alice@example.com"))
        await signup.execute(
            PasswordSignupStart(email="alice@example.com", password=STRONG_PASSWORD)
        )
        code = sender.last_code_for("alice@example.com")

        # Act & Assert
        with pytest.raises(ConflictError):
            await signup.execute(
                PasswordSignupComplete(
                    email="ALICE@example.com", password=STRONG_PASSWORD, otp=code
                )
            )


class TestIdentityTokenSignup:
    """Tests for Google signup."""

    @pytest.mark.asyncio
    async def test_creates_google_identity_without_password(self, unit_env):
        # Arrange
        signup = await unit_env.get(SignupUseCase)
        identity_service = await unit_env.get(IdentityService)
        verifier = await unit_env.get(MockGoogleIdentityVerifier)
        token = verifier.issue(
            "google-123",
            "Carol@Example.com",
            name="Carol",
            avatar_url="https://example.com/carol.png",
        )

        # Act
        response = await signup.execute(
            IdentityTokenSignup(identity_token=token, email="ignored@example.com")
        )

        # Assert
        assert response.created is True
        assert response.session.identity.email.root == "carol@example.com"
        assert response.session.identity.is_google_signup is True
        assert response.session.identity.avatar_url == "https://example.com/carol.png"

        stored = await identity_service.find_by_subject_id("google-123")
        assert stored is not None
        assert stored.password_hash is None
        assert stored.name == "Carol"
        assert await identity_service.find_by_email(EmailAddress("ignored@example.com")) is None

    @pytest.mark.asyncio
    async def test_unverified_email_is_forbidden(self, unit_env):
        signup = await unit_env.get(SignupUseCase)
        identity_service = await unit_env.get(IdentityService)
        verifier = await unit_env.get(MockGoogleIdentityVerifier)
        token = verifier.issue("google-123", "carol@example.com", verified=False)

        with pytest.raises(EmailUnverifiedError):
            await signup.execute(IdentityTokenSignup(identity_token=token))
        assert await identity_service.find_by_subject_id("google-123") is None

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, unit_env):
        signup = await unit_env.get(SignupUseCase)

        with pytest.raises(InvalidIdentityTokenError):
            await signup.execute(IdentityTokenSignup(identity_token="forged"))

    @pytest.mark.asyncio
    async def test_email_held_by_password_account_conflicts(self, unit_env):
        signup = await unit_env.get(SignupUseCase)
        identity_service = await unit_env.get(IdentityService)
        verifier = await unit_env.get(MockGoogleIdentityVerifier)
        await identity_service.create(make_identity(email="carol@example.com"))
        token = verifier.issue("google-123", "carol@example.com")

        with pytest.raises(ConflictError):
            await signup.execute(IdentityTokenSignup(identity_token=token))

    @pytest.mark.asyncio
    async def test_second_signup_with_same_subject_conflicts(self, unit_env):
        signup = await unit_env.get(SignupUseCase)
        verifier = await unit_env.get(MockGoogleIdentityVerifier)
        await signup.execute(
            IdentityTokenSignup(identity_token=verifier.issue("google-123", "carol@example.com"))
        )

        with pytest.raises(ConflictError):
            await signup.execute(
                IdentityTokenSignup(
                    identity_token=verifier.issue("google-123", "carol2@example.com")
                )
            )
