"""Application layer DI providers."""

from dishka import Scope, provide

from bizops.application.usecase.auth import (
    AuthenticateRequestUseCase,
    ChangePasswordUseCase,
    ForgotPasswordUseCase,
    GetCurrentIdentityUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
    ResendCodeUseCase,
    SignupUseCase,
    VerifyCodeUseCase,
)
from bizops.application.usecase.team import CreateMemberUseCase
from bizops.domain.service import (
    IdentityService,
    IdentityVerifier,
    OneTimeCodeService,
    PasswordService,
    SessionService,
    TokenService,
)
from bizops.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_signup_use_case(
        self,
        identity_service: IdentityService,
        otp_service: OneTimeCodeService,
        password_service: PasswordService,
        session_service: SessionService,
        identity_verifier: IdentityVerifier,
    ) -> SignupUseCase:
        """Provide signup use case."""
        return SignupUseCase(
            identity_service=identity_service,
            otp_service=otp_service,
            password_service=password_service,
            session_service=session_service,
            identity_verifier=identity_verifier,
        )

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        identity_service: IdentityService,
        password_service: PasswordService,
        session_service: SessionService,
        identity_verifier: IdentityVerifier,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            identity_service=identity_service,
            password_service=password_service,
            session_service=session_service,
            identity_verifier=identity_verifier,
        )

    @provide(scope=Scope.REQUEST)
    def get_forgot_password_use_case(
        self,
        identity_service: IdentityService,
        otp_service: OneTimeCodeService,
        password_service: PasswordService,
        session_service: SessionService,
    ) -> ForgotPasswordUseCase:
        """Provide forgot password use case."""
        return ForgotPasswordUseCase(
            identity_service=identity_service,
            otp_service=otp_service,
            password_service=password_service,
            session_service=session_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_resend_code_use_case(
        self, otp_service: OneTimeCodeService
    ) -> ResendCodeUseCase:
        """Provide resend code use case."""
        return ResendCodeUseCase(otp_service=otp_service)

    @provide(scope=Scope.REQUEST)
    def get_verify_code_use_case(
        self, identity_service: IdentityService, otp_service: OneTimeCodeService
    ) -> VerifyCodeUseCase:
        """Provide verify code use case."""
        return VerifyCodeUseCase(
            identity_service=identity_service, otp_service=otp_service
        )

    @provide(scope=Scope.REQUEST)
    def get_change_password_use_case(
        self,
        identity_service: IdentityService,
        password_service: PasswordService,
        session_service: SessionService,
    ) -> ChangePasswordUseCase:
        """Provide change password use case."""
        return ChangePasswordUseCase(
            identity_service=identity_service,
            password_service=password_service,
            session_service=session_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_refresh_session_use_case(
        self, session_service: SessionService
    ) -> RefreshSessionUseCase:
        """Provide refresh session use case."""
        return RefreshSessionUseCase(session_service=session_service)

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(self, session_service: SessionService) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(session_service=session_service)

    @provide(scope=Scope.REQUEST)
    def get_current_identity_use_case(
        self, identity_service: IdentityService
    ) -> GetCurrentIdentityUseCase:
        """Provide get current identity use case."""
        return GetCurrentIdentityUseCase(identity_service=identity_service)

    @provide(scope=Scope.REQUEST)
    def get_authenticate_request_use_case(
        self, token_service: TokenService
    ) -> AuthenticateRequestUseCase:
        """Provide request authentication use case."""
        return AuthenticateRequestUseCase(token_service=token_service)

    # Team use cases
    @provide(scope=Scope.REQUEST)
    def get_create_member_use_case(
        self, identity_service: IdentityService, password_service: PasswordService
    ) -> CreateMemberUseCase:
        """Provide create team member use case."""
        return CreateMemberUseCase(
            identity_service=identity_service, password_service=password_service
        )
