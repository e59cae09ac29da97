"""End-to-end tests for the authentication flow."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from bizops.adapter.google import MockGoogleIdentityVerifier
from bizops.adapter.smtp import MockEmailSender
from bizops.config import AuthSettings
from tests.factories import STRONG_PASSWORD
from tests.harness import create_api_fixture

# E2E test fixture - app served in-process with mocked infrastructure
api_env = create_api_fixture()

AUTH = "/api/v1/auth"


async def _sign_up(api_env, email: str = "alice@example.com"):
    """Run both password signup steps and return the final response."""
    await api_env.client.post(
        f"{AUTH}/signup", json={"email": email, "password": STRONG_PASSWORD}
    )
    sender = await api_env.get(MockEmailSender)
    return await api_env.client.post(
        f"{AUTH}/signup",
        json={
            "email": email,
            "password": STRONG_PASSWORD,
            "otp": sender.last_code_for(email),
            "name": "Alice",
            "mobileNumber": "+15550100",
        },
    )


class TestPasswordSignup:
    """Password signup over HTTP."""

    @pytest.mark.asyncio
    async def test_signup_start_sends_code(self, api_env):
        # Act
        response = await api_env.client.post(
            f"{AUTH}/signup", json={"email": "alice@example.com", "password": STRONG_PASSWORD}
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Verification code sent to your email."
        assert body["data"] is None
        assert "accessToken" not in response.cookies

    @pytest.mark.asyncio
    async def test_signup_complete_creates_account_and_sets_cookies(self, api_env):
        # Act
        response = await _sign_up(api_env)

        # Assert
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Account created successfully."
        user = body["data"]["user"]
        assert user["email"] == "alice@example.com"
        assert user["role"] == "user"
        assert user["isEmailVerified"] is True
        assert user["mobileNumber"] == "+15550100"
        assert "passwordHash" not in user
        assert "refreshTokenFingerprint" not in user
        assert body["data"]["accessToken"]
        assert "refreshToken" not in body["data"]

        set_cookies = response.headers.get_list("set-cookie")
        access_cookie = next(c for c in set_cookies if c.startswith("accessToken="))
        refresh_cookie = next(c for c in set_cookies if c.startswith("refreshToken="))
        for cookie in (access_cookie, refresh_cookie):
            lowered = cookie.lower()
            assert "httponly" in lowered
            assert "secure" in lowered
            assert "samesite=strict" in lowered
            assert "path=/" in lowered
            assert "max-age=604800" in lowered

    @pytest.mark.asyncio
    async def test_signup_twice_conflicts(self, api_env):
        await _sign_up(api_env)

        response = await _sign_up(api_env)

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["kind"] == "conflict"
        assert error["message"] == "An account already exists."

    @pytest.mark.asyncio
    async def test_weak_password_is_bad_request(self, api_env):
        response = await api_env.client.post(
            f"{AUTH}/signup", json={"email": "alice@example.com", "password": "password"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "weak_password"

    @pytest.mark.asyncio
    async def test_wrong_code_is_bad_request(self, api_env):
        await api_env.client.post(
            f"{AUTH}/signup", json={"email": "alice@example.com", "password": STRONG_PASSWORD}
        )
        sender = await api_env.get(MockEmailSender)
        code = sender.last_code_for("alice@example.com")
        wrong = "000000" if code != "000000" else "111111"

        response = await api_env.client.post(
            f"{AUTH}/signup",
            json={"email": "alice@example.com", "password": STRONG_PASSWORD, "otp": wrong},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "code_mismatch"


class TestGoogleSignupAndLogin:
    """Google ID token signup and login over HTTP."""

    @pytest.mark.asyncio
    async def test_google_signup_then_login(self, api_env):
        # Arrange
        verifier = await api_env.get(MockGoogleIdentityVerifier)

        # Act
        signup = await api_env.client.post(
            f"{AUTH}/signup",
            json={"identityToken": verifier.issue("google-1", "carol@example.com")},
        )
        login = await api_env.client.post(
            f"{AUTH}/login",
            json={"identityToken": verifier.issue("google-1", "carol@example.com")},
        )

        # Assert
        assert signup.status_code == 201
        assert signup.json()["data"]["user"]["isGoogleSignup"] is True
        assert login.status_code == 200
        assert login.json()["data"]["user"]["email"] == "carol@example.com"

    @pytest.mark.asyncio
    async def test_google_login_without_account_is_not_found(self, api_env):
        verifier = await api_env.get(MockGoogleIdentityVerifier)

        response = await api_env.client.post(
            f"{AUTH}/login",
            json={"identityToken": verifier.issue("google-2", "dave@example.com")},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "account_not_found"

    @pytest.mark.asyncio
    async def test_invalid_identity_token_is_unauthorized(self, api_env):
        response = await api_env.client.post(
            f"{AUTH}/login", json={"identityToken": "forged"}
        )

        assert response.status_code == 401


class TestPasswordLogin:
    """Password login over HTTP."""

    @pytest.mark.asyncio
    async def test_login_sets_cookies(self, api_env):
        await _sign_up(api_env)
        api_env.client.cookies.clear()

        response = await api_env.client.post(
            f"{AUTH}/login", json={"email": "alice@example.com", "password": STRONG_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Login successful."
        assert "accessToken" in response.cookies
        assert "refreshToken" in response.cookies

    @pytest.mark.asyncio
    async def test_failed_logins_look_the_same(self, api_env):
        await _sign_up(api_env)

        unknown = await api_env.client.post(
            f"{AUTH}/login", json={"email": "nobody@example.com", "password": STRONG_PASSWORD}
        )
        wrong = await api_env.client.post(
            f"{AUTH}/login", json={"email": "alice@example.com", "password": "Wr0ng!pass"}
        )

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()


class TestCurrentIdentity:
    """Authentication gate over HTTP."""

    @pytest.mark.asyncio
    async def test_me_with_cookie(self, api_env):
        await _sign_up(api_env)

        response = await api_env.client.get(f"{AUTH}/me")

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_me_with_bearer_header(self, api_env):
        signup = await _sign_up(api_env)
        access_token = signup.json()["data"]["accessToken"]
        api_env.client.cookies.clear()

        response = await api_env.client.get(
            f"{AUTH}/me", headers={"Authorization": f"Bearer {access_token}"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_me_without_token(self, api_env):
        response = await api_env.client.get(f"{AUTH}/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "token_missing"

    @pytest.mark.asyncio
    async def test_me_with_expired_token(self, api_env):
        # Arrange
        settings = await api_env.get(AuthSettings)
        issued = datetime.now(timezone.utc) - timedelta(hours=1)
        expired = jwt.encode(
            {
                "sub": str(uuid4()),
                "email": "alice@example.com",
                "typ": "access",
                "role": "user",
                "iat": issued,
                "exp": issued + timedelta(minutes=15),
                "jti": "expired",
            },
            settings.access_token_secret,
            algorithm=settings.jwt_algorithm,
        )

        # Act
        response = await api_env.client.get(
            f"{AUTH}/me", headers={"Authorization": f"Bearer {expired}"}
        )

        # Assert
        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "token_expired"
        assert error["message"] == "Access token has expired."

    @pytest.mark.asyncio
    async def test_me_with_garbage_token(self, api_env):
        response = await api_env.client.get(
            f"{AUTH}/me", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "unauthorized"


class TestSessionLifecycle:
    """Refresh and logout over HTTP."""

    @pytest.mark.asyncio
    async def test_refresh_from_cookie_rotates_tokens(self, api_env):
        # Arrange
        await _sign_up(api_env)
        old_refresh = api_env.client.cookies.get("refreshToken")

        # Act
        response = await api_env.client.post(f"{AUTH}/refresh")

        # Assert
        assert response.status_code == 200
        assert response.json()["message"] == "Session refreshed."
        assert api_env.client.cookies.get("refreshToken") != old_refresh

        api_env.client.cookies.clear()
        replay = await api_env.client.post(
            f"{AUTH}/refresh", json={"refreshToken": old_refresh}
        )
        assert replay.status_code == 401

    @pytest.mark.asyncio
    async def test_refresh_without_token(self, api_env):
        response = await api_env.client.post(f"{AUTH}/refresh")

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Refresh token is missing."

    @pytest.mark.asyncio
    async def test_logout_clears_cookies_and_revokes(self, api_env):
        # Arrange
        await _sign_up(api_env)
        refresh_token = api_env.client.cookies.get("refreshToken")

        # Act
        response = await api_env.client.post(f"{AUTH}/logout")

        # Assert
        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully."
        assert api_env.client.cookies.get("accessToken") is None

        replay = await api_env.client.post(
            f"{AUTH}/refresh", json={"refreshToken": refresh_token}
        )
        assert replay.status_code == 401


class TestPasswordRecovery:
    """Forgot and change password over HTTP."""

    @pytest.mark.asyncio
    async def test_forgot_password_then_login_with_new_password(self, api_env):
        # Arrange
        await _sign_up(api_env)
        api_env.client.cookies.clear()
        sender = await api_env.get(MockEmailSender)

        # Act
        start = await api_env.client.post(
            f"{AUTH}/forgot-password", json={"email": "alice@example.com"}
        )
        complete = await api_env.client.post(
            f"{AUTH}/forgot-password",
            json={
                "email": "alice@example.com",
                "otp": sender.last_code_for("alice@example.com"),
                "newPassword": "N3w!passw0rd",
            },
        )
        login = await api_env.client.post(
            f"{AUTH}/login", json={"email": "alice@example.com", "password": "N3w!passw0rd"}
        )

        # Assert
        assert start.status_code == 200
        assert complete.status_code == 200
        assert complete.json()["message"] == "Password reset successful."
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_forgot_password_unknown_email_is_indistinguishable(self, api_env):
        await _sign_up(api_env)

        known = await api_env.client.post(
            f"{AUTH}/forgot-password", json={"email": "alice@example.com"}
        )
        unknown = await api_env.client.post(
            f"{AUTH}/forgot-password", json={"email": "nobody@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()

    @pytest.mark.asyncio
    async def test_wrong_reset_code_is_indistinguishable_after_resend(self, api_env):
        """resend-otp issues codes for any address, accounts or not."""
        # Arrange
        await _sign_up(api_env)
        api_env.client.cookies.clear()
        for email in ("alice@example.com", "nobody@example.com"):
            await api_env.client.post(f"{AUTH}/resend-otp", json={"email": email})

        # Act
        known, unknown = [
            await api_env.client.post(
                f"{AUTH}/forgot-password",
                json={"email": email, "otp": "999999x", "newPassword": STRONG_PASSWORD},
            )
            for email in ("alice@example.com", "nobody@example.com")
        ]

        # Assert
        assert known.status_code == unknown.status_code == 400
        assert known.json()["error"]["code"] == "code_mismatch"
        assert known.json() == unknown.json()

    @pytest.mark.asyncio
    async def test_reset_revokes_previous_refresh_token(self, api_env):
        # Arrange
        await _sign_up(api_env)
        refresh_token = api_env.client.cookies.get("refreshToken")
        api_env.client.cookies.clear()
        sender = await api_env.get(MockEmailSender)
        await api_env.client.post(
            f"{AUTH}/forgot-password", json={"email": "alice@example.com"}
        )
        await api_env.client.post(
            f"{AUTH}/forgot-password",
            json={
                "email": "alice@example.com",
                "otp": sender.last_code_for("alice@example.com"),
                "newPassword": "N3w!passw0rd",
            },
        )

        # Act
        replay = await api_env.client.post(
            f"{AUTH}/refresh", json={"refreshToken": refresh_token}
        )

        # Assert
        assert replay.status_code == 401

    @pytest.mark.asyncio
    async def test_change_password_requires_authentication(self, api_env):
        response = await api_env.client.post(
            f"{AUTH}/change-password",
            json={"currentPassword": STRONG_PASSWORD, "newPassword": "plainlonger"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_change_password(self, api_env):
        await _sign_up(api_env)

        response = await api_env.client.post(
            f"{AUTH}/change-password",
            json={"currentPassword": STRONG_PASSWORD, "newPassword": "plainlonger"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully."


class TestCodeEndpoints:
    """Resend and verify code over HTTP."""

    @pytest.mark.asyncio
    async def test_resend_then_verify(self, api_env):
        sender = await api_env.get(MockEmailSender)

        resend = await api_env.client.post(
            f"{AUTH}/resend-otp", json={"email": "new@example.com"}
        )
        verify = await api_env.client.post(
            f"{AUTH}/verify-otp",
            json={"email": "new@example.com", "otp": sender.last_code_for("new@example.com")},
        )
        replay = await api_env.client.post(
            f"{AUTH}/verify-otp",
            json={"email": "new@example.com", "otp": sender.last_code_for("new@example.com")},
        )

        assert resend.status_code == 200
        assert verify.status_code == 200
        assert replay.status_code == 404
        assert replay.json()["error"]["code"] == "code_not_found"
