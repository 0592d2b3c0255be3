"""Unit tests for the auth pipelines (register, login, Google, OTP)."""

import pytest
from pydantic import ValidationError

from common.utils.exceptions import BadRequestException
from accounts.auth.pipelines import (
    register_pipeline,
    login_pipeline,
    google_register_pipeline,
    send_otp_pipeline,
    verify_otp_pipeline,
)
from accounts.schemas.auth import GoogleClaim, GoogleProfile, LoginRequest, RegisterRequest
from accounts.services.otp import EmailDeliveryError


# ─────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────


async def _register(user_repository, hasher, jwt_auth, register_payload):
    return await register_pipeline(
        user_repository=user_repository,
        hasher=hasher,
        token_issuer=jwt_auth,
        payload=RegisterRequest.model_validate(register_payload),
    )


def _google_profile(email="grace@example.com", name="Grace Brewster Hopper", photo="https://img/g.png"):
    return GoogleProfile(
        emails=[GoogleClaim(value=email)] if email else [],
        displayName=name,
        photos=[GoogleClaim(value=photo)] if photo else [],
    )


# ─────────────────────────────────────────────────────────────────
# register
# ─────────────────────────────────────────────────────────────────


class TestRegister:
    @pytest.mark.asyncio
    async def test_creates_one_user_with_hashed_password(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        result = await _register(user_repository, hasher, jwt_auth, register_payload)

        assert len(user_repository.users) == 1
        stored = user_repository.users["ada@example.com"]
        assert stored["password"] != register_payload["password"]
        assert hasher.verify_password(register_payload["password"], stored["password"])
        assert stored["isGoogleUser"] is False
        assert result["user"] is stored

    @pytest.mark.asyncio
    async def test_returns_token_pair_bound_to_new_user(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        result = await _register(user_repository, hasher, jwt_auth, register_payload)
        user_id = str(result["user"]["_id"])

        assert jwt_auth.verify_token(result["accessToken"])["sub"] == user_id
        assert jwt_auth.verify_token(result["refreshToken"], token_type="refresh")["sub"] == user_id

    @pytest.mark.asyncio
    async def test_duplicate_email_fails_and_creates_nothing(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        await _register(user_repository, hasher, jwt_auth, register_payload)

        duplicate = {**register_payload, "email": "ADA@example.com", "firstName": "Other"}
        with pytest.raises(BadRequestException) as exc_info:
            await _register(user_repository, hasher, jwt_auth, duplicate)

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "EMAIL_EXISTS"
        assert exc_info.value.message == "Email already registered"
        assert len(user_repository.users) == 1

    @pytest.mark.asyncio
    async def test_upstream_validation_error_reports_first_message(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        bad = {**register_payload, "email": "not-an-email"}
        with pytest.raises(ValidationError) as validation:
            RegisterRequest.model_validate(bad)

        with pytest.raises(BadRequestException) as exc_info:
            await register_pipeline(
                user_repository=user_repository,
                hasher=hasher,
                token_issuer=jwt_auth,
                payload=None,
                validation_error=validation.value,
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.message.startswith("email:")
        assert user_repository.users == {}

    @pytest.mark.asyncio
    async def test_repository_failure_propagates_unchanged(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        async def broken_create(fields):
            raise RuntimeError("connection reset")

        user_repository.create = broken_create

        with pytest.raises(RuntimeError, match="connection reset"):
            await _register(user_repository, hasher, jwt_auth, register_payload)


# ─────────────────────────────────────────────────────────────────
# login
# ─────────────────────────────────────────────────────────────────


class TestLogin:
    @pytest.mark.asyncio
    async def test_returns_id_email_and_tokens_only(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        registered = await _register(user_repository, hasher, jwt_auth, register_payload)

        result = await login_pipeline(
            user_repository=user_repository,
            hasher=hasher,
            token_issuer=jwt_auth,
            credentials=LoginRequest(email="ada@example.com", password="Analytical1843"),
        )

        assert set(result) == {"id", "email", "accessToken", "refreshToken"}
        assert result["id"] == str(registered["user"]["_id"])
        assert result["email"] == "ada@example.com"
        assert jwt_auth.verify_token(result["accessToken"])["sub"] == result["id"]

    @pytest.mark.asyncio
    async def test_unknown_email_fails_with_invalid_email(self, user_repository, hasher, jwt_auth):
        with pytest.raises(BadRequestException) as exc_info:
            await login_pipeline(
                user_repository=user_repository,
                hasher=hasher,
                token_issuer=jwt_auth,
                credentials=LoginRequest(email="nobody@example.com", password="whatever"),
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid email"

    @pytest.mark.asyncio
    async def test_wrong_password_fails_with_invalid_password(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        await _register(user_repository, hasher, jwt_auth, register_payload)

        with pytest.raises(BadRequestException) as exc_info:
            await login_pipeline(
                user_repository=user_repository,
                hasher=hasher,
                token_issuer=jwt_auth,
                credentials=LoginRequest(email="ada@example.com", password="wrong-password"),
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid password"

    @pytest.mark.asyncio
    async def test_google_account_cannot_log_in_with_password(self, user_repository, hasher, jwt_auth):
        await google_register_pipeline(user_repository, jwt_auth, _google_profile())

        with pytest.raises(BadRequestException) as exc_info:
            await login_pipeline(
                user_repository=user_repository,
                hasher=hasher,
                token_issuer=jwt_auth,
                credentials=LoginRequest(email="grace@example.com", password="anything"),
            )

        assert exc_info.value.code == "INVALID_PASSWORD"


# ─────────────────────────────────────────────────────────────────
# google_register
# ─────────────────────────────────────────────────────────────────


class TestGoogleRegister:
    @pytest.mark.asyncio
    async def test_creates_federated_user_from_profile(self, user_repository, jwt_auth):
        await google_register_pipeline(user_repository, jwt_auth, _google_profile())

        user = user_repository.users["grace@example.com"]
        assert user["firstName"] == "Grace"
        assert user["lastName"] == "Brewster Hopper"
        assert user["profilePicture"] == "https://img/g.png"
        assert user["password"] is None
        assert user["isGoogleUser"] is True

    @pytest.mark.asyncio
    async def test_same_identity_twice_creates_one_user(self, user_repository, jwt_auth):
        first = await google_register_pipeline(user_repository, jwt_auth, _google_profile())
        second = await google_register_pipeline(user_repository, jwt_auth, _google_profile())

        assert len(user_repository.users) == 1
        user_id = str(user_repository.users["grace@example.com"]["_id"])
        assert jwt_auth.verify_token(first)["sub"] == user_id
        assert jwt_auth.verify_token(second)["sub"] == user_id

    @pytest.mark.asyncio
    async def test_returns_access_token_only(self, user_repository, jwt_auth):
        # Register and login return a token pair; Google sign-in does not
        token = await google_register_pipeline(user_repository, jwt_auth, _google_profile())

        assert isinstance(token, str)
        assert jwt_auth.verify_token(token)["typ"] == "access"

    @pytest.mark.asyncio
    async def test_signs_in_existing_password_account(
        self, user_repository, hasher, jwt_auth, register_payload,
    ):
        registered = await _register(user_repository, hasher, jwt_auth, register_payload)

        token = await google_register_pipeline(
            user_repository, jwt_auth, _google_profile(email="ada@example.com"),
        )

        assert len(user_repository.users) == 1
        assert jwt_auth.verify_token(token)["sub"] == str(registered["user"]["_id"])
        assert user_repository.users["ada@example.com"]["isGoogleUser"] is False

    @pytest.mark.asyncio
    async def test_single_word_name_and_no_photo(self, user_repository, jwt_auth):
        await google_register_pipeline(
            user_repository, jwt_auth, _google_profile(name="Cher", photo=None),
        )

        user = user_repository.users["grace@example.com"]
        assert user["firstName"] == "Cher"
        assert user["lastName"] == ""
        assert user["profilePicture"] is None

    @pytest.mark.asyncio
    async def test_missing_display_name_defaults_to_empty(self, user_repository, jwt_auth):
        await google_register_pipeline(user_repository, jwt_auth, _google_profile(name=None))

        user = user_repository.users["grace@example.com"]
        assert user["firstName"] == ""
        assert user["lastName"] == ""

    @pytest.mark.asyncio
    async def test_missing_email_claim_is_rejected(self, user_repository, jwt_auth):
        with pytest.raises(BadRequestException) as exc_info:
            await google_register_pipeline(user_repository, jwt_auth, _google_profile(email=None))

        assert exc_info.value.code == "GOOGLE_EMAIL_MISSING"
        assert user_repository.users == {}


# ─────────────────────────────────────────────────────────────────
# send_otp / verify_otp
# ─────────────────────────────────────────────────────────────────


class TestOtpFlow:
    @pytest.mark.asyncio
    async def test_registered_email_is_rejected_without_mailing(
        self, user_repository, hasher, jwt_auth, register_payload,
        otp_service, mock_email_service, otp_store,
    ):
        await _register(user_repository, hasher, jwt_auth, register_payload)

        with pytest.raises(BadRequestException) as exc_info:
            await send_otp_pipeline(user_repository, otp_service, "ada@example.com")

        assert exc_info.value.code == "EMAIL_EXISTS"
        mock_email_service.send_otp_email.assert_not_called()
        assert len(otp_store) == 0

    @pytest.mark.asyncio
    async def test_send_then_wrong_code_is_invalid(
        self, user_repository, otp_service, sent_code,
    ):
        await send_otp_pipeline(user_repository, otp_service, "new@example.com")
        wrong = "000000" if sent_code() != "000000" else "111111"

        with pytest.raises(BadRequestException) as exc_info:
            await verify_otp_pipeline(otp_service, "new@example.com", wrong)

        assert exc_info.value.code == "OTP_INVALID"
        assert exc_info.value.message == "Invalid OTP. Please check the code and try again."

    @pytest.mark.asyncio
    async def test_send_then_correct_code_succeeds(
        self, user_repository, otp_service, sent_code, mock_email_service,
    ):
        await send_otp_pipeline(user_repository, otp_service, "new@example.com")

        mock_email_service.send_otp_email.assert_awaited_once()
        assert mock_email_service.send_otp_email.call_args.kwargs["to_email"] == "new@example.com"

        await verify_otp_pipeline(otp_service, "new@example.com", sent_code())

    @pytest.mark.asyncio
    async def test_correct_code_after_expiry_is_expired(
        self, user_repository, otp_service, sent_code, clock,
    ):
        await send_otp_pipeline(user_repository, otp_service, "new@example.com")
        clock.advance(minutes=5, seconds=1)

        with pytest.raises(BadRequestException) as exc_info:
            await verify_otp_pipeline(otp_service, "new@example.com", sent_code())

        assert exc_info.value.code == "OTP_EXPIRED"
        assert exc_info.value.message == "OTP has expired. Please request a new one."

    @pytest.mark.asyncio
    async def test_resend_replaces_pending_code(
        self, user_repository, otp_service, sent_code, otp_store,
    ):
        await send_otp_pipeline(user_repository, otp_service, "new@example.com")
        first_code = sent_code()
        await send_otp_pipeline(user_repository, otp_service, "new@example.com")
        second_code = sent_code()

        assert len(otp_store) == 1
        assert (await otp_store.get("new@example.com")).code == second_code
        if first_code != second_code:
            with pytest.raises(BadRequestException):
                await verify_otp_pipeline(otp_service, "new@example.com", first_code)

    @pytest.mark.asyncio
    async def test_delivery_failure_propagates_unclassified(
        self, user_repository, otp_service, mock_email_service,
    ):
        mock_email_service.send_otp_email.return_value = {"success": False, "error": "mailbox unavailable"}

        with pytest.raises(EmailDeliveryError):
            await send_otp_pipeline(user_repository, otp_service, "new@example.com")

    @pytest.mark.asyncio
    async def test_code_is_consumed_after_success(
        self, user_repository, otp_service, sent_code,
    ):
        await send_otp_pipeline(user_repository, otp_service, "new@example.com")
        code = sent_code()
        await verify_otp_pipeline(otp_service, "new@example.com", code)

        with pytest.raises(BadRequestException) as exc_info:
            await verify_otp_pipeline(otp_service, "new@example.com", code)

        assert exc_info.value.code == "OTP_INVALID"
