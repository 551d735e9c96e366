"""
Auth API routes.

Defines the REST endpoints for registration and email verification:
- POST /api/auth/register - Create account and email a verification code
- POST /api/auth/verify-otp - Confirm the email with the code
- POST /api/auth/resend-otp - Email a fresh code

Every response uses the ApiResponse envelope. Failures are 400 with a
single message; storage and transport internals are never exposed.
Handlers are plain functions so FastAPI runs the blocking service calls
in its threadpool.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import get_registration_service
from src.api.errors import error_response
from src.api.models import ApiResponse, RegisterRequest, ResendOtpRequest, VerifyOtpRequest
from src.domain.ports import RegisterResult, ResendResult, VerifyResult
from src.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_FAILURE_RESPONSES = {400: {"model": ApiResponse, "description": "Validation or domain failure"}}

_REGISTER_MESSAGES = {
    RegisterResult.ALREADY_EXISTS: "User with this email already exists",
    RegisterResult.REJECTED: "Registration failed",
    RegisterResult.ERROR: "An error occurred during registration",
}

_VERIFY_MESSAGES = {
    VerifyResult.INVALID_OR_EXPIRED: "Invalid or expired OTP",
    VerifyResult.ALREADY_VERIFIED: "Invalid or expired OTP",
    VerifyResult.ERROR: "An error occurred during verification",
}

_RESEND_MESSAGES = {
    ResendResult.NOT_FOUND: "User not found",
    ResendResult.ALREADY_VERIFIED: "Email is already verified",
    ResendResult.DELIVERY_FAILED: "Failed to send OTP email",
    ResendResult.ERROR: "An error occurred while resending OTP",
}


@router.post(
    "/register",
    response_model=ApiResponse,
    responses=_FAILURE_RESPONSES,
    summary="Register a new user",
    description="Create an account and send a 6-digit verification code to the email.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> ApiResponse | JSONResponse:
    logger.info("Registration request received for %s", request_data.email)

    outcome = service.register(request_data.to_new_user())

    if outcome.result is RegisterResult.REGISTERED:
        return ApiResponse(
            success=True,
            message="Registration successful! Please check your email for the verification OTP.",
        )
    return error_response(_REGISTER_MESSAGES[outcome.result], outcome.errors)


@router.post(
    "/verify-otp",
    response_model=ApiResponse,
    responses=_FAILURE_RESPONSES,
    summary="Verify email with code",
    description="Submit the 6-digit code received by email to confirm the account.",
)
def verify_otp(
    request_data: VerifyOtpRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> ApiResponse | JSONResponse:
    logger.info("Verification request received for %s", request_data.email)

    result = service.verify_email(request_data.email, request_data.otp)

    if result is VerifyResult.VERIFIED:
        return ApiResponse(success=True, message="Email verified successfully! You can now login.")
    # Wrong, expired, consumed, unknown and already-verified all read the same
    return error_response(_VERIFY_MESSAGES[result])


@router.post(
    "/resend-otp",
    response_model=ApiResponse,
    responses=_FAILURE_RESPONSES,
    summary="Resend verification code",
    description="Issue and email a new code for an account that is not yet verified.",
)
def resend_otp(
    request_data: ResendOtpRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> ApiResponse | JSONResponse:
    logger.info("Resend request received for %s", request_data.email)

    result = service.resend(request_data.email)

    if result is ResendResult.SENT:
        return ApiResponse(success=True, message="OTP sent successfully! Please check your email.")
    return error_response(_RESEND_MESSAGES[result])
