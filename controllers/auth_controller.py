from fastapi import HTTPException
from typing import Dict, Tuple
import time
import logging

from pydantic import ValidationError

import gateway
from config import RESEND_COOLDOWN_SECONDS, MIN_PASSWORD_LENGTH
from core.auth import SessionContext, home_for, role_label, initials
from core.graphql import GraphQLError, to_http_exception
from models.auth import (
    Session, SessionUser, UserLogin, LoginResult, CurrentUser,
    ForgotPasswordRequest, ForgotPasswordVerify, ForgotPasswordReset,
)
from queries import auth as auth_queries

logger = logging.getLogger(__name__)

# email -> monotonic time the last code was sent
_code_sent_at: Dict[str, float] = {}


async def login(credentials: UserLogin) -> Tuple[Session, LoginResult]:
    email = credentials.email.strip()
    if not email or not credentials.password:
        raise HTTPException(status_code=422, detail="Please fill in all fields")

    try:
        data = await gateway.graphql.execute(
            auth_queries.USER_LOGIN, {"email": email, "password": credentials.password},
        )
    except GraphQLError as e:
        raise to_http_exception(e, "Login failed", status_code=401)

    payload = data.get("UserLogin") or {}
    token = payload.get("token")
    if not token:
        raise HTTPException(status_code=502, detail="Invalid login response.")
    try:
        user = SessionUser.model_validate(payload)
    except ValidationError:
        logger.error("Login response carried a token but no usable user profile")
        raise HTTPException(status_code=502, detail="Invalid login response.")

    session = Session(token=token, user=user)
    return session, LoginResult(user=user, redirect=home_for(user.role))


async def get_me(ctx: SessionContext) -> CurrentUser:
    user = ctx.user
    return CurrentUser(
        **user.model_dump(),
        role_label=role_label(user.role),
        initials=initials(user.full_name),
        home=home_for(user.role),
    )


# ── Forgot password ───────────────────────────────────────

def cooldown_remaining(email: str) -> int:
    sent_at = _code_sent_at.get(email.lower())
    if sent_at is None:
        return 0
    remaining = RESEND_COOLDOWN_SECONDS - (time.monotonic() - sent_at)
    return max(0, int(remaining + 0.999))


async def request_reset_code(data: ForgotPasswordRequest) -> dict:
    email = str(data.email)
    wait = cooldown_remaining(email)
    if wait:
        raise HTTPException(status_code=429, detail=f"Please wait {wait} seconds before requesting a new code.")

    try:
        result = await gateway.graphql.execute(auth_queries.FORGOT_PASSWORD, {"email": email})
    except GraphQLError as e:
        raise to_http_exception(e, "Failed to send verification code.")
    if not result.get("ForgotPassword"):
        raise HTTPException(status_code=400, detail="Failed to send verification code.")

    _code_sent_at[email.lower()] = time.monotonic()
    return {"message": "Verification code sent to your email.", "resend_in": RESEND_COOLDOWN_SECONDS}


async def verify_reset_code(data: ForgotPasswordVerify) -> dict:
    code = data.code.strip()
    if not code:
        raise HTTPException(status_code=422, detail="Please enter the verification code.")

    try:
        result = await gateway.graphql.execute(
            auth_queries.FORGOT_PASSWORD_VERIFY, {"email": str(data.email), "code": code},
        )
    except GraphQLError as e:
        raise to_http_exception(e, "Invalid verification code.")
    if not result.get("ForgotPasswordVerify"):
        raise HTTPException(status_code=400, detail="Invalid verification code.")
    return {"message": "Code verified. You can now set a new password."}


async def reset_password(data: ForgotPasswordReset) -> dict:
    if not data.new_password or not data.confirm_password:
        raise HTTPException(status_code=422, detail="Please fill out both password fields.")
    if data.new_password != data.confirm_password:
        raise HTTPException(status_code=422, detail="Passwords do not match.")
    if len(data.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=422, detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    code = data.code.strip()
    if not code:
        raise HTTPException(status_code=422, detail="Missing verification code. Please verify your code again.")

    email = str(data.email)
    try:
        result = await gateway.graphql.execute(
            auth_queries.FORGOT_PASSWORD_NEW,
            {"email": email, "newPassword": data.new_password, "code": code},
        )
    except GraphQLError as e:
        raise to_http_exception(e, "Unable to reset password.")
    if not result.get("ForgotPasswordNewPassword"):
        raise HTTPException(status_code=400, detail="Unable to reset password.")

    _code_sent_at.pop(email.lower(), None)
    return {"message": "Password updated. You can now sign in."}
