from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from models.auth import (
    UserLogin, LoginResult, CurrentUser,
    ForgotPasswordRequest, ForgotPasswordVerify, ForgotPasswordReset,
)
from config import LOGIN_ROUTE
from core.auth import SessionContext, require_session, read_session, session_manager
from controllers import auth_controller
from controllers.audit_controller import log_audit, get_client_ip as _ip, get_user_agent as _ua

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResult)
async def login(credentials: UserLogin, request: Request, response: Response):
    session, result = await auth_controller.login(credentials)
    session_manager.persist(response, session)
    await log_audit(session.user.id, session.user.full_name, session.user.role, "LOGIN", "auth", "session", "Logged in", ip_address=_ip(request), user_agent=_ua(request))
    return result


@router.post("/logout")
async def logout(request: Request):
    session = read_session(request.cookies)
    response = RedirectResponse(LOGIN_ROUTE, status_code=303)
    session_manager.clear(response)
    if session is not None:
        await log_audit(session.user.id, session.user.full_name, session.user.role, "LOGOUT", "auth", "session", "Logged out", ip_address=_ip(request), user_agent=_ua(request))
    return response


@router.get("/me", response_model=CurrentUser)
async def get_me(ctx: SessionContext = Depends(require_session())):
    return await auth_controller.get_me(ctx)


# ── Forgot password ───────────────────────────────────────

@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest):
    return await auth_controller.request_reset_code(data)


@router.post("/forgot-password/verify")
async def verify_code(data: ForgotPasswordVerify):
    return await auth_controller.verify_reset_code(data)


@router.post("/forgot-password/reset")
async def reset_password(data: ForgotPasswordReset):
    return await auth_controller.reset_password(data)
