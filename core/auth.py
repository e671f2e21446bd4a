from fastapi import Request, Response
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from typing import Iterable, Mapping, Optional
import logging
import jwt
from pydantic import ValidationError

from config import (
    JWT_SECRET, JWT_ALGORITHM, SESSION_EXPIRE_HOURS, COOKIE_SECURE,
    TOKEN_COOKIE, USER_COOKIE, LOGIN_ROUTE, ROLE_HOME, ROLE_LABELS,
)
from core.encryption import seal_token, unseal_token
from models.auth import Session, SessionUser

logger = logging.getLogger(__name__)


class SessionRedirect(Exception):
    """Raised by a guard when the caller must be sent elsewhere."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


@dataclass(frozen=True)
class AccessDecision:
    ready: bool
    redirect_to: Optional[str] = None
    user: Optional[SessionUser] = None


@dataclass(frozen=True)
class SessionContext:
    session: Session

    @property
    def user(self) -> SessionUser:
        return self.session.user

    @property
    def token(self) -> str:
        return self.session.token


def home_for(role: Optional[str]) -> str:
    return ROLE_HOME.get(role, LOGIN_ROUTE)


def role_label(role: Optional[str]) -> str:
    return ROLE_LABELS.get(role, role or ROLE_LABELS["ADMIN"])


def initials(full_name: Optional[str]) -> str:
    parts = (full_name or "").split()
    if len(parts) >= 2:
        return f"{parts[0][0]}{parts[1][0]}".upper()
    if parts:
        return parts[0][:2].upper()
    return "AU"


def create_user_token(user: SessionUser) -> str:
    to_encode = user.model_dump(by_alias=True)
    to_encode.update({
        "sub": user.id,
        "exp": datetime.now(timezone.utc) + timedelta(hours=SESSION_EXPIRE_HOURS),
    })
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def read_session(cookies: Mapping[str, str]) -> Optional[Session]:
    """Parse the persisted session; anything unusable reads as no session."""
    token = unseal_token(cookies.get(TOKEN_COOKIE))
    raw_user = cookies.get(USER_COOKIE)
    if not token or not raw_user:
        return None
    try:
        payload = jwt.decode(raw_user, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        user = SessionUser.model_validate(payload)
    except (jwt.InvalidTokenError, ValidationError):
        return None
    if not user.role:
        return None
    return Session(token=token, user=user)


def evaluate_access(session: Optional[Session], required_roles: Iterable[str]) -> AccessDecision:
    if session is None:
        return AccessDecision(ready=False, redirect_to=LOGIN_ROUTE)
    if session.user.role not in set(required_roles):
        return AccessDecision(ready=False, redirect_to=home_for(session.user.role), user=session.user)
    return AccessDecision(ready=True, user=session.user)


def require_role(*roles: str):
    async def role_checker(request: Request) -> SessionContext:
        session = read_session(request.cookies)
        decision = evaluate_access(session, roles)
        if not decision.ready:
            logger.info(f"Redirecting {request.url.path} to {decision.redirect_to}")
            raise SessionRedirect(decision.redirect_to)
        return SessionContext(session=session)
    return role_checker


def require_session():
    async def session_checker(request: Request) -> SessionContext:
        session = read_session(request.cookies)
        if session is None:
            raise SessionRedirect(LOGIN_ROUTE)
        return SessionContext(session=session)
    return session_checker


class SessionManager:
    """The only writer of the persisted session keys."""

    def persist(self, response: Response, session: Session) -> None:
        max_age = SESSION_EXPIRE_HOURS * 3600
        response.set_cookie(TOKEN_COOKIE, seal_token(session.token), max_age=max_age,
                            httponly=True, secure=COOKIE_SECURE, samesite="lax")
        response.set_cookie(USER_COOKIE, create_user_token(session.user), max_age=max_age,
                            httponly=True, secure=COOKIE_SECURE, samesite="lax")

    def clear(self, response: Response) -> None:
        response.delete_cookie(TOKEN_COOKIE)
        response.delete_cookie(USER_COOKIE)


session_manager = SessionManager()
