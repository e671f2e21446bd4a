from pydantic import BaseModel, EmailStr, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class Role:
    ADMIN = "ADMIN"
    FINANCE = "FINANCE"
    EMPLOYEE = "EMPLOYEE"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class SessionUser(CamelModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: str


class Session(BaseModel):
    token: str
    user: SessionUser


class UserLogin(BaseModel):
    # Plain strings so empty fields reach the controller's own check
    email: str = ""
    password: str = ""


class LoginResult(CamelModel):
    user: SessionUser
    redirect: str


class CurrentUser(SessionUser):
    role_label: str
    initials: str
    home: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ForgotPasswordVerify(BaseModel):
    email: EmailStr
    code: str = ""


class ForgotPasswordReset(CamelModel):
    email: EmailStr
    code: str = ""
    new_password: str = ""
    confirm_password: str = ""

