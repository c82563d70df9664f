from pydantic import EmailStr, field_validator, model_validator
from pydantic_core import PydanticCustomError

from portal.schemas.base import CamelModel

MIN_PASSWORD_LENGTH = 6


def _required(value: str, code: str, message: str) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError(code, message)
    return value.strip()


class SignupRequest(CamelModel):
    name: str
    email: EmailStr
    discord_id: str
    password: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _required(v, "name_required", "Name is required")

    @field_validator("discord_id")
    @classmethod
    def _discord_id(cls, v: str) -> str:
        return _required(v, "discord_required", "Discord ID is required")

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min} characters",
                {"min": MIN_PASSWORD_LENGTH},
            )
        return v


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _required(v, "email_required", "Email is required")

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("password_required", "Password is required")
        return v


class AdminLoginRequest(CamelModel):
    # El "username" del admin es su email
    username: str = ""
    password: str = ""

    @model_validator(mode="after")
    def _both_required(self) -> "AdminLoginRequest":
        if not self.username.strip() or not self.password:
            raise PydanticCustomError("admin_credentials_required", "Username and password are required")
        return self


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    discord_id: str


class AdminOut(CamelModel):
    id: int
    email: str


class UserSessionOut(CamelModel):
    user: UserOut
    access_token: str


class AdminSessionOut(CamelModel):
    message: str
    admin: AdminOut
    access_token: str


class AdminCheckOut(CamelModel):
    is_admin: bool


class CurrentUserOut(CamelModel):
    user: UserOut
