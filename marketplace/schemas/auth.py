# marketplace/schemas/auth.py
import re

from pydantic import EmailStr, ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from marketplace.models.user import Identity, Profile

PHONE_RE = re.compile(r"^[0-9]{10}$")


class SignUpPayload(SQLModel):
    """
    Payload for creating an account.

    Validation rules:
      - name: at least 2 characters
      - email: valid EmailStr
      - phone: exactly 10 digits
      - password: at least 6 characters, must equal confirm_password
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=2)
    email: EmailStr
    phone: str
    password: str = Field(min_length=6)
    confirm_password: str

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        v = v.strip()
        if not PHONE_RE.match(v):
            raise ValueError("Phone number must be 10 digits")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "SignUpPayload":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class LoginPayload(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class MeRead(SQLModel):
    """Who is signed in; both fields are None for guests."""

    identity: Identity | None = None
    profile: Profile | None = None
