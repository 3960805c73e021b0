import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

PHONE_RE = re.compile(r"^\+?\d{3,15}$")


def clean_phone(value: str) -> str:
    return re.sub(r"[\s\-()]", "", value)


class SignupIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=20)
    password: str = Field(min_length=6, max_length=72)
    confirm_password: str = Field(alias="confirmPassword")

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        cleaned = clean_phone(v)
        if not cleaned:
            return None
        if not PHONE_RE.match(cleaned):
            raise ValueError("Invalid phone number")
        return cleaned

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

class SigninIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    identifier: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=72)
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken", max_length=512)

    @field_validator("identifier")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Email or phone is required")
        if "@" not in v:
            # phones are stored without separators
            v = clean_phone(v) or v
        return v

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    created_at: datetime

class SignupOut(BaseModel):
    user: UserOut

class SigninOut(BaseModel):
    user: UserOut
    token: str
