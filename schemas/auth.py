"""Schemas for login and employee self-registration."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from schemas.base import Payload

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginRequest(Payload):
    # passwords are compared byte for byte
    model_config = ConfigDict(str_strip_whitespace=False)

    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class EmployeeRegistration(Payload):
    model_config = ConfigDict(str_strip_whitespace=False)

    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)


__all__ = ["LoginRequest", "EmployeeRegistration"]
