"""
Pydantic models for user data.

Request fields are optional at the schema level so that missing values
reach ``AuthService`` and are reported as a 400 ``ValidationError``
rather than FastAPI's generic 422.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserSignup(BaseModel):
    """Schema for registering a user."""

    username: Optional[str] = Field(None, examples=["aina"])
    email: Optional[str] = Field(None, examples=["aina@example.com"])
    password: Optional[str] = Field(None, examples=["strongpassword"])


class UserLogin(BaseModel):
    """Schema for logging in with email and password."""

    email: Optional[str] = Field(None, examples=["aina@example.com"])
    password: Optional[str] = Field(None, examples=["strongpassword"])


class UserRead(BaseModel):
    """Public user fields.  The password hash is never returned."""

    id: int
    username: str
    email: str

    model_config = {
        "from_attributes": True,
    }


class AuthResponse(BaseModel):
    """Token and public user returned by signup and login."""

    token: str
    user: UserRead
