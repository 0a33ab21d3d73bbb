"""Auth schemas for the local staff login."""

from pydantic import BaseModel, Field


class User(BaseModel):
    username: str
    name: str
    role: str


class LoginRequest(BaseModel):
    username: str
    password: str


class UserCreate(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=6)
    name: str
    role: str = "Receptionist"
