from uuid import UUID

from pydantic import BaseModel


class LoginRequest(BaseModel):
    # Presence is checked by AuthService so that missing fields produce the
    # "Username and password required" error rather than a schema error.
    username: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    id: UUID
    username: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: UserResponse
    message: str
