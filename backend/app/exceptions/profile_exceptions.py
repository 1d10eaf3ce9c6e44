from uuid import UUID

from fastapi import status

from .base import AppError, NotFoundError


class ProfileNotFound(NotFoundError):
    def __init__(self, profile_id: UUID):
        detail = f"Profile with id {profile_id} not found."
        super().__init__(detail)


class UsernameAlreadyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "username_taken"

    def __init__(self, username: str):
        detail = f"Profile with username {username} already exists."
        super().__init__(detail)
