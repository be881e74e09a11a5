"""User and authentication models.

These models represent registered users and the request/response payloads
of the account endpoints, plus their DynamoDB item conversions.
"""

import base64
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class User(BaseModel):
    """Registered user record.

    Stored in DynamoDB with user_id as partition key. The password hash and
    salt never leave the service; use ProfileView for responses.
    """

    id: int = Field(..., description="Server-assigned user identifier", gt=0)
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Unique email address, case-sensitive")
    password_hash: str = Field(..., description="Base64 HMAC-SHA512 password digest")
    salt: bytes = Field(..., description="Random per-user salt")
    is_active: bool = Field(default=True, description="Whether the account may log in")
    created_at: datetime = Field(..., description="Registration timestamp")

    @property
    def display_name(self) -> str:
        """Name shown next to the user's orders."""
        return f"{self.first_name} {self.last_name}"

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "user_id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "password_hash": self.password_hash,
            "salt": base64.b64encode(self.salt).decode("ascii"),
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "User":
        """Create User from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            User: Parsed model instance
        """
        return cls(
            id=int(item["user_id"]),
            first_name=item["first_name"],
            last_name=item["last_name"],
            email=item["email"],
            password_hash=item["password_hash"],
            salt=base64.b64decode(item["salt"]),
            is_active=item.get("is_active", True),
            created_at=datetime.fromisoformat(item["created_at"]),
        )


class RegisterRequest(BaseModel):
    """Registration payload."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Login payload."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Login response carrying the bearer token."""

    token: str


class ProfileView(BaseModel):
    """Non-sensitive view of a user."""

    first_name: str
    last_name: str
    email: str
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "ProfileView":
        return cls(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            created_at=user.created_at,
        )
