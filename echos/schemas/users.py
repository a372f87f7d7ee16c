"""Request/response schemas for the user profile endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from echos.core.security import PASSWORD_MAX_LEN, PSEUDONYME_MAX_LEN
from echos.schemas.auth import Address, Role, check_password_policy, check_pseudonyme

# Columns a caller may sort the user list by (wire name -> ORM attribute).
SORTABLE_FIELDS: dict[str, str] = {
    "id": "id",
    "pseudonyme": "pseudonyme",
    "name": "name",
    "role": "role",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "lastAuthenticatedAt": "last_authenticated_at",
}


class UserProfile(BaseModel):
    """User as returned by read paths (never includes the password hash)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    pseudonyme: str
    role: Role
    name: str | None = None
    address: Address | None = None
    comment: str | None = None
    last_authenticated_at: datetime | None = Field(default=None, alias="lastAuthenticatedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class UserUpdate(BaseModel):
    """Self-service profile edit. Role is not part of this payload."""

    model_config = ConfigDict(extra="forbid")

    pseudonyme: str | None = Field(default=None, min_length=1, max_length=PSEUDONYME_MAX_LEN)
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN)
    name: str | None = Field(default=None, max_length=255)
    address: Address | None = None
    comment: str | None = None

    @field_validator("pseudonyme")
    @classmethod
    def validate_pseudonyme(cls, v: str | None) -> str | None:
        return check_pseudonyme(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return check_password_policy(v)

    def patch(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class UserAdminUpdate(UserUpdate):
    """Admin edit: may additionally change the role."""

    role: Role | None = None


class UserQuery(BaseModel):
    """Pagination, sorting and full-text search for GET /users."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = Field(default=None, description="Search text")
    property_sort: str | None = Field(default=None, alias="propertySort")
    direction_sort: int = Field(default=1, alias="directionSort")
    page: int = Field(default=1, ge=1, lt=10000)
    limit: int = Field(default=20, ge=1, lt=10000)

    @field_validator("property_sort")
    @classmethod
    def validate_property_sort(cls, v: str | None) -> str | None:
        if v is not None and v not in SORTABLE_FIELDS:
            raise ValueError(
                f"propertySort must be one of: {', '.join(sorted(SORTABLE_FIELDS))}"
            )
        return v

    @field_validator("direction_sort")
    @classmethod
    def validate_direction_sort(cls, v: int) -> int:
        if v not in (1, -1):
            raise ValueError("directionSort must be 1 or -1")
        return v


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserProfile]
    page: int
    limit: int


class DeleteResponse(BaseModel):
    """Response for DELETE /users/{id}."""

    deleted: int
