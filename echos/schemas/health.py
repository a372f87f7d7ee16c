"""Health check response."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Liveness plus the state of the user directory store."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ok"] = "ok"
    service: str = "echos-api"
    environment: str
    database: Literal["connected", "disconnected"]
    # None when the database could not be reached.
    users_table: bool | None = Field(default=None, alias="usersTable")
