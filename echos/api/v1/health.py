"""Health check: is the user directory database reachable and migrated."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from echos.core.config import settings
from echos.core.database import check_db_connected, get_db, users_table_present
from echos.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    connected = check_db_connected(db)
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        users_table=users_table_present(db) if connected else None,
    )
