"""Service liveness and file store reachability."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coursefiles import __version__
from coursefiles.database import get_db, ping_db
from coursefiles.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    if await ping_db(db):
        return HealthResponse(version=__version__, database="ok")
    return HealthResponse(status="degraded", version=__version__, database="unreachable")


@router.get("/ping")
async def ping():
    return {"status": "ok"}
