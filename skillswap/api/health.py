from fastapi import APIRouter
from sqlalchemy import text

from skillswap.deps import DbSession

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(db: DbSession):
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
