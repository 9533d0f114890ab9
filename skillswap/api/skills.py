"""Skill catalog (read-only, public)."""
from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from skillswap.deps import DbSession
from skillswap.models.skill import Skill
from skillswap.schemas.profile import SkillResponse

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", response_model=list[SkillResponse])
async def list_skills(db: DbSession):
    result = await db.execute(select(Skill).order_by(Skill.name))
    return result.scalars().all()


@router.get("/{skill_id}", response_model=SkillResponse)
async def get_skill(skill_id: int, db: DbSession):
    skill = (await db.execute(select(Skill).where(Skill.id == skill_id))).scalar_one_or_none()
    if not skill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")
    return skill
