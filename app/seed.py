"""초기 데이터 시드 스크립트 — 역할과 황제 계정 생성.

Seed script — Creates the role rows and the bootstrap emperor account.
Run this script once to bootstrap the database with required initial data.

Usage:
    python -m app.seed

Creates:
    - 5개 역할: emperor, duke, knight, student, civilian (5 roles)
    - 1개 황제 계정: SEED_EMPEROR_USERNAME / SEED_EMPEROR_PASSWORD (1 emperor user)
"""

import asyncio

import structlog
from sqlalchemy import select

from app.config import settings
from app.database import async_session, engine, Base
from app.models import User
from app.repositories.role_repository import role_repository
from app.utils.logging import setup_logging
from app.utils.password import hash_password
from app.utils.permissions import Role as RoleName

logger = structlog.get_logger()


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then inserts every role row and the
    emperor account.

    Idempotent: 황제 계정이 이미 있으면 건너뜁니다 (Skips if the emperor exists).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(
            select(User).where(User.username == settings.SEED_EMPEROR_USERNAME)
        )
        if result.scalar_one_or_none():
            logger.info("seed_skipped", reason="emperor already exists")
            return

        # 역할 생성 — Create every role row up front
        roles = {name: await role_repository.get_or_create(db, name.value) for name in RoleName}

        emperor: User = User(
            username=settings.SEED_EMPEROR_USERNAME,
            name="Emperor",
            password_hash=hash_password(settings.SEED_EMPEROR_PASSWORD),
            enabled=True,
        )
        db.add(emperor)
        await db.flush()  # flush로 emperor.id 생성 (Flush to generate emperor.id)
        await role_repository.assign(db, emperor.id, roles[RoleName.EMPEROR])

        await db.commit()
        logger.info("seed_completed", emperor=emperor.username, user_id=str(emperor.id))


if __name__ == "__main__":
    setup_logging(settings)
    asyncio.run(seed())
