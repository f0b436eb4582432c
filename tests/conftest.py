"""테스트 인프라 — 테스트 DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Test database, session, and httpx client fixtures.
Runs on in-memory SQLite (aiosqlite) unless TEST_DATABASE_URL points at
another database. The schema is created from ORM metadata for every test
and dropped afterwards.
"""

import os

# 앱 임포트 전에 DB URL 지정 — The app builds its engine at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import *  # noqa: F401,F403,E402 — register all models with metadata
from app.models.activation_code import ActivationCode  # noqa: E402
from app.models.email import PERMANENT_EXPIRES_AT, Email, Message  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402
from app.repositories.role_repository import role_repository  # noqa: E402
from app.utils.jwt import create_access_token  # noqa: E402
from app.utils.password import hash_password  # noqa: E402

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL: str = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

DEFAULT_PASSWORD = "password123!"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 새로 만듭니다."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        eng = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        # SQLite는 외래 키 제약을 기본으로 강제하지 않음 — enable ON DELETE rules
        @event.listens_for(eng.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        eng = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(
    db: AsyncSession,
    username: str,
    *roles: str,
    enabled: bool = True,
    password: str = DEFAULT_PASSWORD,
) -> User:
    """역할이 배정된 사용자를 생성합니다 — Roles are assigned in the given order."""
    user = User(username=username, password_hash=hash_password(password), enabled=enabled)
    db.add(user)
    await db.flush()
    for offset, name in enumerate(roles):
        role = await role_repository.get_or_create(db, name)
        db.add(UserRole(
            user_id=user.id,
            role_id=role.id,
            created_at=datetime.now(timezone.utc) + timedelta(microseconds=offset),
        ))
    await db.flush()
    await db.commit()
    return user


async def make_email(
    db: AsyncSession,
    user: User,
    address: str,
    *,
    hours: float = 24,
    permanent: bool = False,
    created_offset: float = 0,
) -> Email:
    """메일함을 생성합니다. hours가 음수이면 이미 만료된 메일함."""
    now = datetime.now(timezone.utc)
    email = Email(
        address=address,
        user_id=user.id,
        created_at=now + timedelta(seconds=created_offset),
        expires_at=PERMANENT_EXPIRES_AT if permanent else now + timedelta(hours=hours),
        is_permanent=permanent,
    )
    db.add(email)
    await db.flush()
    await db.commit()
    return email


async def make_message(db: AsyncSession, email: Email, subject: str, offset: float = 0) -> Message:
    message = Message(
        email_id=email.id,
        from_address="sender@example.com",
        to_address=email.address,
        subject=subject,
        content=f"body of {subject}",
        html=f"<p>{subject}</p>",
        type="received",
        received_at=datetime.now(timezone.utc) + timedelta(seconds=offset),
    )
    db.add(message)
    await db.flush()
    await db.commit()
    return message


async def make_code(
    db: AsyncSession,
    code: str,
    *,
    status: str = "unused",
    expires_at: datetime | None = None,
    used_by: User | None = None,
) -> ActivationCode:
    activation_code = ActivationCode(
        code=code,
        status=status,
        expires_at=expires_at,
        used_by_user_id=used_by.id if used_by else None,
        used_at=datetime.now(timezone.utc) if used_by else None,
    )
    db.add(activation_code)
    await db.flush()
    await db.commit()
    return activation_code


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "username": user.username})


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# 역할별 사용자 픽스처
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def emperor(db: AsyncSession) -> User:
    return await make_user(db, "emperor", "emperor")


@pytest_asyncio.fixture
async def duke(db: AsyncSession) -> User:
    return await make_user(db, "duke", "duke")


@pytest_asyncio.fixture
async def knight(db: AsyncSession) -> User:
    return await make_user(db, "knight", "knight")


@pytest_asyncio.fixture
async def student(db: AsyncSession) -> User:
    return await make_user(db, "student", "student")


@pytest_asyncio.fixture
async def civilian(db: AsyncSession) -> User:
    return await make_user(db, "civilian", "civilian")


@pytest.fixture
def emperor_headers(emperor: User) -> dict[str, str]:
    return auth_header(make_token(emperor))


@pytest.fixture
def duke_headers(duke: User) -> dict[str, str]:
    return auth_header(make_token(duke))


@pytest.fixture
def knight_headers(knight: User) -> dict[str, str]:
    return auth_header(make_token(knight))


@pytest.fixture
def student_headers(student: User) -> dict[str, str]:
    return auth_header(make_token(student))


@pytest.fixture
def civilian_headers(civilian: User) -> dict[str, str]:
    return auth_header(make_token(civilian))
