"""Shared helpers: in-memory SQLite store seeded with roles, wired into the app."""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sumbar_api.core.security import get_token_service, hash_password
from sumbar_api.models import Base, Region, Role, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PUSAT_ROLE_ID = 1
ADMIN_KABKOTA_ROLE_ID = 2
REGION_ID = 1
TEST_PASSWORD = "rahasia123"


def reset_database() -> None:
    """Recreate all tables and seed the two roles and one region."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestingSessionLocal() as db:
        db.add_all(
            [
                Role(id=ADMIN_PUSAT_ROLE_ID, name="admin_pusat", description="Administrator pusat"),
                Role(id=ADMIN_KABKOTA_ROLE_ID, name="admin_kabkota", description="Administrator kabupaten/kota"),
                Region(id=REGION_ID, name="Kota Padang"),
            ]
        )
        db.commit()


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def add_user(
    username: str,
    role_id: int = ADMIN_PUSAT_ROLE_ID,
    password: str = TEST_PASSWORD,
    is_active: bool = True,
    email: str | None = None,
) -> int:
    """Insert a user directly and return its id."""
    with TestingSessionLocal() as db:
        user = User(
            username=username,
            email=email or f"{username}@sumbarprov.go.id",
            password_hash=hash_password(password),
            role_id=role_id,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user.id


def load_user(user_id: int) -> User | None:
    with TestingSessionLocal() as db:
        user = db.get(User, user_id)
        if user is not None:
            db.expunge(user)
        return user


def auth_header(user_id: int, role: str = "admin_pusat") -> dict[str, str]:
    """Authorization header carrying a freshly issued token for user_id."""
    token = get_token_service().issue(user_id, role)
    return {"Authorization": f"Bearer {token}"}
