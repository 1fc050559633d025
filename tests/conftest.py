import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = "redis://localhost:1/0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import monquest_cms.models  # noqa: F401
from monquest_cms.core.security import hash_password
from monquest_cms.db.base import Base
from monquest_cms.db.seeds.seed_roles import seed_roles
from monquest_cms.db.session import get_db
from monquest_cms.main import app
from monquest_cms.models.role import Role
from monquest_cms.models.user import User, UserStatus
from monquest_cms.services.cache_service import cache_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "password123"


class MemoryRedis:
    """Just enough of the redis client API for CacheService."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)

    def ping(self):
        return True


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    seed_roles(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def memory_cache():
    cache_service._client = MemoryRedis()
    yield cache_service._client
    cache_service._client = None


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def role(db, slug) -> Role:
    return db.query(Role).filter(Role.slug == slug).one()


def make_user(db, slug, email, status=UserStatus.ACTIVE) -> User:
    user = User(
        email=email,
        password=hash_password(PASSWORD),
        name=email.split("@")[0].title(),
        role_id=role(db, slug).id,
        status=status,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth(user) -> dict:
    return {"x-user-id": user.id}


@pytest.fixture()
def super_admin(db):
    return make_user(db, "super_admin", "root@monquest.com")


@pytest.fixture()
def admin(db):
    return make_user(db, "admin", "admin@monquest.com")


@pytest.fixture()
def editor(db):
    return make_user(db, "editor", "editor@monquest.com")


@pytest.fixture()
def member(db):
    return make_user(db, "user", "player@monquest.com")
