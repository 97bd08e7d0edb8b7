from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pwdlib import PasswordHash
from pwdlib.hashers.argon2 import Argon2Hasher

from taskmanager.app import create_app
from taskmanager.config import Settings
from taskmanager.database import Database
from taskmanager.security import PasswordHasher, TokenService
from taskmanager.services import AuthService, TaskService
from taskmanager.store import TaskStore, UserStore

from .helpers import TEST_SECRET


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(database_path=str(tmp_path / "tasks.db"), jwt_secret=TEST_SECRET)


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    # Cheap Argon2 parameters so the suite stays fast.
    return PasswordHasher(PasswordHash((Argon2Hasher(time_cost=1, memory_cost=1024, parallelism=1),)))


@pytest.fixture()
def db(settings: Settings) -> Database:
    database = Database(settings.database_path)
    database.init_db()
    return database


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest.fixture()
def auth_service(db: Database, hasher: PasswordHasher, tokens: TokenService) -> AuthService:
    return AuthService(UserStore(db), hasher, tokens)


@pytest.fixture()
def task_service(db: Database) -> TaskService:
    return TaskService(TaskStore(db))


@pytest.fixture()
def client(settings: Settings, hasher: PasswordHasher) -> TestClient:
    return TestClient(create_app(settings, hasher=hasher))
