import os
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("RBAC_ENVIRONMENT", "test")
os.environ.setdefault("RBAC_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RBAC_REDIS_URL", "")
os.environ.setdefault("RBAC_REDIS_TOKEN", "")
os.environ.setdefault("RBAC_LOG_JSON", "false")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from rbac_core.core.config import RBACOptions, get_settings

get_settings.cache_clear()

from rbac_core.core.database import engine, session_scope  # noqa: E402
from rbac_core.main import create_app  # noqa: E402
from rbac_core.models import Base, User, UserSession  # noqa: E402


@dataclass(frozen=True)
class SessionUser:
    id: UUID
    email: str
    token: str

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client() -> Iterator[TestClient]:
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_client() -> Iterator[Callable[..., TestClient]]:
    """Build a client whose app runs with the given RBAC option overrides."""

    with ExitStack() as stack:

        def _make(**overrides) -> TestClient:
            settings = get_settings().model_copy(update={"options": RBACOptions(**overrides)})
            return stack.enter_context(TestClient(create_app(settings)))

        yield _make


@pytest.fixture()
def make_user() -> Callable[..., SessionUser]:
    """Insert a user with a live (or expired) bearer-token session."""

    def _make(
        email: Optional[str] = None,
        role: Optional[str] = None,
        *,
        expires_in: timedelta = timedelta(hours=1),
        verified: bool = True,
    ) -> SessionUser:
        email = email or f"user-{uuid4().hex[:8]}@example.com"
        token = uuid4().hex
        with session_scope() as session:
            user = User(email=email, name=email.split("@")[0], role=role, email_verified=verified)
            session.add(user)
            session.flush()
            user_id = user.id
            session.add(
                UserSession(
                    token=token,
                    user_id=user_id,
                    expires_at=datetime.now(timezone.utc) + expires_in,
                )
            )
        return SessionUser(id=user_id, email=email, token=token)

    return _make


@pytest.fixture()
def admin(make_user) -> SessionUser:
    return make_user("admin@example.com", role="admin")


@pytest.fixture()
def admin_headers(admin: SessionUser) -> Dict[str, str]:
    return admin.headers


@pytest.fixture()
def member(make_user) -> SessionUser:
    return make_user("member@example.com", role="user")


class RBACApi:
    """Thin wrapper around the RBAC routes for a given caller."""

    def __init__(self, client: TestClient, headers: Dict[str, str]) -> None:
        self.client = client
        self.headers = headers

    def get(self, name: str, **params):
        return self.client.get(f"/rbac/{name}", params=params, headers=self.headers)

    def post(self, name: str, payload: dict):
        return self.client.post(f"/rbac/{name}", json=payload, headers=self.headers)

    def create_permission(self, key: str, **fields) -> dict:
        payload = {"name": fields.pop("name", key), "key": key, **fields}
        response = self.post("create-permission", payload)
        assert response.status_code == 200, response.text
        return response.json()["permission"]

    def create_role(self, key: str, **fields) -> dict:
        payload = {"name": fields.pop("name", key), "key": key, **fields}
        response = self.post("create-role", payload)
        assert response.status_code == 200, response.text
        return response.json()["role"]

    def role_permission_ids(self, role_id: str) -> set:
        response = self.get("get-role-permissions", roleId=role_id, limit=100)
        assert response.status_code == 200, response.text
        return {item["id"] for item in response.json()["permissions"]}

    def permission_role_ids(self, permission_id: str) -> set:
        response = self.get("get-permission-roles", permissionId=permission_id, limit=100)
        assert response.status_code == 200, response.text
        return {item["id"] for item in response.json()["roles"]}


@pytest.fixture()
def api(client: TestClient, admin_headers: Dict[str, str]) -> RBACApi:
    return RBACApi(client, admin_headers)


@pytest.fixture()
def api_for() -> Callable[[TestClient, Dict[str, str]], RBACApi]:
    return RBACApi
