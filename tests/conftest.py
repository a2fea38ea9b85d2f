import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import travelblog.models  # noqa: F401
from travelblog.core.security import create_access_token
from travelblog.db.session import get_session
from travelblog.main import app
from travelblog.models.admin_user import AdminRole
from travelblog.schemas import ListingCreate, PostCreate, TermCreate
from travelblog.services.auth import AuthService
from travelblog.services.blog import BlogService
from travelblog.services.directory import DirectoryService
from travelblog.services.storage import LocalStorageService, get_storage

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpass123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return LocalStorageService(root=str(tmp_path / "uploads"), url_prefix="/uploads")


@pytest.fixture
def client(engine, storage):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(session):
    return AuthService(session).create_admin(
        ADMIN_EMAIL, password=ADMIN_PASSWORD, name="Site Admin", role=AdminRole.SUPER_ADMIN
    )


@pytest.fixture
def auth_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(data={'sub': ADMIN_EMAIL})}"}


def headers_for(session, email, role, permissions=None):
    AuthService(session).create_admin(email, password="password123", role=role, permissions=permissions)
    return {"Authorization": f"Bearer {create_access_token(data={'sub': email})}"}


@pytest.fixture
def editor_headers(session):
    return headers_for(session, "editor@example.com", AdminRole.EDITOR)


@pytest.fixture
def moderator_headers(session):
    return headers_for(session, "moderator@example.com", AdminRole.MODERATOR)


@pytest.fixture
def category(session):
    return BlogService(session).create_category(TermCreate(name="Travel Guides", description="City guides"))


@pytest.fixture
def tag(session):
    return BlogService(session).create_tag(TermCreate(name="Beaches"))


@pytest.fixture
def published_post(session, category, tag):
    return BlogService(session).create_post(PostCreate(
        title="48 Hours in Sydney",
        content="<p>Ferries, beaches and the Opera House.</p>",
        excerpt="A weekend in Sydney",
        category_id=category.id,
        tags=[tag.id],
        published=True,
    ))


@pytest.fixture
def draft_post(session, category):
    return BlogService(session).create_post(PostCreate(
        title="Unfinished Outback Notes",
        content="<p>Still writing.</p>",
        category_id=category.id,
    ))


@pytest.fixture
def directory_category(session):
    return DirectoryService(session).create_category(TermCreate(name="Accommodation"))


@pytest.fixture
def listing(session, directory_category):
    return DirectoryService(session).create_listing(ListingCreate(
        name="Bondi Beach House",
        category_id=directory_category.id,
        description="Guesthouse near the beach",
        location="Sydney",
        price_range="$$$",
        featured=True,
    ))
