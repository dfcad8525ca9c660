import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fakes import FakeBlobStore, FakeDatabase, FakeScorer, RecordingLedger
from geopost import deps
from geopost.config import settings
from geopost.main import app
from geopost.utils.security import TokenService

API = settings.API_PREFIX


@pytest.fixture
def fake_db():
	return FakeDatabase()


@pytest.fixture
def blob_store():
	return FakeBlobStore()


@pytest.fixture
def scorer():
	return FakeScorer()


@pytest.fixture
def ledger():
	return RecordingLedger()


@pytest.fixture
def token_service():
	return TokenService("test-secret")


@pytest.fixture
def posts_collection(fake_db):
	return fake_db[settings.POSTS_COLLECTION]


@pytest.fixture
def users_collection(fake_db):
	return fake_db[settings.USERS_COLLECTION]


@pytest.fixture(autouse=True)
def override_deps(fake_db, blob_store, scorer, ledger, token_service):
	app.dependency_overrides[deps.get_db] = lambda: fake_db
	app.dependency_overrides[deps.get_blob_store] = lambda: blob_store
	app.dependency_overrides[deps.get_scorer] = lambda: scorer
	app.dependency_overrides[deps.get_ledger] = lambda: ledger
	app.dependency_overrides[deps.get_token_service] = lambda: token_service
	try:
		yield
	finally:
		app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(token_service):
	return {"Authorization": f"Bearer {token_service.issue('alice')}"}


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
