import httpx
import pytest
from asgi_lifespan import LifespanManager

from norepeat.main import app
from norepeat.auth import deps as auth_deps
from norepeat.routers.deps import get_no_repeat_service
from norepeat.services.norepeat import NoRepeatService
from norepeat.stores import InMemoryPreferenceStore, InMemoryWearHistoryStore

from fixtures import USER_ID, OTHER_USER_ID


@pytest.fixture
def prefs_store():
    return InMemoryPreferenceStore(users=[USER_ID, OTHER_USER_ID])


@pytest.fixture
def history_store():
    return InMemoryWearHistoryStore()


@pytest.fixture
def service(prefs_store, history_store):
    return NoRepeatService(prefs_store, history_store)


@pytest.fixture(autouse=True)
def override_deps(service):
    app.dependency_overrides[auth_deps.get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_no_repeat_service] = lambda: service
    yield
    app.dependency_overrides.pop(auth_deps.get_current_user_id, None)
    app.dependency_overrides.pop(get_no_repeat_service, None)


@pytest.fixture
async def client():
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
