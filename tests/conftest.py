import uuid

import pytest

from fakes import FakeAuth, FakeStorage, InMemoryStore
from marketplace.core.config import Settings
from marketplace.core.notifications import Notifier
from marketplace.models.user import Identity


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(SUPABASE_URL="http://localhost:54321", SUPABASE_KEY="anon-test-key")


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def alice():
    return Identity(id=uuid.uuid4(), email="alice@example.com")


@pytest.fixture
def bob():
    return Identity(id=uuid.uuid4(), email="bob@example.com")


@pytest.fixture
def seller(store):
    seller_id = uuid.uuid4()
    store.seed_profile(seller_id, name="Ravi", phone="98765 43210")
    return seller_id
