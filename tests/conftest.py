import pytest

from gymdesk.auth import SessionResolver, SessionSlot
from gymdesk.seed import create_store
from gymdesk.store import DomainStore


@pytest.fixture(name="store")
def store_fixture():
    # "sqlite://" gives every test its own seeded in-memory database
    store = create_store("sqlite://")
    yield store
    store.session.close()


@pytest.fixture(name="slot")
def slot_fixture(tmp_path) -> SessionSlot:
    return SessionSlot(tmp_path / "session.json")


@pytest.fixture(name="resolver")
def resolver_fixture(store: DomainStore, slot: SessionSlot) -> SessionResolver:
    return SessionResolver(store, slot, login_delay=0)
