import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from repositories.order_repository import OrderRepository
from services.order_service import OrderService


class ScriptedRng:
    """Returns preset characters from choice(), one per call."""

    def __init__(self, chars: str):
        self._chars = iter(chars)

    def choice(self, seq):
        ch = next(self._chars)
        assert ch in seq
        return ch


@pytest.fixture
def order_repo():
    return OrderRepository()


@pytest.fixture
def order_service(order_repo):
    return OrderService(order_repo)


@pytest.fixture
def client(order_service):
    app = create_app(order_service=order_service)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def scripted_rng():
    return ScriptedRng
