import pytest
from fastapi.testclient import TestClient

from order_service.catalog import Catalog
from order_service.crud import OrderStore
from order_service.database import build_engine
from order_service.errors import MailError
from order_service.main import create_app
from order_service.notifier import Notifier
from order_service.payment import DemoPaymentVerifier


class FakeNotifier(Notifier):
    """Notifier that records messages in memory instead of talking to SMTP."""

    def __init__(self):
        super().__init__(user="shop@example.com", password="app-password")
        self.sent_messages = []
        self.should_succeed = True

    def deliver(self, message):
        if not self.should_succeed:
            raise MailError("Email delivery failed")
        self.sent_messages.append(message)


@pytest.fixture()
def store():
    store = OrderStore(build_engine("sqlite://"))
    store.create_tables()
    yield store
    store.engine.dispose()


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def verifier():
    return DemoPaymentVerifier(delay_seconds=0)


@pytest.fixture()
def app(store, verifier, notifier):
    return create_app(store=store, catalog=Catalog(), verifier=verifier, notifier=notifier)


@pytest.fixture()
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def customer():
    return {
        "firstName": "Asha",
        "lastName": "Verma",
        "email": "asha@example.com",
        "address": "12 MG Road, Bengaluru",
    }
