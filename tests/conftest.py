import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from checkout.config import CheckoutConfig
from checkout.models import FormData
from checkout.orchestrator import PaymentOrchestrator
from checkout.payment_widget import HostedWidget, PaymentSdk
from checkout.subscription_client import SubscriptionClient


FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


class FakeSdk(PaymentSdk):
    """Stands in for the provider SDK and records opened widgets."""

    def __init__(self, loads: bool = True):
        self.loads = loads
        self.load_calls = 0
        self.opened = []

    async def load(self) -> bool:
        self.load_calls += 1
        return self.loads

    def open(self, widget: HostedWidget) -> None:
        widget.mark_open()
        self.opened.append(widget)


class FakeBackend:
    """Subscription backend behind an httpx MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"success": True, "subscriptionId": "sub_123"}
        self.text = None
        self.content = None
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def config():
    return CheckoutConfig(
        backend_url="https://api.example.test/",
        provider_key_id="rzp_test_abcdef123456",
        order_confirm_url="https://shop.example.test/orderconfirm",
    )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def sdk():
    return FakeSdk()


@pytest.fixture
def subscriptions(config, backend):
    return SubscriptionClient(config, http_client=backend.client())


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def orchestrator(config, sdk, subscriptions, clock):
    return PaymentOrchestrator(config, sdk, subscriptions, clock=clock)


@pytest.fixture
def form():
    return FormData(name="Asha Rao", email="asha@example.com", phone="9876543210")
