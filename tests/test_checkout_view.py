import pytest

from checkout.checkout_view import CheckoutSessionStore, CheckoutView
from checkout.errors import CheckoutErrorCode
from checkout.models import CheckoutState, FormData, PaymentStatus
from checkout.orchestrator import InvalidTransitionError, PaymentOrchestrator

from conftest import FakeSdk

FIELDS = {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210"}


@pytest.fixture
def view(orchestrator):
    return CheckoutView(orchestrator)


def test_update_field(view):
    view.update_field("name", "Asha")
    view.update_field("phone", "98")

    assert view.form == FormData(name="Asha", phone="98")


def test_update_unknown_field(view):
    with pytest.raises(ValueError):
        view.update_field("address", "Pune")


@pytest.mark.asyncio
async def test_validation_failure_alerts_and_stays_interactive(view, backend):
    await view.submit({"name": "Asha", "email": "", "phone": "98"})

    assert view.alert == "Please fill all the fields"
    assert view.error_code is CheckoutErrorCode.MISSING_INPUT
    assert view.loading is False
    assert view.page == "checkout"
    assert backend.requests == []


@pytest.mark.asyncio
async def test_backend_refusal_clears_loading(view, backend, sdk):
    backend.body = {"success": False}

    await view.submit(FIELDS)

    assert view.alert == "Failed to create subscription. Please try again."
    assert view.loading is False
    assert view.widget is None
    assert sdk.opened == []
    assert view.form == FormData(**FIELDS)


@pytest.mark.asyncio
async def test_submit_is_ignored_while_loading(view, backend):
    await view.submit(FIELDS)
    assert view.loading is True
    assert view.state().widget["subscription_id"] == "sub_123"

    await view.submit(FIELDS)

    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_success_renders_result(view, config):
    await view.submit(FIELDS)
    await view.widget_succeeded({"razorpay_payment_id": "pay_1"})

    state = view.state()
    assert state.page == "result"
    assert state.status is PaymentStatus.SUCCESS
    assert state.loading is False
    assert state.next_billing_date == "19 November 2026"
    assert state.redirect.url == config.order_confirm_url
    assert state.redirect.delay_ms == 2000
    assert state.widget is None

    html = view.render()
    assert "Payment Successful!" in html
    assert "19 November 2026" in html
    assert FIELDS["email"] in html
    assert "}, 2000);" in html


@pytest.mark.asyncio
async def test_dismissal_renders_failure(view):
    await view.submit(FIELDS)
    await view.widget_dismissed()

    assert view.status is PaymentStatus.FAILED
    assert view.loading is False
    assert view.redirect is None

    html = view.render()
    assert "Payment Failed" in html
    assert "setTimeout" not in html


@pytest.mark.asyncio
@pytest.mark.parametrize("finish", ["widget_succeeded", "widget_dismissed"])
async def test_restart_returns_to_initial_view(view, finish):
    await view.submit(FIELDS)
    await getattr(view, finish)()

    view.restart()

    fresh = CheckoutView(view.orchestrator).state()
    assert view.state() == fresh
    assert view.form == FormData()
    assert view.status is PaymentStatus.UNSET
    assert "Billing details" in view.render()


@pytest.mark.asyncio
async def test_callbacks_need_an_open_widget(view):
    with pytest.raises(InvalidTransitionError):
        await view.widget_succeeded({})
    with pytest.raises(InvalidTransitionError):
        await view.widget_dismissed()


@pytest.mark.asyncio
async def test_browser_sdk_failure_returns_to_form(view):
    await view.submit(FIELDS)

    view.sdk_unavailable()

    assert view.error_code is CheckoutErrorCode.SDK_LOAD_FAILURE
    assert view.loading is False
    assert view.page == "checkout"

    await view.submit(FIELDS)
    assert view.widget is not None


@pytest.mark.asyncio
async def test_server_sdk_failure(config, subscriptions, clock, backend):
    view = CheckoutView(PaymentOrchestrator(config, FakeSdk(loads=False), subscriptions, clock=clock))

    await view.submit(FIELDS)

    assert view.alert == "Razorpay SDK failed to load. Please check your internet connection."
    assert view.loading is False
    assert backend.requests == []


def test_pay_button_disabled_while_loading(view):
    assert 'class="btn btn-primary" disabled' not in view.render()

    view.loading = True

    assert 'class="btn btn-primary" disabled' in view.render()


@pytest.mark.asyncio
async def test_unreadable_backend_body_clears_loading(view, backend):
    backend.content = b'{"success": true, "subscriptionId": "\xff"}'

    await view.submit(FIELDS)

    assert view.alert == "Failed to initiate payment. Please try again."
    assert view.error_code is CheckoutErrorCode.NETWORK_ERROR
    assert view.loading is False
    assert view.orchestrator.state is CheckoutState.IDLE

    backend.content = None
    await view.submit(FIELDS)

    assert len(backend.requests) == 2
    assert view.widget is not None


@pytest.mark.asyncio
async def test_alert_is_shown_once(view):
    await view.submit({"name": "Asha", "email": "", "phone": "98"})

    assert 'id="alert"' in view.render()
    assert 'id="alert"' not in view.render()
    assert view.alert is None


@pytest.mark.asyncio
async def test_dismissal_error_code(view):
    await view.submit(FIELDS)
    await view.widget_dismissed()

    assert view.state().error_code is CheckoutErrorCode.WIDGET_DISMISSED


def test_session_store_evicts_least_recently_used(orchestrator):
    sessions = CheckoutSessionStore(max_sessions=2)
    first = sessions.add(CheckoutView(orchestrator))
    second = sessions.add(CheckoutView(orchestrator))

    assert sessions.get(first.id) is first
    third = sessions.add(CheckoutView(orchestrator))

    assert len(sessions) == 2
    assert sessions.get(second.id) is None
    assert sessions.get(first.id) is first
    assert sessions.get(third.id) is third
