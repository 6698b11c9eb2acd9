import json
from datetime import datetime, timezone

import httpx
import pytest

from checkout.errors import (
    CheckoutErrorCode,
    CheckoutNetworkError,
    MissingInputError,
    SdkLoadError,
    SubscriptionCreationError,
)
from checkout.models import CheckoutState, FormData, PaymentStatus
from checkout.orchestrator import InvalidTransitionError, PaymentOrchestrator

from conftest import FakeSdk


@pytest.mark.asyncio
@pytest.mark.parametrize("fields", [
    {"name": "", "email": "asha@example.com", "phone": "9876543210"},
    {"name": "Asha", "email": "   ", "phone": "9876543210"},
    {"name": "Asha", "email": "asha@example.com", "phone": "\t"},
    {},
])
async def test_incomplete_form_makes_no_network_call(orchestrator, backend, sdk, fields):
    with pytest.raises(MissingInputError) as exc:
        await orchestrator.open_widget(FormData(**fields))

    assert exc.value.user_message == "Please fill all the fields"
    assert backend.requests == []
    assert sdk.load_calls == 0
    assert orchestrator.state is CheckoutState.IDLE


@pytest.mark.asyncio
async def test_backend_refusal_returns_to_idle_without_opening_widget(orchestrator, backend, sdk, form):
    backend.body = {"success": False}

    with pytest.raises(SubscriptionCreationError):
        await orchestrator.open_widget(form)

    assert len(backend.requests) == 1
    assert sdk.opened == []
    assert orchestrator.state is CheckoutState.IDLE


@pytest.mark.asyncio
async def test_widget_options_carry_subscription_and_prefill(orchestrator, backend, config, form):
    widget = await orchestrator.open_widget(form)

    options = widget.options.for_browser()
    assert options["subscription_id"] == "sub_123"
    assert options["key"] == config.provider_key_id
    assert options["prefill"] == {"name": form.name, "email": form.email, "contact": form.phone}
    assert options["theme"] == {"color": "#4C5FD5"}
    assert options["notes"] == {"payment_type": "subscription_with_upfront"}
    assert "success_callback" not in options
    assert "dismiss_callback" not in options
    assert widget.is_open
    assert orchestrator.state is CheckoutState.WIDGET_OPEN

    request = backend.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.example.test/api/create-subscription"
    assert json.loads(request.content) == {
        "name": form.name,
        "email": form.email,
        "phone": form.phone,
    }


@pytest.mark.asyncio
async def test_success_callback_sets_billing_date_and_schedules_redirect(orchestrator, config, form):
    outcome = await orchestrator.pay(
        form,
        on_open=lambda widget: widget.options.success_callback({"razorpay_payment_id": "pay_1"}),
    )

    assert outcome.status is PaymentStatus.SUCCESS
    # clock is fixed at 19 October 2026
    assert outcome.next_billing_date == "19 November 2026"
    assert outcome.redirect.url == config.order_confirm_url
    assert outcome.redirect.delay_ms == 2000
    assert outcome.details == {"razorpay_payment_id": "pay_1"}
    assert orchestrator.state is CheckoutState.SUCCESS


@pytest.mark.asyncio
async def test_dismissal_fails_without_redirect(orchestrator, form):
    outcome = await orchestrator.pay(
        form,
        on_open=lambda widget: widget.options.dismiss_callback(),
    )

    assert outcome.status is PaymentStatus.FAILED
    assert outcome.redirect is None
    assert outcome.next_billing_date is None
    assert orchestrator.state is CheckoutState.FAILED


@pytest.mark.asyncio
async def test_sdk_load_failure_skips_backend(config, subscriptions, backend, clock, form):
    orchestrator = PaymentOrchestrator(config, FakeSdk(loads=False), subscriptions, clock=clock)

    with pytest.raises(SdkLoadError):
        await orchestrator.open_widget(form)

    assert backend.requests == []
    assert orchestrator.state is CheckoutState.IDLE


@pytest.mark.asyncio
async def test_transport_error_is_network_error(orchestrator, backend, form):
    backend.error = httpx.ConnectError("connection refused")

    with pytest.raises(CheckoutNetworkError) as exc:
        await orchestrator.open_widget(form)

    assert exc.value.user_message == "Failed to initiate payment. Please try again."
    assert orchestrator.state is CheckoutState.IDLE


@pytest.mark.asyncio
async def test_late_callback_is_ignored(orchestrator, form):
    widget = await orchestrator.open_widget(form)
    widget.on_dismiss()
    widget.on_success({"razorpay_payment_id": "pay_late"})

    outcome = await orchestrator.settle(widget)

    assert outcome.status is PaymentStatus.FAILED


@pytest.mark.asyncio
async def test_second_attempt_needs_reset(orchestrator, form):
    widget = await orchestrator.open_widget(form)

    with pytest.raises(InvalidTransitionError):
        await orchestrator.open_widget(form)

    widget.on_success()
    await orchestrator.settle(widget)
    orchestrator.reset()

    assert orchestrator.state is CheckoutState.IDLE
    await orchestrator.open_widget(form)


class BrokenSubscriptions:
    async def create_subscription(self, form):
        raise RuntimeError("unexpected backend client failure")


@pytest.mark.asyncio
async def test_unexpected_error_is_network_error(config, sdk, clock, form):
    orchestrator = PaymentOrchestrator(config, sdk, BrokenSubscriptions(), clock=clock)

    with pytest.raises(CheckoutNetworkError) as exc:
        await orchestrator.open_widget(form)

    assert exc.value.user_message == "Failed to initiate payment. Please try again."
    assert orchestrator.state is CheckoutState.IDLE
    assert sdk.opened == []


@pytest.mark.asyncio
async def test_billing_date_uses_india_calendar(config, sdk, subscriptions, form):
    # 20:00 UTC on 31 January is already 1 February in India
    late_evening = datetime(2026, 1, 31, 20, 0, tzinfo=timezone.utc)
    orchestrator = PaymentOrchestrator(config, sdk, subscriptions, clock=lambda: late_evening)

    outcome = await orchestrator.pay(form, on_open=lambda widget: widget.on_success())

    assert outcome.next_billing_date == "1 March 2026"


@pytest.mark.asyncio
async def test_dismissal_reason(orchestrator, form):
    outcome = await orchestrator.pay(form, on_open=lambda widget: widget.on_dismiss())

    assert outcome.reason is CheckoutErrorCode.WIDGET_DISMISSED


@pytest.mark.asyncio
async def test_finished_attempt_needs_reset(orchestrator, form):
    await orchestrator.pay(form, on_open=lambda widget: widget.on_dismiss())

    assert orchestrator.state.is_terminal
    with pytest.raises(InvalidTransitionError, match="reset"):
        await orchestrator.open_widget(form)
