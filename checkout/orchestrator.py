# Copyright 2026 UCP Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Payment Orchestrator

Sequences one subscription payment attempt:

1. validate the billing details
2. load the provider SDK
3. create the subscription through the backend
4. build the widget configuration
5. open the hosted widget
6. on success: estimate the next billing date, schedule the redirect
7. on dismissal: report the attempt as failed

Steps 1-5 are open_widget(), steps 6-7 are settle(). pay() runs both.
Any failure before the widget opens returns the orchestrator to IDLE and is
raised as a CheckoutError; unexpected errors become CheckoutNetworkError.
Nothing is retried.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .billing import next_billing_date
from .config import CheckoutConfig
from .errors import (
    CheckoutError,
    CheckoutErrorCode,
    CheckoutNetworkError,
    MissingInputError,
    SdkLoadError,
)
from .models import (
    CheckoutOutcome,
    CheckoutState,
    FormData,
    PaymentStatus,
    ScheduledRedirect,
    WidgetOptions,
    WidgetPrefill,
    WidgetSuccess,
)
from .payment_widget import HostedWidget, PaymentSdk, utcnow
from .subscription_client import SubscriptionClient

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when an operation is called in the wrong checkout state."""


class PaymentOrchestrator:
    """Drives one payment attempt at a time through the hosted widget."""

    def __init__(
        self,
        config: CheckoutConfig,
        sdk: PaymentSdk,
        subscriptions: SubscriptionClient,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.config = config
        self.sdk = sdk
        self.subscriptions = subscriptions
        self.clock = clock
        self.state = CheckoutState.IDLE

    def _transition(self, state: CheckoutState) -> None:
        logger.debug(f"Checkout state {self.state.value} -> {state.value}")
        self.state = state

    def _build_options(self, subscription_id: str, form: FormData) -> Callable[[HostedWidget], WidgetOptions]:
        def build(widget: HostedWidget) -> WidgetOptions:
            return WidgetOptions(
                key=self.config.provider_key_id,
                subscription_id=subscription_id,
                prefill=WidgetPrefill.from_form(form),
                success_callback=widget.on_success,
                dismiss_callback=widget.on_dismiss,
            )
        return build

    async def open_widget(self, form: FormData) -> HostedWidget:
        """
        Validate, load the SDK, create the subscription and open the widget.

        Returns:
            The open widget, ready to be settled

        Raises:
            MissingInputError: A field is empty
            SdkLoadError: The provider SDK could not be loaded
            SubscriptionCreationError: The backend refused the subscription
            CheckoutNetworkError: The backend could not be reached
        """
        if self.state.is_terminal:
            raise InvalidTransitionError(f"attempt already {self.state.value}, reset before paying again")
        if self.state is not CheckoutState.IDLE:
            raise InvalidTransitionError(f"cannot start an attempt from {self.state.value}")

        self._transition(CheckoutState.VALIDATING_INPUT)
        if not form.is_complete():
            self._transition(CheckoutState.IDLE)
            raise MissingInputError()

        try:
            self._transition(CheckoutState.AWAITING_SCRIPT_LOAD)
            if not await self.sdk.load():
                raise SdkLoadError()

            self._transition(CheckoutState.CREATING_SUBSCRIPTION)
            subscription_id = await self.subscriptions.create_subscription(form)

            widget = HostedWidget(self._build_options(subscription_id, form), clock=self.clock)
            self.sdk.open(widget)
        except CheckoutError as e:
            logger.warning(f"Payment attempt aborted: {e.code.value}")
            self._transition(CheckoutState.IDLE)
            raise
        except Exception as e:
            logger.exception("Payment attempt aborted by an unexpected error")
            self._transition(CheckoutState.IDLE)
            raise CheckoutNetworkError(str(e)) from e

        self._transition(CheckoutState.WIDGET_OPEN)
        return widget

    async def settle(self, widget: HostedWidget) -> CheckoutOutcome:
        """Wait for the widget's outcome and turn it into a CheckoutOutcome."""
        if self.state is not CheckoutState.WIDGET_OPEN:
            raise InvalidTransitionError(f"no open widget in state {self.state.value}")

        outcome = await widget.outcome()

        if isinstance(outcome, WidgetSuccess):
            self._transition(CheckoutState.SUCCESS)
            # Confirmation e-mail is sent by the backend's webhook.
            return CheckoutOutcome(
                status=PaymentStatus.SUCCESS,
                next_billing_date=next_billing_date(outcome.resolved_at, self.config.display_zone),
                redirect=ScheduledRedirect(url=self.config.order_confirm_url),
                details=outcome.details,
            )

        self._transition(CheckoutState.FAILED)
        return CheckoutOutcome(status=PaymentStatus.FAILED, reason=CheckoutErrorCode.WIDGET_DISMISSED)

    async def pay(self, form: FormData, on_open: Optional[Callable[[HostedWidget], None]] = None) -> CheckoutOutcome:
        """Run a full attempt, from validation to the widget's outcome."""
        widget = await self.open_widget(form)
        if on_open is not None:
            on_open(widget)
        return await self.settle(widget)

    def reset(self) -> None:
        """Return to IDLE so a new attempt can start."""
        self._transition(CheckoutState.IDLE)
