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
Hosted Payment Widget Bridge

The provider's checkout widget reports its result through one of two
callbacks: a success handler or a modal dismissal. HostedWidget turns that
pair into a single awaitable outcome:

    widget = HostedWidget(options_factory)
    sdk.open(widget)
    outcome = await widget.outcome()   # WidgetSuccess | WidgetDismissed

The outcome resolves at most once. Callbacks arriving after resolution are
ignored.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from .config import CheckoutConfig
from .models import WidgetDismissed, WidgetOptions, WidgetOutcome, WidgetSuccess

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HostedWidget:
    """Single-resolution wrapper around one opening of the hosted widget."""

    def __init__(
        self,
        build_options: Callable[["HostedWidget"], WidgetOptions],
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Args:
            build_options: Builds the widget options, wiring in this widget's callbacks
            clock: Source of the callback instant
        """
        self._clock = clock
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()
        self.options = build_options(self)
        self.is_open = False

    @property
    def resolved(self) -> bool:
        return self._future.done()

    def mark_open(self) -> None:
        self.is_open = True

    def on_success(self, details: Optional[Dict[str, Any]] = None) -> None:
        """Success handler invoked by the widget."""
        if self.resolved:
            logger.warning("Widget success callback after resolution ignored")
            return
        logger.info("Payment successful")
        self._future.set_result(
            WidgetSuccess(details=details or {}, resolved_at=self._clock())
        )

    def on_dismiss(self) -> None:
        """Modal dismissal handler invoked by the widget."""
        if self.resolved:
            logger.warning("Widget dismiss callback after resolution ignored")
            return
        logger.info("Payment modal dismissed")
        self._future.set_result(WidgetDismissed(resolved_at=self._clock()))

    async def outcome(self) -> WidgetOutcome:
        return await self._future


class PaymentSdk:
    """Interface of the provider SDK as seen by the orchestrator."""

    async def load(self) -> bool:
        """Load the SDK. Returns False if it could not be loaded."""
        raise NotImplementedError

    def open(self, widget: HostedWidget) -> None:
        """Hand the widget to the provider; returns once it is showing."""
        raise NotImplementedError


class RazorpaySdk(PaymentSdk):
    """
    Razorpay Checkout driven from the browser.

    load() fetches the checkout script so a blocked or unreachable CDN fails
    the attempt before any subscription is created. open() marks the widget
    open; the rendered page then injects the same script and opens the modal
    with the widget's browser options.
    """

    def __init__(
        self,
        config: CheckoutConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self._http_client = http_client

    async def load(self) -> bool:
        try:
            if self._http_client is not None:
                response = await self._http_client.get(self.config.sdk_url)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await client.get(self.config.sdk_url)
        except httpx.HTTPError as e:
            logger.warning(f"Payment SDK failed to load from {self.config.sdk_url}: {e}")
            return False

        if not response.is_success:
            logger.warning(f"Payment SDK returned {response.status_code}")
            return False
        return True

    def open(self, widget: HostedWidget) -> None:
        widget.mark_open()
        logger.info(f"Opening widget for subscription {widget.options.subscription_id}")
