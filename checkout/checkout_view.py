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
Checkout View

Holds everything one browser session sees: the billing details, the loading
flag, a pending alert and the payment status. It renders either the checkout
form or the result screen and hands submissions to the PaymentOrchestrator.
"""

from collections import OrderedDict
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from uuid import uuid4
import logging

from .constants import Constants
from .errors import CheckoutError, CheckoutErrorCode, SdkLoadError
from .models import FORM_FIELDS, FormData, PaymentStatus, ScheduledRedirect
from .orchestrator import InvalidTransitionError, PaymentOrchestrator
from .payment_widget import HostedWidget
from .templates import render_template

logger = logging.getLogger(__name__)

constants = Constants()


class ViewState(BaseModel):
    """Serializable snapshot of a CheckoutView."""
    page: str
    form: FormData
    loading: bool
    alert: Optional[str] = None
    error_code: Optional[CheckoutErrorCode] = None
    status: PaymentStatus
    next_billing_date: Optional[str] = None
    redirect: Optional[ScheduledRedirect] = None
    widget: Optional[Dict[str, Any]] = Field(
        None,
        description="Browser options of the open widget, if any"
    )


class CheckoutView:
    """Checkout form and result screen for one browser session."""

    def __init__(self, orchestrator: PaymentOrchestrator):
        self.id = uuid4().hex
        self.orchestrator = orchestrator
        self.form = FormData()
        self.loading = False
        self.alert: Optional[str] = None
        self.error_code: Optional[CheckoutErrorCode] = None
        self.status = PaymentStatus.UNSET
        self.next_billing_date: Optional[str] = None
        self.redirect: Optional[ScheduledRedirect] = None
        self.widget: Optional[HostedWidget] = None

    @property
    def page(self) -> str:
        return "checkout" if self.status is PaymentStatus.UNSET else "result"

    def update_field(self, name: str, value: str) -> None:
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        setattr(self.form, name, value)

    def _report(self, error: CheckoutError) -> None:
        self.alert = error.user_message
        self.error_code = error.code

    async def submit(self, fields: Optional[Dict[str, str]] = None) -> None:
        """
        Start a payment attempt with the current billing details.

        Ignored while an attempt is in flight. On failure the error message
        becomes the pending alert and the form stays interactive.
        """
        if self.loading:
            logger.info(f"Session {self.id}: submit ignored, payment already in progress")
            return

        for name, value in (fields or {}).items():
            self.update_field(name, value)

        self.alert = None
        self.error_code = None
        self.loading = True
        try:
            self.widget = await self.orchestrator.open_widget(self.form.model_copy())
        except CheckoutError as e:
            self._report(e)
            self.loading = False

    def _require_widget(self) -> HostedWidget:
        if self.widget is None:
            raise InvalidTransitionError("no payment widget is open")
        return self.widget

    async def widget_succeeded(self, details: Optional[Dict[str, Any]] = None) -> None:
        widget = self._require_widget()
        widget.options.success_callback(details or {})
        await self._settle(widget)

    async def widget_dismissed(self) -> None:
        widget = self._require_widget()
        widget.options.dismiss_callback()
        await self._settle(widget)

    def sdk_unavailable(self) -> None:
        """The browser could not load the provider script for an open widget."""
        self._require_widget()
        self.widget = None
        self.orchestrator.reset()
        self._report(SdkLoadError())
        self.loading = False

    async def _settle(self, widget: HostedWidget) -> None:
        outcome = await self.orchestrator.settle(widget)
        self.widget = None
        self.status = outcome.status
        self.next_billing_date = outcome.next_billing_date
        self.redirect = outcome.redirect
        self.error_code = outcome.reason
        self.loading = False

    def restart(self) -> None:
        """Back to an empty checkout form."""
        self.form = FormData()
        self.status = PaymentStatus.UNSET
        self.next_billing_date = None
        self.redirect = None
        self.alert = None
        self.error_code = None
        self.widget = None
        self.loading = False
        self.orchestrator.reset()

    def state(self) -> ViewState:
        return ViewState(
            page=self.page,
            form=self.form,
            loading=self.loading,
            alert=self.alert,
            error_code=self.error_code,
            status=self.status,
            next_billing_date=self.next_billing_date,
            redirect=self.redirect,
            widget=self.widget.options.for_browser() if self.widget else None,
        )

    def deliver_state(self) -> ViewState:
        """State for the browser. A pending alert is shown once, then cleared."""
        state = self.state()
        self.alert = None
        self.error_code = None
        return state

    def render(self) -> str:
        state = self.deliver_state()
        context = {
            "state": state,
            "constants": constants,
            "sdk_url": self.orchestrator.config.sdk_url,
        }
        if state.page == "checkout":
            return render_template("checkout.html", **context)
        return render_template(
            "result.html",
            billing_date=state.next_billing_date or constants.BILLING_DATE_FALLBACK,
            **context,
        )


class CheckoutSessionStore:
    """
    In-memory CheckoutViews keyed by session id.

    Holds at most max_sessions views; adding one more evicts the view that
    was used least recently.
    """

    def __init__(self, max_sessions: int = constants.MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._views: "OrderedDict[str, CheckoutView]" = OrderedDict()

    def get(self, session_id: Optional[str]) -> Optional[CheckoutView]:
        if not session_id:
            return None
        view = self._views.get(session_id)
        if view is not None:
            self._views.move_to_end(session_id)
        return view

    def add(self, view: CheckoutView) -> CheckoutView:
        self._views[view.id] = view
        while len(self._views) > self.max_sessions:
            evicted, _ = self._views.popitem(last=False)
            logger.info(f"Evicted checkout session {evicted}")
        return view

    def __len__(self) -> int:
        return len(self._views)
