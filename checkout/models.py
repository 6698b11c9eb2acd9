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

"""Data types shared by the checkout view, orchestrator and routes."""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union
from pydantic import BaseModel, Field

from .constants import Constants
from .errors import CheckoutErrorCode

constants = Constants()


FORM_FIELDS = ("name", "email", "phone")


class FormData(BaseModel):
    """Billing details typed by the customer."""
    name: str = ""
    email: str = ""
    phone: str = ""

    def is_complete(self) -> bool:
        """True when no field is empty or whitespace only."""
        return all(getattr(self, field).strip() for field in FORM_FIELDS)


class PaymentStatus(str, Enum):
    UNSET = "unset"
    SUCCESS = "success"
    FAILED = "failed"


class CheckoutState(str, Enum):
    """Lifecycle of a single payment attempt."""
    IDLE = "idle"
    VALIDATING_INPUT = "validating_input"
    AWAITING_SCRIPT_LOAD = "awaiting_script_load"
    CREATING_SUBSCRIPTION = "creating_subscription"
    WIDGET_OPEN = "widget_open"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CheckoutState.SUCCESS, CheckoutState.FAILED)


class SubscriptionResult(BaseModel):
    """Response body of the create-subscription endpoint."""
    success: bool = False
    subscription_id: Optional[str] = Field(None, alias="subscriptionId")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class WidgetPrefill(BaseModel):
    name: str
    email: str
    contact: str

    @classmethod
    def from_form(cls, form: FormData) -> "WidgetPrefill":
        return cls(name=form.name, email=form.email, contact=form.phone)


class WidgetTheme(BaseModel):
    color: str = constants.WIDGET_THEME_COLOR


class WidgetNotes(BaseModel):
    payment_type: str = constants.WIDGET_PAYMENT_TYPE


class WidgetOptions(BaseModel):
    """
    Configuration handed to the hosted checkout widget.

    The two callbacks stay on the server; the browser receives the remaining
    fields and posts the widget's callbacks back.
    """
    key: str
    subscription_id: str
    name: str = constants.WIDGET_DISPLAY_NAME
    description: str = constants.WIDGET_DESCRIPTION
    prefill: WidgetPrefill
    notes: WidgetNotes = Field(default_factory=WidgetNotes)
    theme: WidgetTheme = Field(default_factory=WidgetTheme)
    success_callback: Optional[Callable[[Dict[str, Any]], None]] = Field(None, exclude=True)
    dismiss_callback: Optional[Callable[[], None]] = Field(None, exclude=True)

    def for_browser(self) -> Dict[str, Any]:
        """Serializable options, callbacks excluded."""
        return self.model_dump(mode="json")


class WidgetSuccess(BaseModel):
    """The customer completed payment inside the widget."""
    kind: str = "success"
    details: Dict[str, Any] = Field(default_factory=dict)
    resolved_at: datetime


class WidgetDismissed(BaseModel):
    """The customer closed the widget without completing payment."""
    kind: str = "dismissed"
    resolved_at: datetime


WidgetOutcome = Union[WidgetSuccess, WidgetDismissed]


class ScheduledRedirect(BaseModel):
    """A client-side navigation that fires after a fixed delay."""
    url: str
    delay_ms: int = constants.REDIRECT_DELAY_MS


class CheckoutOutcome(BaseModel):
    """Normalised result of one payment attempt."""
    status: PaymentStatus
    reason: Optional[CheckoutErrorCode] = None
    next_billing_date: Optional[str] = None
    redirect: Optional[ScheduledRedirect] = None
    details: Dict[str, Any] = Field(default_factory=dict)
