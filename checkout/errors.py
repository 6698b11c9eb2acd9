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
Checkout Error Taxonomy

Every failure of a payment attempt is terminal and reported to the customer
as a blocking message. Widget dismissal is not an error: it is a normal
outcome that routes to the failure screen.
"""

from enum import Enum
from typing import Optional


class CheckoutErrorCode(str, Enum):
    """Error codes for a failed payment attempt."""
    MISSING_INPUT = "missing_input"
    SDK_LOAD_FAILURE = "sdk_load_failure"
    SUBSCRIPTION_CREATION_FAILURE = "subscription_creation_failure"
    NETWORK_ERROR = "network_error"
    WIDGET_DISMISSED = "widget_dismissed"


class CheckoutError(Exception):
    """Base class for checkout failures that return the customer to the form."""

    code: CheckoutErrorCode
    user_message: str = "Failed to initiate payment. Please try again."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(detail or self.user_message)


class MissingInputError(CheckoutError):
    code = CheckoutErrorCode.MISSING_INPUT
    user_message = "Please fill all the fields"


class SdkLoadError(CheckoutError):
    code = CheckoutErrorCode.SDK_LOAD_FAILURE
    user_message = "Razorpay SDK failed to load. Please check your internet connection."


class SubscriptionCreationError(CheckoutError):
    code = CheckoutErrorCode.SUBSCRIPTION_CREATION_FAILURE
    user_message = "Failed to create subscription. Please try again."


class CheckoutNetworkError(CheckoutError):
    code = CheckoutErrorCode.NETWORK_ERROR
    user_message = "Failed to initiate payment. Please try again."


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""
