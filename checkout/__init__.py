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
Subscription Checkout Package

A single checkout page that collects name, phone and email, creates a
subscription through the backend and hands it to the payment provider's
hosted widget:

- PaymentOrchestrator: validation, SDK load, subscription, widget outcome
- CheckoutView: form state, loading flag, result screen
- server.create_app: FastAPI application serving the page and widget callbacks
"""

from .checkout_view import CheckoutView
from .config import CheckoutConfig, load_config
from .orchestrator import PaymentOrchestrator

__all__ = [
    "CheckoutConfig",
    "CheckoutView",
    "PaymentOrchestrator",
    "load_config",
]
