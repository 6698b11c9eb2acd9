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
Client for the subscription backend.

A single call, POST {backend}/api/create-subscription, returns the opaque
subscription handle that the hosted widget needs. It is never retried.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .config import CheckoutConfig
from .errors import CheckoutNetworkError, SubscriptionCreationError
from .models import FormData, SubscriptionResult

logger = logging.getLogger(__name__)


class SubscriptionClient:
    """Creates subscriptions through the backend."""

    def __init__(
        self,
        config: CheckoutConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            config: Checkout configuration (backend URL, timeout)
            http_client: Shared client; one is created per call when omitted
        """
        self.config = config
        self._http_client = http_client

    async def create_subscription(self, form: FormData) -> str:
        """
        Create a subscription for the customer.

        Returns:
            The subscription id issued by the backend

        Raises:
            SubscriptionCreationError: Backend answered without a usable subscription
            CheckoutNetworkError: The request failed or the body was not readable JSON
        """
        url = self.config.create_subscription_url
        payload = {"name": form.name, "email": form.email, "phone": form.phone}

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    url, json=payload, timeout=self.config.request_timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.request_timeout) as client:
                    response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"create-subscription request failed: {e}")
            raise CheckoutNetworkError(str(e)) from e

        if not response.is_success:
            logger.warning(f"create-subscription returned {response.status_code}")
            raise SubscriptionCreationError(f"backend returned {response.status_code}")

        try:
            result = SubscriptionResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"create-subscription returned an unreadable body: {e}")
            raise CheckoutNetworkError("invalid response body") from e

        if not result.success:
            raise SubscriptionCreationError("backend reported success=false")
        if not result.subscription_id:
            raise SubscriptionCreationError("backend response has no subscriptionId")

        logger.info(f"Subscription created: {result.subscription_id}")
        return result.subscription_id
