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
Checkout configuration.

Values are read once at startup (environment, optionally a .env file) and
passed explicitly to the orchestrator and the app factory.

Environment:
    CHECKOUT_BACKEND_URL        Base URL of the subscription backend (required)
    CHECKOUT_PROVIDER_KEY_ID    Public key of the payment provider (required)
    CHECKOUT_ORDER_CONFIRM_URL  Destination after a successful payment
    CHECKOUT_SDK_URL            Provider checkout script
    CHECKOUT_REQUEST_TIMEOUT    Backend request timeout in seconds (unset = none)
    CHECKOUT_TIMEZONE           Zone the billing date is shown in (Asia/Kolkata)
    CHECKOUT_MAX_SESSIONS       Checkout sessions kept in memory
    CHECKOUT_HOST / CHECKOUT_PORT
"""

import logging
import os
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import Constants
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

constants = Constants()


class CheckoutConfig(BaseModel):
    """Process-wide, read-only checkout configuration."""

    model_config = {"frozen": True}

    backend_url: str = Field(..., description="Base URL of the subscription backend")
    provider_key_id: str = Field(..., description="Payment provider public key")
    order_confirm_url: str = Field(
        default=constants.ORDER_CONFIRM_URL,
        description="Where the browser goes after a successful payment",
    )
    sdk_url: str = Field(default=constants.SDK_SCRIPT_URL)
    request_timeout: Optional[float] = Field(
        None,
        description="Timeout for the backend call; None means no timeout"
    )
    display_timezone: str = Field(
        default=constants.DISPLAY_TIMEZONE,
        description="IANA zone used for the next billing date"
    )
    max_sessions: int = Field(default=constants.MAX_SESSIONS, gt=0)
    host: str = "localhost"
    port: int = 8000

    @field_validator("backend_url", "provider_key_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("backend_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("display_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone {value!r}")
        return value

    @property
    def display_zone(self) -> ZoneInfo:
        return ZoneInfo(self.display_timezone)

    @property
    def create_subscription_url(self) -> str:
        return f"{self.backend_url}{constants.CREATE_SUBSCRIPTION_PATH}"

    def masked(self) -> dict:
        """Config as a dict with the provider key partially hidden."""
        data = self.model_dump()
        key = data["provider_key_id"]
        data["provider_key_id"] = key[:8] + "..." if len(key) > 8 else "***"
        return data


def load_config(environ: Optional[Mapping[str, str]] = None) -> CheckoutConfig:
    """
    Build a CheckoutConfig from the environment.

    Args:
        environ: Mapping to read from. Defaults to os.environ after loading .env.

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    raw = {
        "backend_url": environ.get("CHECKOUT_BACKEND_URL", ""),
        "provider_key_id": environ.get("CHECKOUT_PROVIDER_KEY_ID", ""),
    }
    optional = {
        "order_confirm_url": "CHECKOUT_ORDER_CONFIRM_URL",
        "sdk_url": "CHECKOUT_SDK_URL",
        "request_timeout": "CHECKOUT_REQUEST_TIMEOUT",
        "display_timezone": "CHECKOUT_TIMEZONE",
        "max_sessions": "CHECKOUT_MAX_SESSIONS",
        "host": "CHECKOUT_HOST",
        "port": "CHECKOUT_PORT",
    }
    for field, env_name in optional.items():
        value = environ.get(env_name)
        if value:
            raw[field] = value

    try:
        config = CheckoutConfig(**raw)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(f"Invalid checkout configuration: {fields}") from e

    logger.info(f"Checkout configured for backend {config.backend_url}")
    return config
