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
Checkout CLI - Command line interface for the subscription checkout.

Usage:
    python -m app --help
    python -m app serve
    python -m app config
    python -m app probe-sdk
    python -m app create-subscription --name ... --email ... --phone ...
"""

import asyncio
import sys
import os
from typing import Optional

import click

from checkout.config import CheckoutConfig, load_config
from checkout.errors import CheckoutError, ConfigurationError
from checkout.models import FormData
from checkout.payment_widget import RazorpaySdk
from checkout.subscription_client import SubscriptionClient

# Fix Windows console encoding
if sys.platform == 'win32':
    os.system('chcp 65001 > nul 2>&1')
    sys.stdout.reconfigure(encoding='utf-8', errors='replace')


def print_header(title: str):
    """Print a header with borders."""
    border = "=" * (len(title) + 4)
    print(f"\n{border}")
    print(f"| {title} |")
    print(f"{border}\n")


def print_success(msg: str):
    print(f"[OK] {msg}")


def print_error(msg: str):
    print(f"[ERROR] {msg}")


def print_info(msg: str):
    print(f"[INFO] {msg}")


def _load_config_or_exit() -> CheckoutConfig:
    try:
        return load_config()
    except ConfigurationError as e:
        print_error(str(e))
        print("[TIP] Set CHECKOUT_BACKEND_URL and CHECKOUT_PROVIDER_KEY_ID (or add them to .env)")
        raise SystemExit(1)


async def run_sdk_probe(config: CheckoutConfig) -> bool:
    """Check that the payment provider's checkout script can be fetched."""
    print_header("Payment SDK Check")
    print_info(f"Fetching {config.sdk_url}")

    if await RazorpaySdk(config).load():
        print_success("Payment SDK reachable")
        return True
    print_error("Payment SDK failed to load")
    return False


async def run_create_subscription(config: CheckoutConfig, form: FormData) -> Optional[str]:
    """Create a subscription through the backend, exactly as the checkout page does."""
    print_header("Create Subscription")
    print_info(f"POST {config.create_subscription_url}")

    try:
        subscription_id = await SubscriptionClient(config).create_subscription(form)
    except CheckoutError as e:
        print_error(f"{e.code.value}: {e}")
        return None

    print_success(f"Subscription created: {subscription_id}")
    return subscription_id


@click.group()
def cli():
    """Subscription Checkout CLI"""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (CHECKOUT_HOST)")
@click.option("--port", default=None, type=int, help="Port (CHECKOUT_PORT)")
def serve(host: Optional[str], port: Optional[int]):
    """Start the checkout server."""
    from checkout.server import run_server

    config = _load_config_or_exit()
    print_header("Starting Checkout Server")
    print(f"URL: http://{host or config.host}:{port or config.port}")
    print("Press Ctrl+C to stop\n")
    run_server(config, host=host, port=port)


@cli.command()
def config():
    """Show the effective configuration."""
    cfg = _load_config_or_exit()
    print_header("Checkout Configuration")
    for key, value in cfg.masked().items():
        print(f"   {key}: {value}")


@cli.command("probe-sdk")
def probe_sdk():
    """Check that the payment SDK script loads."""
    if not asyncio.run(run_sdk_probe(_load_config_or_exit())):
        raise SystemExit(1)


@cli.command("create-subscription")
@click.option("--name", required=True, help="Customer name")
@click.option("--email", required=True, help="Customer email")
@click.option("--phone", required=True, help="Customer phone")
def create_subscription(name: str, email: str, phone: str):
    """Create a subscription through the backend."""
    form = FormData(name=name, email=email, phone=phone)
    if not form.is_complete():
        print_error("Please fill all the fields")
        raise SystemExit(1)
    if asyncio.run(run_create_subscription(_load_config_or_exit(), form)) is None:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
