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
Checkout Server

Serves the subscription checkout page and receives the hosted widget's
callbacks.

Usage:
    python -m checkout.server

Or:
    python -m app serve
"""

from datetime import datetime
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .checkout_routes import router as checkout_router
from .checkout_view import CheckoutSessionStore
from .config import CheckoutConfig, load_config
from .payment_widget import PaymentSdk, RazorpaySdk, utcnow
from .subscription_client import SubscriptionClient

logger = logging.getLogger(__name__)


def create_app(
    config: CheckoutConfig,
    sdk: Optional[PaymentSdk] = None,
    subscriptions: Optional[SubscriptionClient] = None,
    clock: Callable[[], datetime] = utcnow,
) -> FastAPI:
    """
    Build the checkout application.

    Args:
        config: Checkout configuration
        sdk: Payment SDK; Razorpay Checkout when omitted
        subscriptions: Backend client; built from config when omitted
        clock: Time source for widget callbacks
    """
    app = FastAPI(
        title="Subscription Checkout",
        description="Checkout page for subscription payments through a hosted widget",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.sdk = sdk or RazorpaySdk(config)
    app.state.subscriptions = subscriptions or SubscriptionClient(config)
    app.state.clock = clock
    app.state.sessions = CheckoutSessionStore(max_sessions=config.max_sessions)

    app.include_router(checkout_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "Subscription Checkout",
            "sessions": len(app.state.sessions),
        }

    return app


def run_server(config: Optional[CheckoutConfig] = None, host: Optional[str] = None, port: Optional[int] = None):
    """Run the checkout server."""
    logging.basicConfig(level=logging.INFO)

    config = config or load_config()
    host = host or config.host
    port = port or config.port

    logger.info(f"Starting Subscription Checkout on http://{host}:{port}")
    logger.info("Available endpoints:")
    logger.info("  - GET  / - Checkout page / result screen")
    logger.info("  - GET  /checkout/state - Current view state")
    logger.info("  - POST /checkout/pay - Start a payment attempt")
    logger.info("  - POST /checkout/widget/success - Widget success callback")
    logger.info("  - POST /checkout/widget/dismiss - Widget dismissal callback")
    logger.info("  - POST /checkout/widget/sdk-error - Provider script failed in the browser")
    logger.info("  - POST /checkout/restart - Back to an empty form")
    logger.info("  - GET  /health - Health check")

    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == "__main__":
    run_server()
