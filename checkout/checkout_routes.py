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
FastAPI Routes for the Checkout Page

Serves the checkout form / result screen and receives the hosted widget's
callbacks. Each browser gets its own CheckoutView, found through a session
cookie.
"""

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from typing import Any, Dict, Optional
import logging

from .checkout_view import CheckoutSessionStore, CheckoutView
from .constants import Constants
from .models import FormData
from .orchestrator import InvalidTransitionError, PaymentOrchestrator

logger = logging.getLogger(__name__)

constants = Constants()

router = APIRouter(tags=["Checkout"])


def _new_view(request: Request) -> CheckoutView:
    state = request.app.state
    orchestrator = PaymentOrchestrator(
        config=state.config,
        sdk=state.sdk,
        subscriptions=state.subscriptions,
        clock=state.clock,
    )
    return CheckoutView(orchestrator)


def get_view(request: Request, create: bool = True) -> Optional[CheckoutView]:
    """Find the CheckoutView for this request's session, creating one if needed."""
    sessions: CheckoutSessionStore = request.app.state.sessions
    view = sessions.get(request.cookies.get(constants.SESSION_COOKIE))
    if view is None and create:
        view = sessions.add(_new_view(request))
        logger.info(f"New checkout session {view.id}")
    return view


def _with_cookie(response: Response, view: CheckoutView) -> Response:
    response.set_cookie(constants.SESSION_COOKIE, view.id, httponly=True, samesite="lax")
    return response


def _state_response(view: CheckoutView) -> JSONResponse:
    return _with_cookie(JSONResponse(view.deliver_state().model_dump(mode="json")), view)


def _initial_state(request: Request) -> JSONResponse:
    """State of an empty checkout view for a request without a session. Nothing is stored."""
    return JSONResponse(_new_view(request).state().model_dump(mode="json"))


def _require_view(request: Request) -> CheckoutView:
    view = get_view(request, create=False)
    if view is None:
        raise HTTPException(status_code=404, detail="Checkout session not found")
    return view


@router.get("/", response_class=HTMLResponse)
async def checkout_page(request: Request):
    """Render the checkout form, or the result screen once the attempt has settled."""
    view = get_view(request)
    return _with_cookie(HTMLResponse(content=view.render()), view)


@router.get("/checkout/state")
async def checkout_state(request: Request):
    view = get_view(request, create=False)
    if view is None:
        return _initial_state(request)
    return _state_response(view)


@router.post("/checkout/pay")
async def pay(form: FormData, request: Request):
    """
    Submit the billing details and start a payment attempt.

    The response carries either the widget options to open in the browser or
    the alert explaining why the attempt stopped.
    """
    view = get_view(request)
    if view.page != "checkout":
        raise HTTPException(status_code=409, detail="Restart the checkout before paying again")

    await view.submit(form.model_dump())
    return _state_response(view)


@router.post("/checkout/widget/success")
async def widget_success(request: Request):
    """Success handler of the hosted widget."""
    view = _require_view(request)
    details: Dict[str, Any] = {}
    if await request.body():
        try:
            details = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(details, dict):
        raise HTTPException(status_code=400, detail="Callback body must be an object")

    try:
        await view.widget_succeeded(details)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state_response(view)


@router.post("/checkout/widget/dismiss")
async def widget_dismiss(request: Request):
    """Modal dismissal handler of the hosted widget."""
    view = _require_view(request)
    try:
        await view.widget_dismissed()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state_response(view)


@router.post("/checkout/widget/sdk-error")
async def widget_sdk_error(request: Request):
    """The browser could not inject the provider script."""
    view = _require_view(request)
    try:
        view.sdk_unavailable()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state_response(view)


@router.post("/checkout/restart")
async def restart(request: Request):
    """Back to Home: clear the form and the payment status."""
    view = get_view(request, create=False)
    if view is None:
        return _initial_state(request)
    view.restart()
    return _state_response(view)
