"""Routes for the uploader, purchases, summary, stats and sign-in pages."""

from __future__ import annotations

import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, timedelta
from urllib.parse import urlsplit

import httpx
from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    g,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from ..api import ApiClient
from ..auth import AuthSession, AuthWatcher, SessionTokenProvider
from ..auth.tokens import SESSION_KEY
from ..controllers import (
    DOC_TYPES,
    AuthGate,
    GateKind,
    PurchasesController,
    StatsController,
    StatsTab,
    SummaryController,
    UploaderController,
)
from ..controllers.stats import LAST_MONTHS_CHOICES
from ..periods import TimeFilter
from . import EXTENSION_KEY, WebState

logger = logging.getLogger(__name__)

bp = Blueprint("tracker", __name__)

RETURN_TO_KEY = "return_to"
STATE_KEY = "oauth_state"
STATS_PAGES_KEY = "stats_items"


def _state() -> WebState:
    return current_app.extensions[EXTENSION_KEY]


def _tokens() -> SessionTokenProvider:
    return SessionTokenProvider(lambda: session)


@asynccontextmanager
async def _api() -> AsyncIterator[ApiClient]:
    """One API client per request, closed when the view returns."""
    state = _state()
    transport = state.transport_factory(state.config, _tokens())
    async with ApiClient(transport) as api:
        yield api


def _safe_return_path(value: str | None) -> str:
    # Only same-site paths; anything else goes home
    if not value or not value.startswith("/") or "\\" in value:
        return "/"
    parts = urlsplit(value)
    if parts.scheme or parts.netloc or value.startswith("//"):
        return "/"
    return value


def _request_path() -> str:
    if request.query_string:
        return f"{request.path}?{request.query_string.decode()}"
    return request.path


def _int_arg(name: str) -> int | None:
    value = request.args.get(name, "")
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        abort(400, f"{name} must be a number")


# --- Auth gate ---


async def _refresh_if_expired() -> None:
    stored = AuthSession.from_dict(session.get(SESSION_KEY))
    authenticator = _state().authenticator
    if stored is None or not stored.expired:
        return
    if authenticator is None or not stored.refresh_token:
        session.pop(SESSION_KEY, None)
        return
    try:
        session[SESSION_KEY] = (await authenticator.refresh(stored)).to_dict()
    except (RuntimeError, httpx.HTTPError) as e:
        logger.info("Session refresh failed, signing out: %s", e)
        session.pop(SESSION_KEY, None)


@bp.before_app_request
async def auth_gate():
    """Protected pages need a signed-in user; nothing is fetched otherwise."""
    state = _state()
    g.user = None
    if not state.config.auth.enabled:
        # No identity provider configured: local or fixture use
        return None

    await _refresh_if_expired()
    watcher = AuthWatcher(_tokens().current_session)
    await watcher.start()
    watcher.stop()
    if watcher.session is not None:
        g.user = watcher.session.given_name

    decision = AuthGate().decide(watcher.status, _request_path())
    if decision.kind is GateKind.ALLOW:
        return None
    return (
        render_template("sign_in.html", return_to=decision.return_to),
        401,
    )


# --- Uploader ---


@bp.route("/", methods=["GET", "POST"])
async def uploader():
    async with _api() as api:
        page = UploaderController(api)
        if request.method == "POST":
            upload = request.files.get("file")
            content = upload.read() if upload else None
            page.select_file(content, upload.filename if upload else "")
            page.set_doc_type(
                request.form.get("doc_type", "receipt"),
                request.form.get("custom_doc_type", ""),
            )
            await page.submit()
    return render_template("uploader.html", page=page, doc_types=DOC_TYPES)


# --- Purchases ---


def _purchases_url(day: str | None) -> str:
    return url_for("tracker.purchases", date=day) if day else url_for("tracker.purchases")


@bp.get("/purchases")
async def purchases():
    async with _api() as api:
        page = PurchasesController(api, request.args.get("date"))
        await page.load()

    if page.data is not None:
        if item_id := request.args.get("edit_item"):
            page.start_item_edit(item_id)
        elif receipt_id := request.args.get("edit_receipt"):
            found = page.data.find_purchase(receipt_id)
            if found:
                page.start_receipt_date_edit(receipt_id, found[0])
        confirm = request.args.get("confirm", "")
        kind, _, target = confirm.partition(":")
        if kind == "item":
            page.request_delete_item(target)
        elif kind == "receipt":
            page.request_delete_receipt(target)

    current = date.fromisoformat(page.selected_date)
    week = {
        "previous": (current - timedelta(days=7)).isoformat(),
        "next": (current + timedelta(days=7)).isoformat(),
    }
    return render_template("purchases.html", page=page, week=week)


async def _purchases_action(action) -> str:
    """Load the week, run one mutation and report the outcome by flash."""
    day = request.form.get("date") or None
    async with _api() as api:
        page = PurchasesController(api, day)
        await page.load()
        if page.data is None:
            flash(page.error or "Could not load purchases.", "error")
            return _purchases_url(page.selected_date)
        ok = await action(page)
        live = api.live

    if ok:
        # Fixture data is static, so the change is gone after the redirect
        flash("Saved." if live else "Saved (fixture data is not kept).", "success")
    elif page.alert:
        flash(page.alert, "error")
    else:
        flash("Nothing to change.", "warning")
    return _purchases_url(page.selected_date)


@bp.post("/purchases/items/<item_id>")
async def save_item(item_id: str):
    async def action(page: PurchasesController) -> bool:
        if not page.start_item_edit(item_id):
            return False
        page.edit_item_name = request.form.get("item_name", "")
        page.edit_item_cost = request.form.get("item_cost", "")
        return await page.save_item()

    return redirect(await _purchases_action(action))


@bp.post("/purchases/items/<item_id>/delete")
async def delete_item(item_id: str):
    async def action(page: PurchasesController) -> bool:
        if not page.request_delete_item(item_id):
            return False
        return await page.confirm_delete()

    return redirect(await _purchases_action(action))


@bp.post("/purchases/receipts/<receipt_id>/date")
async def save_receipt_date(receipt_id: str):
    async def action(page: PurchasesController) -> bool:
        found = page.data.find_purchase(receipt_id)
        if found is None:
            return False
        page.start_receipt_date_edit(receipt_id, found[0])
        page.new_receipt_date = request.form.get("new_date", "")
        return await page.save_receipt_date()

    return redirect(await _purchases_action(action))


@bp.post("/purchases/receipts/<receipt_id>/delete")
async def delete_receipt(receipt_id: str):
    async def action(page: PurchasesController) -> bool:
        if not page.request_delete_receipt(receipt_id):
            return False
        return await page.confirm_delete()

    return redirect(await _purchases_action(action))


# --- Summary ---


@bp.get("/summary")
async def summary():
    year = _int_arg("year")
    month = _int_arg("month")
    async with _api() as api:
        try:
            page = SummaryController(api, year, month)
            page.set_view_mode(request.args.get("view", "table"))
        except ValueError as e:
            abort(400, str(e))
        await page.load()
    return render_template("summary.html", page=page)


# --- Stats ---


def _items_scope(page: StatsController) -> str:
    return f"{page.period}|{page.item_category or ''}"


async def _load_items_page(page: StatsController, index: int) -> None:
    """Fetch one page of item stats using the token history in the session."""
    scope = _items_scope(page)
    saved = session.get(STATS_PAGES_KEY) or {}
    tokens = saved.get("tokens") if saved.get("scope") == scope else None

    if not tokens:
        await page.load_items()
    else:
        # Past the known history: show the furthest page a token exists for
        page.page_tokens = list(tokens)
        await page.go_to_page(min(max(index, 0), len(tokens) - 1))
    session[STATS_PAGES_KEY] = {"scope": scope, "tokens": page.page_tokens}


@bp.get("/stats")
async def stats():
    try:
        tab = StatsTab(request.args.get("tab", StatsTab.SUMMARY.value))
        time_filter = TimeFilter(request.args.get("filter", TimeFilter.CURRENT_YEAR.value))
    except ValueError as e:
        abort(400, str(e))

    async with _api() as api:
        page = StatsController(api, page_size=_state().config.api.page_size)
        page.active_tab = tab
        try:
            page.configure(
                time_filter,
                year=_int_arg("year"),
                month=_int_arg("month"),
                last_months=_int_arg("months"),
            )
        except ValueError as e:
            abort(400, str(e))
        page.item_category = request.args.get("category") or None

        match tab:
            case StatsTab.ITEMS:
                await _load_items_page(page, _int_arg("page") or 0)
            case StatsTab.GLOBAL:
                if name := request.args.get("item", ""):
                    await page.search_global(name)
            case _:
                await page.refresh()

    return render_template(
        "stats.html",
        page=page,
        tabs=list(StatsTab),
        filters=list(TimeFilter),
        last_months_choices=LAST_MONTHS_CHOICES,
    )


# --- Sign-in ---


@bp.get("/auth/login")
async def login():
    authenticator = _state().authenticator
    if authenticator is None:
        abort(404, "sign-in is not configured")
    session[RETURN_TO_KEY] = _safe_return_path(request.args.get(RETURN_TO_KEY))
    session[STATE_KEY] = secrets.token_urlsafe(16)
    return redirect(authenticator.authorize_url(session[STATE_KEY]))


@bp.get("/auth/callback")
async def auth_callback():
    authenticator = _state().authenticator
    if authenticator is None:
        abort(404, "sign-in is not configured")

    expected = session.pop(STATE_KEY, None)
    code = request.args.get("code")
    if not code or not expected or request.args.get("state") != expected:
        abort(400, "invalid sign-in callback")

    try:
        signed_in = await authenticator.exchange_code(code)
    except (RuntimeError, httpx.HTTPError) as e:
        logger.warning("Code exchange failed: %s", e)
        flash("Sign-in failed. Please try again.", "error")
        return redirect(url_for("tracker.uploader"))

    session[SESSION_KEY] = signed_in.to_dict()
    logger.info("Signed in as %s", signed_in.given_name)
    return redirect(_safe_return_path(session.pop(RETURN_TO_KEY, None)))


@bp.get("/auth/logout")
async def logout():
    session.clear()
    authenticator = _state().authenticator
    if authenticator is None:
        return redirect(url_for("tracker.uploader"))
    return redirect(authenticator.logout_url())

