"""Shared test fixtures for flowwalker.

Provides a scripted identity provider served through
:class:`httpx.MockTransport`, isolated environment settings, output
state management, and a CLI runner. No test opens a real socket.
"""

from __future__ import annotations

from typing import Callable, Optional
from urllib.parse import parse_qsl

import httpx
import pytest

from flowwalker.client import FlowSession
from flowwalker.models import Credentials, WalkerSettings
from flowwalker.output import OutputFormat, OutputManager, reset_output, set_output


APP_ORIGIN = "http://app.example.com"
AUTH_ORIGIN = "http://auth.example.com"
START_URL = f"{APP_ORIGIN}/"
LOGIN_URL = f"{AUTH_ORIGIN}/login?return_to=/app"
CONSENT_URL = f"{AUTH_ORIGIN}/consent?client_id=abc&return_to=/app"
CALLBACK_URL = f"{APP_ORIGIN}/callback?code=xyz"

EMAIL = "alice@example.com"
PASSWORD = "s3cret&pass"

SUCCESS_PAGE = (
    "<html><body><h1>Login Successful!</h1>"
    "<h3>ID Token (Raw):</h3><pre>eyJhbGciOi...</pre></body></html>"
)
DENIED_PAGE = "<html><body><h1>Access Denied</h1></body></html>"


# ---------------------------------------------------------------------------
# Scripted identity provider + relying application
# ---------------------------------------------------------------------------


def form_fields(request: httpx.Request) -> list[tuple[str, str]]:
    """Decode a form-encoded request body into ordered (key, value) pairs."""
    return parse_qsl(request.content.decode("ascii"), keep_blank_values=True)


class FakeIdentityProvider:
    """Request handler emulating a provider's login/consent pages and a demo app.

    The relying app at :data:`APP_ORIGIN` redirects to the provider, the
    provider keeps a ``sid`` cookie once the user has logged in, and the
    app's ``/callback`` page renders ``callback_body``.

    Args:
        logged_in: Start with an authenticated provider session, so the
            login page is skipped.
        consented: The client was already approved, so the consent page
            is skipped.
        callback_body: Body of the relying app's final page.
        consent_url: Where a successful login redirects when consent is
            still needed.
    """

    def __init__(
        self,
        *,
        logged_in: bool = False,
        consented: bool = False,
        callback_body: str = SUCCESS_PAGE,
        consent_url: str = CONSENT_URL,
    ) -> None:
        self.logged_in = logged_in
        self.consented = consented
        self.callback_body = callback_body
        self.consent_url = consent_url
        self.requests: list[httpx.Request] = []

    @property
    def posts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    @property
    def gets(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if host == "app.example.com":
            if path == "/callback":
                return httpx.Response(200, html=self.callback_body)
            return self._redirect(LOGIN_URL if not self._has_session(request) else self._after_login())

        if path == "/login" and request.method == "GET":
            if self._has_session(request):
                return self._redirect(self._after_login())
            return httpx.Response(200, html="<form method=post><input name=email></form>")

        if path == "/login" and request.method == "POST":
            fields = dict(form_fields(request))
            if fields.get("email") == EMAIL and fields.get("password") == PASSWORD:
                return self._redirect(
                    self._after_login(), headers={"Set-Cookie": "sid=s1; Path=/"}
                )
            return httpx.Response(200, html="<p>Invalid credentials</p>")

        if path == "/consent" and request.method == "GET":
            if not self._has_session(request):
                return self._redirect(LOGIN_URL)
            return httpx.Response(200, html="<form method=post><button>Approve</button></form>")

        if path == "/consent" and request.method == "POST":
            fields = dict(form_fields(request))
            if fields.get("consent") == "approve":
                return self._redirect(CALLBACK_URL)
            return httpx.Response(200, html=DENIED_PAGE)

        return httpx.Response(404, text="not found")

    def _has_session(self, request: httpx.Request) -> bool:
        return self.logged_in or "sid=s1" in request.headers.get("cookie", "")

    def _after_login(self) -> str:
        return CALLBACK_URL if self.consented else self.consent_url

    @staticmethod
    def _redirect(location: str, headers: Optional[dict[str, str]] = None) -> httpx.Response:
        return httpx.Response(302, headers={"Location": location, **(headers or {})})


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a quiet plain manager for each test and reset it afterwards.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, so a fresh one is needed for every test.
    """
    set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True))
    yield
    reset_output()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Clear FLOWWALKER_* variables, disable colour, and point XDG data at tmp_path."""
    for var in ["FLOWWALKER_START_URL", "FLOWWALKER_INSECURE"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path


@pytest.fixture
def provider() -> FakeIdentityProvider:
    """A provider that requires both login and consent."""
    return FakeIdentityProvider()


@pytest.fixture
def settings() -> WalkerSettings:
    return WalkerSettings(start_url=START_URL)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(email=EMAIL, password=PASSWORD)


@pytest.fixture
def make_session(settings: WalkerSettings) -> Callable[..., FlowSession]:
    """Factory building a FlowSession whose traffic goes to *handler*."""

    def _make(handler, walker_settings: Optional[WalkerSettings] = None) -> FlowSession:
        return FlowSession(walker_settings or settings, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
