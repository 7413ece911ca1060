"""URL-driven flow state detection and consent form construction.

The walker never remembers where it has been: the flow state is a pure
function of the URL the latest response landed on. All path heuristics
live in :func:`classify` so they can be tested in isolation.

Detection is a substring check on the URL *path* only; a ``/login``
appearing in the query string (``?return_to=/login``) does not count.
When a path contains both markers, :func:`classify` reports login, but
the walker still runs the consent step on it once login has been handled
(see :func:`is_consent_page`).
"""

from __future__ import annotations

import httpx

from flowwalker.models import FlowState

LOGIN_MARKER = "/login"
CONSENT_MARKER = "/consent"
CONSENT_PATH = "/consent"
CONSENT_FIELD = "consent"
CONSENT_APPROVE = "approve"


def classify(url: str | httpx.URL) -> FlowState:
    """Return the flow state implied by *url*'s path.

    Examples::

        classify("http://idp/login?return_to=/app")   # AWAITING_LOGIN
        classify("http://idp/consent?client_id=abc")  # AWAITING_CONSENT
        classify("http://app/callback?code=xyz")      # TERMINAL
    """
    if is_login_page(url):
        return FlowState.AWAITING_LOGIN
    if is_consent_page(url):
        return FlowState.AWAITING_CONSENT
    return FlowState.TERMINAL


def is_login_page(url: str | httpx.URL) -> bool:
    return LOGIN_MARKER in httpx.URL(url).path


def is_consent_page(url: str | httpx.URL) -> bool:
    """True when *url*'s path contains ``/consent``, whatever else it contains.

    The consent step uses this rather than :func:`classify`, so a page such
    as ``/login/consent`` reached after logging in is still approved.
    """
    return CONSENT_MARKER in httpx.URL(url).path


def consent_payload(url: str | httpx.URL) -> httpx.QueryParams:
    """Build the consent form body from the consent page URL.

    The consent page echoes the authorization request as hidden fields, so
    every query parameter of *url* is resubmitted (repeated keys kept) with
    ``consent`` forced to ``approve``.
    """
    return httpx.URL(url).params.set(CONSENT_FIELD, CONSENT_APPROVE)


def consent_target(url: str | httpx.URL) -> httpx.URL:
    """Resolve the consent submission endpoint against *url*'s origin."""
    return httpx.URL(url).join(CONSENT_PATH)
