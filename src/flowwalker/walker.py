"""The flow walker: drive one login flow from start URL to final page.

:class:`FlowWalker` performs four steps, re-deriving the flow state from
the latest response URL before each branch:

1. **Initiate** -- GET the start URL, following every redirect.
2. **Login** -- if the page is a login page, POST ``email`` and
   ``password`` back to the exact URL it was served from.
3. **Consent** -- if the page path contains ``/consent`` (even one also
   containing ``/login``, such as ``/login/consent``), POST its query
   parameters plus ``consent=approve`` to ``/consent`` on the same origin.
4. **Verify** -- look for the success marker in the final body.

Login and consent are each optional and each happen at most once, so a run
issues one GET and at most two POSTs. A provider that sends the client
back to ``/login`` after consent is not followed again.

Only one response is alive at a time: each one is closed as soon as the
next has been acquired, and the last one is closed on every exit path.
"""

from __future__ import annotations

from typing import Optional

import httpx

from flowwalker.client import FlowSession
from flowwalker.flow import (
    consent_payload,
    consent_target,
    is_consent_page,
    is_login_page,
)
from flowwalker.models import (
    Credentials,
    FlowOutcome,
    FlowStep,
    WalkerSettings,
)
from flowwalker.output import info

STEP_INITIAL = "Initial GET"
STEP_LOGIN = "Login POST"
STEP_CONSENT = "Consent POST"


class FlowWalker:
    """Walks one authorization-code flow using an open :class:`FlowSession`.

    Args:
        session: An entered session; its cookie jar carries the login
            state between steps.
        credentials: The email/password pair for the login page.
        settings: Start URL, success marker and preview length.
    """

    def __init__(
        self,
        session: FlowSession,
        credentials: Credentials,
        settings: WalkerSettings,
    ) -> None:
        self._session = session
        self._credentials = credentials
        self._settings = settings
        self._steps: list[FlowStep] = []

    def run(self) -> FlowOutcome:
        """Perform the flow and return its outcome.

        Returns:
            A :class:`FlowOutcome`; ``success`` is ``False`` when the final
            body lacks the success marker.

        Raises:
            TransportError: If any request fails at the network level. No
                further requests are attempted.
        """
        self._steps = []
        start_url = self._settings.start_url

        info(f"1. Starting flow at {start_url}")
        response = self._session.get(start_url, step=STEP_INITIAL)
        try:
            self._record(STEP_INITIAL, start_url, response)
            info(f"2. Landed at {response.url}")

            if is_login_page(response.url):
                response = self._login(response)
                info(f"3. Post login ended at {response.url}")

            if is_consent_page(response.url):
                response = self._consent(response)
                info(f"4. Post consent ended at {response.url}")

            final_url = str(response.url)
            body = response.text
        finally:
            response.close()

        return self._verify(final_url, body)

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #

    def _login(self, current: httpx.Response) -> httpx.Response:
        """Post credentials to the login page's own URL."""
        info("   - Detected login page. Posting credentials...")
        target = current.url
        response = self._session.post_form(
            target, self._credentials.form_fields(), step=STEP_LOGIN
        )
        current.close()
        self._record(STEP_LOGIN, target, response, method="POST")
        return response

    def _consent(self, current: httpx.Response) -> httpx.Response:
        """Approve the consent page, echoing its query parameters."""
        info("   - Detected consent page. Approving...")
        target = consent_target(current.url)
        response = self._session.post_form(
            target, consent_payload(current.url), step=STEP_CONSENT
        )
        current.close()
        self._record(STEP_CONSENT, target, response, method="POST")
        return response

    def _verify(self, final_url: str, body: str) -> FlowOutcome:
        if self._settings.success_marker in body:
            return FlowOutcome(success=True, final_url=final_url, steps=self._steps)
        return FlowOutcome(
            success=False,
            final_url=final_url,
            preview=body[: self._settings.preview_chars],
            steps=self._steps,
        )

    def _record(
        self,
        label: str,
        url: str | httpx.URL,
        response: httpx.Response,
        method: str = "GET",
    ) -> None:
        self._steps.append(
            FlowStep(
                label=label,
                method=method,
                url=str(url),
                final_url=str(response.url),
                status_code=response.status_code,
                redirects=len(response.history),
            )
        )


def walk(
    session: FlowSession,
    credentials: Credentials,
    settings: Optional[WalkerSettings] = None,
) -> FlowOutcome:
    """Run a :class:`FlowWalker` once; see :meth:`FlowWalker.run`."""
    return FlowWalker(session, credentials, settings or WalkerSettings()).run()
