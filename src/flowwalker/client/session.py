"""Cookie-keeping, redirect-following HTTP session for one flow run.

This module provides :class:`FlowSession`, a thin wrapper around
:class:`httpx.Client` configured the way a browser walks a login flow:

- **Redirects** -- ``follow_redirects=True``; every hop is followed,
  including cross-origin ones, so one logical call returns the page the
  chain ended at.
- **Cookies** -- a single :class:`httpx.Cookies` jar collects ``Set-Cookie``
  headers from every hop and replays them on later requests.
- **Timeout** -- one fixed per-request timeout from
  :class:`~flowwalker.models.WalkerSettings`.
- **Error mapping** -- any :class:`httpx.RequestError` (transport
  failures, timeouts, redirect loops) becomes a
  :class:`~flowwalker.exceptions.TransportError` labelled with the step
  that issued the request. Nothing is retried.
- **Hop tracing** -- a response event hook reports each redirect through
  :func:`~flowwalker.output.debug`, visible with ``--verbose``.

HTTP error statuses (4xx/5xx) are not errors here: the walker judges a run
only by the final page body.
"""

from __future__ import annotations

from typing import Optional

import httpx

from flowwalker import __version__
from flowwalker.exceptions import TransportError
from flowwalker.models import WalkerSettings
from flowwalker.output import debug


class FlowSession:
    """Synchronous HTTP session shared by every step of one run.

    Must be used as a context manager so that the underlying connection
    pool is opened and closed exactly once.

    Args:
        settings: Effective run settings (timeout, TLS verification).
        transport: Optional transport override, used by tests to plug in
            :class:`httpx.MockTransport`.

    Example::

        with FlowSession(settings) as session:
            response = session.get(settings.start_url, step="Initial GET")
    """

    def __init__(
        self,
        settings: WalkerSettings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> FlowSession:
        self._client = httpx.Client(
            timeout=self._settings.timeout,
            verify=self._settings.verify_ssl,
            follow_redirects=True,
            cookies=httpx.Cookies(),
            headers={"User-Agent": f"flowwalker/{__version__}"},
            event_hooks={"response": [_trace_redirect]},
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    @property
    def cookies(self) -> httpx.Cookies:
        """The cookie jar carried across every request of the run."""
        assert self._client is not None, "Session not open -- use as context manager"
        return self._client.cookies

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def get(self, url: str | httpx.URL, step: str) -> httpx.Response:
        """Send a GET and follow its redirect chain.

        Args:
            url: Absolute URL to fetch.
            step: Label used in the error message if the request fails.

        Returns:
            The response the redirect chain ended at, body fully read.

        Raises:
            TransportError: On network errors, timeouts or redirect loops.
        """
        return self._send("GET", url, step)

    def post_form(
        self,
        url: str | httpx.URL,
        fields: dict[str, str] | httpx.QueryParams,
        step: str,
    ) -> httpx.Response:
        """Send an ``application/x-www-form-urlencoded`` POST and follow its redirects.

        ``fields`` may be a plain mapping or an :class:`httpx.QueryParams`
        multi-map; repeated keys in the latter are sent as repeated fields.

        Raises:
            TransportError: On network errors, timeouts or redirect loops.
        """
        form = httpx.QueryParams(fields)
        return self._send(
            "POST",
            url,
            step,
            data={key: form.get_list(key) for key in form.keys()},
        )

    def _send(
        self,
        method: str,
        url: str | httpx.URL,
        step: str,
        data: Optional[dict[str, list[str]]] = None,
    ) -> httpx.Response:
        assert self._client is not None, "Session not open -- use as context manager"
        debug(f"{step}: {method} {url}")
        try:
            return self._client.request(method, url, data=data)
        except httpx.RequestError as exc:
            raise TransportError(step, exc) from exc


def _trace_redirect(response: httpx.Response) -> None:
    """Response event hook: report each redirect hop at debug level."""
    if response.is_redirect:
        location = response.headers.get("location", "")
        debug(f"  {response.status_code} {response.request.url} -> {location}")
