"""HTTP client module for flowwalker.

Provides :class:`FlowSession`, a blocking session backed by
:class:`httpx.Client` that follows every redirect, keeps one cookie jar
for the whole run, and maps transport failures to
:class:`~flowwalker.exceptions.TransportError`.

Example::

    from flowwalker.client import FlowSession

    with FlowSession(settings) as session:
        resp = session.get(settings.start_url, step="Initial GET")
"""

from flowwalker.client.session import FlowSession

__all__ = ["FlowSession"]
