"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific outcome category and is referenced by the
corresponding :class:`~flowwalker.exceptions.FlowWalkerError` subclass.
CI pipelines and test harnesses can inspect the exit code to tell a
rejected login apart from an unreachable identity provider without parsing
stderr.

Example::

    $ flowwalker alice@example.com s3cret http://localhost:8082/login
    $ echo $?
    3   # EXIT_VERIFICATION_FAILURE -- flow ended without the success marker
"""

EXIT_SUCCESS = 0
"""The flow completed and the success marker was found."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid or missing arguments."""

EXIT_VERIFICATION_FAILURE = 3
"""The flow reached its final page but the success marker was absent."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
