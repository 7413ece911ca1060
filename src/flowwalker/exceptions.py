"""Exception hierarchy for flowwalker.

All exceptions inherit from :class:`FlowWalkerError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`flowwalker.exit_codes`. The top-level handler in
:func:`flowwalker.app.main` catches ``FlowWalkerError`` and exits with the
appropriate code, while unexpected exceptions produce a crash log and exit
with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    FlowWalkerError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- VerificationError   (exit 3)
    +-- TransportError      (exit 6)
    +-- ConfigError         (exit 1)
"""

from flowwalker.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_VERIFICATION_FAILURE,
)


class FlowWalkerError(Exception):
    """Base exception for all flowwalker errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`flowwalker.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(FlowWalkerError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class VerificationError(FlowWalkerError):
    """Raised at the process boundary when the final page lacks the success marker.

    The walker itself never raises this; a missing marker is an ordinary
    :class:`~flowwalker.models.FlowOutcome` with ``success=False``.
    """

    exit_code = EXIT_VERIFICATION_FAILURE


class TransportError(FlowWalkerError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Args:
        step: Label of the flow step whose request failed, e.g. ``"Login POST"``.
        cause: The underlying :mod:`httpx` exception.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"{step} failed: {cause}")
        self.step = step
        self.cause = cause


class ConfigError(FlowWalkerError):
    """Raised for configuration problems (malformed environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
