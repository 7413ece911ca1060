"""Pydantic models shared across flowwalker modules.

**Input models** -- supplied once per run and never mutated:
    :class:`Credentials` and :class:`WalkerSettings`.

**Flow models** -- produced by :func:`~flowwalker.walker.walk` and consumed
by the CLI report:
    :class:`FlowState`, :class:`FlowStep`, and :class:`FlowOutcome`.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, SecretStr


DEFAULT_START_URL = "http://localhost:8082/login"
DEFAULT_TIMEOUT = 10.0
SUCCESS_MARKER = "Login Successful"
PREVIEW_CHARS = 500


class FlowState(str, enum.Enum):
    """Step of the login flow, derived from the current URL path.

    Never stored between requests; see :func:`flowwalker.flow.classify`.
    """

    AWAITING_LOGIN = "awaiting_login"
    AWAITING_CONSENT = "awaiting_consent"
    TERMINAL = "terminal"


class Credentials(BaseModel):
    """Email/password pair posted to the login page.

    The password is held as a :class:`~pydantic.SecretStr` so it is masked
    in reprs and excluded from JSON reports.
    """

    model_config = ConfigDict(frozen=True)

    email: str
    password: SecretStr

    def form_fields(self) -> dict[str, str]:
        """Return the login form body: exactly ``email`` and ``password``."""
        return {
            "email": self.email,
            "password": self.password.get_secret_value(),
        }


class WalkerSettings(BaseModel):
    """Effective settings for one run, resolved by :func:`~flowwalker.config.resolve_settings`."""

    model_config = ConfigDict(frozen=True)

    start_url: str = Field(
        default=DEFAULT_START_URL, description="URL the flow starts from"
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, description="Per-request timeout in seconds"
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    success_marker: str = Field(
        default=SUCCESS_MARKER,
        description="Substring of the final page body that marks a successful login",
    )
    preview_chars: int = Field(
        default=PREVIEW_CHARS,
        description="Maximum number of body characters shown on failure",
    )


class FlowStep(BaseModel):
    """One request issued by the walker, after its redirect chain was followed."""

    label: str
    method: str
    url: str = Field(description="URL the request was sent to")
    final_url: str = Field(description="URL the redirect chain ended at")
    status_code: int
    redirects: int = Field(default=0, description="Number of redirect hops followed")


class FlowOutcome(BaseModel):
    """Binary result of a run.

    ``preview`` is only populated for failed runs and never exceeds
    :attr:`WalkerSettings.preview_chars` characters.
    """

    success: bool
    final_url: str
    preview: str = ""
    steps: list[FlowStep] = Field(default_factory=list)

    @property
    def post_count(self) -> int:
        """Number of form submissions made during the run."""
        return sum(1 for step in self.steps if step.method == "POST")
