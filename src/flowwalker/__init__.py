"""flowwalker -- drive an OpenID Connect login flow from the command line.

flowwalker plays the browser in an authorization-code flow so identity
provider and relying-party deployments can be smoke-tested from CI. It
requests a start URL, follows the provider's redirects, submits the login
and consent forms it lands on, and checks that the relying application's
final page reports a successful login.

Typical use::

    flowwalker alice@example.com s3cret http://localhost:8082/login
    echo $?   # 0 on success

Modules:
    app: Typer application and CLI entry point.
    walker: The step-by-step flow walker.
    flow: URL classification and consent form construction.
    client: Redirect-following, cookie-keeping HTTP session.
    models: Pydantic models shared across the package.
    config: Settings precedence and XDG paths.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
