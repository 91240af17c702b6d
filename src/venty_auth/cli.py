"""Main CLI entry point for venty-auth."""

import click

from venty_auth import __version__
from venty_auth.config import get_settings
from venty_auth.errors import StoreCorruptedError
from venty_auth.models.user import User
from venty_auth.output import OutputFormatter
from venty_auth.services.user_store import UserStore


@click.group()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.version_option(version=__version__, prog_name="venty-auth")
@click.pass_context
def cli(ctx: click.Context, output_json: bool) -> None:
    """venty-auth - sign-in and session service administration.

    Run the service, inspect the user store and check configuration.
    Use --json flag for machine-readable output.
    """
    ctx.ensure_object(dict)
    ctx.obj["formatter"] = OutputFormatter(json_mode=output_json)


def _public_user(user: User) -> dict:
    data = user.to_dict()
    data.pop("passwordHash", None)
    data["hasPassword"] = bool(user.password_hash)
    return data


def _load_users(formatter: OutputFormatter) -> list[User]:
    settings = get_settings()
    try:
        return UserStore(settings.users_path).load()
    except StoreCorruptedError as e:
        formatter.error(
            code=e.code,
            message=e.message,
            suggestion=f"Inspect or restore {settings.users_path}",
        )
        raise SystemExit(1)


@cli.command("serve")
@click.option("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
@click.option("--port", type=int, default=None, help="Port (default: AUTH_SERVICE_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int | None, reload: bool) -> None:
    """Run the auth service with uvicorn.

    Example:
        venty-auth serve
        venty-auth serve --port 9100 --reload
    """
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "venty_auth.main:app",
        host=host,
        port=port or settings.auth_service_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.group()
def users() -> None:
    """Inspect the user store."""


@users.command("list")
@click.option("--provider", help="Only users linked to this provider (google, apple, facebook, email)")
@click.pass_context
def users_list(ctx: click.Context, provider: str | None) -> None:
    """List all users.

    Example:
        venty-auth users list
        venty-auth --json users list --provider google
    """
    formatter: OutputFormatter = ctx.obj["formatter"]
    all_users = _load_users(formatter)
    if provider:
        all_users = [u for u in all_users if any(p.provider == provider for p in u.providers)]

    rows = [
        {
            "userId": u.user_id,
            "email": u.email,
            "name": u.name,
            "providers": ", ".join(p.provider for p in u.providers),
            "createdAt": u.created_at,
        }
        for u in all_users
    ]
    formatter.table(
        rows,
        columns=[
            ("userId", "ID"),
            ("email", "Email"),
            ("name", "Name"),
            ("providers", "Providers"),
            ("createdAt", "Created"),
        ],
        title="Users",
        message=f"Found {len(rows)} user(s)",
    )


@users.command("show")
@click.argument("user_id")
@click.pass_context
def users_show(ctx: click.Context, user_id: str) -> None:
    """Show one user. The password hash is never printed."""
    formatter: OutputFormatter = ctx.obj["formatter"]
    user = next((u for u in _load_users(formatter) if u.user_id == user_id), None)
    if user is None:
        formatter.error(
            code="user_not_found",
            message=f"No user with id '{user_id}'",
            suggestion="Run 'venty-auth users list' to see existing ids",
        )
        raise SystemExit(1)

    formatter.success(_public_user(user), message=f"User {user_id}")


@cli.group()
def config() -> None:
    """Inspect service configuration."""


@config.command("check")
@click.pass_context
def config_check(ctx: click.Context) -> None:
    """Report which sign-in providers are configured.

    Exits non-zero when JWT_SECRET is missing, since no session can be
    issued without it.
    """
    formatter: OutputFormatter = ctx.obj["formatter"]
    settings = get_settings()

    report = {
        "jwt": "ok" if settings.jwt_secret else "error",
        "users_file": str(settings.users_path),
        "google": "ok" if settings.google_enabled else "disabled",
        "apple": "ok" if settings.apple_client_id else "no_audience_check",
        "facebook": "ok" if settings.facebook_enabled else "disabled",
    }

    if not settings.jwt_secret:
        formatter.error(
            code="jwt_secret_missing",
            message="JWT_SECRET is not set; sessions cannot be issued",
            suggestion="Set JWT_SECRET in the environment or .env file",
        )
        raise SystemExit(1)

    formatter.success(report, message="Configuration checked")


if __name__ == "__main__":
    cli()
