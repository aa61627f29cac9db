"""TechLearn Auth CLI application using Typer.

Command-line utilities for operating the auth gateway: secret generation,
schema setup, refresh-token housekeeping and running the server.
"""

import asyncio
import secrets

import typer
from rich.console import Console

from techlearn_auth.persistence.sqlalchemy import RefreshTokenRepositorySQLAlchemy
from techlearn_config.settings import get_settings
from techlearn_gateway.presentation.api.dependencies import (
    create_tables,
    dispose_engine,
    get_engine,
    get_session_maker,
)

app = typer.Typer(
    name="techlearn-auth",
    help="TechLearn Auth - authentication gateway CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Database schema utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)

tokens_app = typer.Typer(
    name="tokens",
    help="Refresh token housekeeping",
    no_args_is_help=True,
)
app.add_typer(tokens_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate the two signing secrets.

    - ACCESS_TOKEN_SECRET: signs short-lived access tokens
    - REFRESH_TOKEN_SECRET: signs refresh tokens (must differ from the above)

    Copy the output to your .env file.
    """
    console.print("\n[bold green]TechLearn Auth Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 bytes each for strong HS256
    access_secret = secrets.token_urlsafe(64)
    refresh_secret = secrets.token_urlsafe(64)
    while refresh_secret == access_secret:
        refresh_secret = secrets.token_urlsafe(64)

    # soft_wrap keeps each secret on one line whatever the terminal width
    console.print(f"[cyan]ACCESS_TOKEN_SECRET[/cyan]={access_secret}", soft_wrap=True)
    console.print(f"[cyan]REFRESH_TOKEN_SECRET[/cyan]={refresh_secret}", soft_wrap=True)

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Resource servers need ACCESS_TOKEN_SECRET only. "
        "REFRESH_TOKEN_SECRET stays with the gateway.[/dim]\n"
    )


@db_app.command("init")
def init_db() -> None:
    """Create missing tables. Existing tables and data are left untouched."""
    settings = get_settings()

    async def _run() -> None:
        try:
            await create_tables(get_engine(settings.database_url))
        finally:
            await dispose_engine(settings.database_url)

    asyncio.run(_run())
    console.print("[green]Database schema is up to date.[/green]")


@tokens_app.command("purge-expired")
def purge_expired_tokens() -> None:
    """Delete stored refresh tokens whose expiry has passed.

    Expired tokens are already refused at refresh time; this only reclaims
    the rows.
    """
    settings = get_settings()

    async def _run() -> int:
        try:
            async with get_session_maker(settings.database_url)() as session:
                removed = await RefreshTokenRepositorySQLAlchemy(session).purge_expired()
                await session.commit()
                return removed
        finally:
            await dispose_engine(settings.database_url)

    removed = asyncio.run(_run())
    console.print(f"[green]Removed {removed} expired refresh token(s).[/green]")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the gateway API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "techlearn_gateway.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_config=None,  # Logging is configured by the app factory
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
