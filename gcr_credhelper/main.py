"""CLI entry point for gcr-credhelper."""

import json
import sys
from pathlib import Path

import click
import structlog

from gcr_credhelper import __version__
from gcr_credhelper.cli.config import config_group
from gcr_credhelper.config.settings import HelperSettings, default_config_path, load_settings
from gcr_credhelper.credentials import (
    CredentialError,
    CredentialNotFoundError,
    GCRCredentialHelper,
    KeyringCredStore,
    build_strategies,
)
from gcr_credhelper.exceptions import ConfigurationError, CredHelperError
from gcr_credhelper.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


def _print_error(e: CredHelperError) -> None:
    click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
    suggestion = getattr(e, "suggestion", None)
    if suggestion:
        click.echo(click.style(f"Suggestion: {suggestion}", fg="yellow"), err=True)


def _print_check(name: str, status: bool, detail: str | None = None) -> None:
    if status:
        click.echo(f"  {click.style('[OK]', fg='green')} {name}")
    else:
        click.echo(f"  {click.style('[FAIL]', fg='red')} {name}")

    if detail:
        click.echo(f"       {detail}")


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "*" * (len(value) - 8) + value[-4:]
    return "*" * len(value)


@click.group()
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to configuration file (default: ~/.config/gcr-credhelper/config.yaml)",
)
@click.option("--log-level", default="WARNING", help="Logging level")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str) -> None:
    """gcr-credhelper: registry credentials with GCR access token resolution."""
    configure_logging(log_level)

    path = Path(config_path) if config_path else default_config_path()
    try:
        settings = load_settings(path)
    except ConfigurationError as e:
        _print_error(e)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    log.debug("config_loaded", path=str(path), token_sources=list(settings.token_sources))
    ctx.obj = {"settings": settings, "config_path": str(path)}


def _helper(ctx: click.Context) -> GCRCredentialHelper:
    settings: HelperSettings = ctx.obj["settings"]
    return GCRCredentialHelper.from_settings(settings)


@cli.command()
@click.argument("server_url")
@click.option("--show-value", is_flag=True, help="Show full secret (default: masked)")
@click.pass_context
def token(ctx: click.Context, server_url: str, show_value: bool) -> None:
    """Resolve the username and secret for SERVER_URL.

    For GCR registries the secret is an access token from the configured
    token sources; other registries are looked up in the credential store.

    Examples:

        gcr-credhelper token gcr.io

        gcr-credhelper token https://quay.io --show-value
    """
    helper = _helper(ctx)
    try:
        username, secret = helper.get(server_url)
    except CredentialNotFoundError as e:
        click.echo(click.style(f"Error: no credentials stored for {server_url}", fg="red"), err=True)
        log.debug("credentials_not_found", server_url=server_url, error=str(e))
        sys.exit(1)
    except CredHelperError as e:
        _print_error(e)
        log.debug("token_error", server_url=server_url, exc_info=True)
        sys.exit(1)

    click.echo(f"Username: {username}")
    click.echo(f"Secret: {secret if show_value else _mask(secret)}")
    if not show_value:
        click.echo(click.style("Use --show-value to display the full secret", fg="yellow"))


@cli.command(name="list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List registries with stored or GCR credentials as JSON."""
    helper = _helper(ctx)
    try:
        entries = helper.list()
    except CredHelperError as e:
        _print_error(e)
        log.debug("list_error", exc_info=True)
        sys.exit(1)

    click.echo(json.dumps(entries, indent=2, sort_keys=True))


@cli.command()
@click.pass_context
def sources(ctx: click.Context) -> None:
    """Try every configured token source and report which ones work.

    Unlike token resolution, which stops at the first source that
    succeeds, every source is attempted so that all failures are shown.
    """
    settings: HelperSettings = ctx.obj["settings"]
    store = KeyringCredStore(service=settings.keyring_service)
    strategies = build_strategies(store, scopes=settings.oauth_scopes, gcloud_timeout=settings.gcloud_timeout)

    click.echo(click.style("Testing token sources...", bold=True))
    working = 0
    for source in settings.token_sources:
        try:
            strategies[source]()
        except Exception as e:
            _print_check(source, False, getattr(e, "message", str(e)))
            continue
        working += 1
        _print_check(source, True)

    click.echo()
    if working == 0:
        click.echo(click.style("No token source produced an access token", fg="red", bold=True))
        sys.exit(1)
    click.echo(click.style(f"{working} of {len(settings.token_sources)} token sources working", fg="green"))


@cli.command()
@click.confirmation_option(prompt="Are you sure you want to delete all stored credentials?")
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete all stored third-party credentials and GCR OAuth material."""
    settings: HelperSettings = ctx.obj["settings"]
    try:
        KeyringCredStore(service=settings.keyring_service).clear()
    except CredentialError as e:
        _print_error(e)
        sys.exit(1)
    click.echo(click.style("Credentials cleared", fg="green"))


@cli.command()
def version() -> None:
    """Print the gcr-credhelper version."""
    click.echo(f"gcr-credhelper {__version__}")


cli.add_command(config_group)


if __name__ == "__main__":
    cli()
