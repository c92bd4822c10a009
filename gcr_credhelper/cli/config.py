"""CLI commands for inspecting and changing helper configuration.

This module provides the ``gcr-credhelper config`` command group.

Commands:
    - show: Print the effective configuration as YAML
    - set-token-sources: Persist the ordered list of token sources

Example:
    Prefer Application Default Credentials, then fall back to gcloud::

        $ gcr-credhelper config set-token-sources env gcloud_sdk
        $ gcr-credhelper config show
"""

import sys
from pathlib import Path

import click
import yaml

from gcr_credhelper.config.settings import HelperSettings
from gcr_credhelper.enums import TokenSource
from gcr_credhelper.exceptions import ConfigurationError


@click.group(name="config")
def config_group():
    """Inspect or change gcr-credhelper configuration.

    Token sources are tried in the configured order when a GCR access
    token is requested:

    - env: Application Default Credentials
    - gcloud_sdk: 'gcloud auth print-access-token'
    - store: OAuth credentials kept in the credential store
    """
    pass


@config_group.command(name="show")
@click.pass_context
def show_config(ctx: click.Context):
    """Print the effective configuration."""
    settings: HelperSettings = ctx.obj["settings"]
    data = {
        "token_sources": list(settings.token_sources),
        "registries": sorted(settings.registries),
        "oauth_scopes": list(settings.oauth_scopes),
        "gcloud_timeout": settings.gcloud_timeout,
        "keyring_service": settings.keyring_service,
    }
    click.echo(f"# {ctx.obj['config_path']}")
    click.echo(yaml.safe_dump(data, sort_keys=False), nl=False)


@config_group.command(name="set-token-sources")
@click.argument("sources", nargs=-1, required=True, type=click.Choice(list(TokenSource.values())))
@click.pass_context
def set_token_sources(ctx: click.Context, sources: tuple[str, ...]):
    """Set the token sources to try, in priority order.

    Examples:

        gcr-credhelper config set-token-sources env gcloud_sdk

        gcr-credhelper config set-token-sources store
    """
    settings: HelperSettings = ctx.obj["settings"]
    config_path = Path(ctx.obj["config_path"])

    try:
        updated = HelperSettings(**{**settings.model_dump(), "token_sources": sources})
        updated.save_yaml(config_path)
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    ctx.obj["settings"] = updated
    click.echo(f"Token sources: {', '.join(updated.token_sources)}")
    click.echo(click.style(f"Configuration written to {config_path}", fg="green"))
