"""CLI command groups for gcr-credhelper.

The main entry point ``gcr-credhelper`` lives in :mod:`gcr_credhelper.main`;
this package holds the command groups it registers:

    config (gcr_credhelper.cli.config):
        Show the effective configuration and persist the token source order.
"""
