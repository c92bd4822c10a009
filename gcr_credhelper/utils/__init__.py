"""Shared utilities for gcr-credhelper."""
