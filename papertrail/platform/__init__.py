"""Filesystem helpers used by the release services."""
