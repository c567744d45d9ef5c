"""Maintenance actions, probe registry and step bundles."""
