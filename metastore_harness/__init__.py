"""Idempotent local Hive metastore provisioning for regression tests."""

__version__ = '1.0.0'
