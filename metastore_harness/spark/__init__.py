#!/usr/bin/env python3
"""
Spark integration

Installs the Iceberg Spark runtime into an existing Spark distribution and
points Spark's default catalog at the local metastore.
"""

from .iceberg_runtime import IcebergSparkIntegration

__all__ = [
    'IcebergSparkIntegration'
]
