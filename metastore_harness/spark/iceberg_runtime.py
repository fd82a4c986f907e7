#!/usr/bin/env python3

from pathlib import Path

from loguru import logger

from metastore_harness.core.artifact_fetcher import ArtifactFetcher
from metastore_harness.core.config_materializer import apply_spark_integration
from metastore_harness.exceptions.base_exceptions import ConfigurationError
from metastore_harness.models.artifacts import RuntimeJar, SparkDistribution


class IcebergSparkIntegration:
    """Wires a local Spark distribution to the metastore via Iceberg"""

    def __init__(self, spark: SparkDistribution, jar: RuntimeJar, fetcher: ArtifactFetcher):
        self.spark = spark
        self.jar = jar
        self.fetcher = fetcher

    def locate_spark_home(self) -> Path:
        """Spark is never downloaded here; it must already be installed."""
        if not self.spark.home.is_dir():
            raise ConfigurationError(
                f"Spark distribution not found at {self.spark.home}. "
                "Please use the Spark setup script to download it.",
                "SPARK_HOME_MISSING",
            )
        logger.info(f"Spark {self.spark.version} at {self.spark.home}")
        return self.spark.home

    def install_runtime_jar(self) -> Path:
        return self.fetcher.ensure_jar(self.jar)

    def configure(self, metastore_uri: str, warehouse_dir: Path) -> bool:
        return apply_spark_integration(self.spark.conf_file, metastore_uri, warehouse_dir)
