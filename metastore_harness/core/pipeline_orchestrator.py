#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from metastore_harness.config.harness_config import HarnessConfig, CLEAN_DIRECTIVE
from metastore_harness.config.versions import VersionResolver
from metastore_harness.core.artifact_fetcher import ArtifactFetcher
from metastore_harness.core.config_materializer import write_hive_site
from metastore_harness.core.process_supervisor import ProcessSupervisor, PortReleaseResult
from metastore_harness.monitoring.health_monitor import MetastoreHealthMonitor, HealthCheck
from metastore_harness.spark.iceberg_runtime import IcebergSparkIntegration
from metastore_harness.utils.commands import build_service_env


@dataclass
class ProvisioningReport:
    hive_home: Path
    hadoop_home: Path
    hive_site: Path
    port_release: PortReleaseResult
    schema_initialized: bool
    pid: int
    spark_home: Optional[Path] = None
    iceberg_jar: Optional[Path] = None
    spark_conf_updated: bool = False
    readiness: Optional[HealthCheck] = None


class ProvisioningPipeline:
    """Resolve, fetch, configure, then (re)start the metastore.

    Steps run once, top to bottom. Any HarnessException aborts the run.
    """

    def __init__(self, config: HarnessConfig,
                 fetcher: Optional[ArtifactFetcher] = None,
                 supervisor: Optional[ProcessSupervisor] = None,
                 health_monitor: Optional[MetastoreHealthMonitor] = None):
        self.config = config
        self.fetcher = fetcher or ArtifactFetcher()
        self.supervisor = supervisor or ProcessSupervisor()
        self.health_monitor = health_monitor or MetastoreHealthMonitor(config.metastore_host, config.metastore_port)

    def run(self, directive: Optional[str] = None) -> ProvisioningReport:
        config = self.config
        logger.info(f"🚀 Provisioning hive metastore ({config.variant} variant)")

        # Resolution and the Spark precondition come first so a bad setup never downloads anything.
        versions = VersionResolver(config).resolve()
        spark = None
        if versions.spark is not None:
            spark = IcebergSparkIntegration(versions.spark, versions.iceberg_jar, self.fetcher)
            spark.locate_spark_home()

        hive_home = self.fetcher.ensure_distribution(versions.hive)
        hadoop_home = self.fetcher.ensure_distribution(versions.hadoop)

        hive_site = write_hive_site(hive_home / "conf", config.connection_url)

        iceberg_jar = None
        spark_conf_updated = False
        if spark is not None:
            iceberg_jar = spark.install_runtime_jar()
            spark_conf_updated = spark.configure(config.metastore_uri, config.spark_warehouse)

        self.supervisor.env = build_service_env(hive_home, hadoop_home)
        port_release = self.supervisor.release_port(config.metastore_port)

        schema_initialized = False
        if directive == CLEAN_DIRECTIVE:
            self.supervisor.reset_state(config.reset_dir)
            self.supervisor.initialize_schema(hive_home)
            schema_initialized = True
        else:
            logger.info("Using existing metastore database...")

        process = self.supervisor.launch_metastore(hive_home, config.log_file)

        readiness = None
        if config.wait_ready:
            readiness = self.health_monitor.wait_until_ready(config.ready_timeout, config.ready_interval)

        logger.info("🎉 Metastore provisioning complete")
        return ProvisioningReport(
            hive_home=hive_home,
            hadoop_home=hadoop_home,
            hive_site=hive_site,
            port_release=port_release,
            schema_initialized=schema_initialized,
            pid=process.pid,
            spark_home=versions.spark.home if versions.spark else None,
            iceberg_jar=iceberg_jar,
            spark_conf_updated=spark_conf_updated,
            readiness=readiness,
        )
