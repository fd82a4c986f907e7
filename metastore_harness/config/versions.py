"""Version resolution and artifact naming conventions.

Every path produced here is a pure function of the component name, the
resolved version and the install root.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from metastore_harness.config.harness_config import HarnessConfig, VARIANT_SPARK
from metastore_harness.exceptions.base_exceptions import ConfigurationError
from metastore_harness.models.artifacts import DistributionDescriptor, RuntimeJar, SparkDistribution

DEFAULT_HIVE_VERSION = "hive-3.1.3"
DEFAULT_HADOOP_VERSION = "3.3.6"
DEFAULT_ICEBERG_VERSION = "1.9.0"
DEFAULT_SCALA_VERSION = "2.12"

DEFAULT_URL_TEMPLATES = {
    'hive': 'https://archive.apache.org/dist/hive/{version}/{distribution}.tar.gz',
    # Unlike Spark and Hive, Hadoop distros live at downloads.apache.org
    'hadoop': 'https://downloads.apache.org/hadoop/common/{distribution}/{distribution}.tar.gz',
    'iceberg': 'https://repo1.maven.org/maven2/org/apache/iceberg/{artifact}/{version}/{artifact}-{version}.jar',
}


def major_minor(version: str) -> str:
    """``"3.5.6"`` -> ``"3.5"``, by splitting on dots."""
    parts = version.split(".")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ConfigurationError(f"Cannot derive major.minor from version '{version}'", "INVALID_VERSION")
    return f"{parts[0]}.{parts[1]}"


def normalize_hive_version(version: str) -> str:
    return version if version.startswith("hive-") else f"hive-{version}"


def hive_distribution(install_root: Path, version: str, url_template: str = None) -> DistributionDescriptor:
    version = normalize_hive_version(version)
    distribution = f"apache-{version}-bin"
    url_template = url_template or DEFAULT_URL_TEMPLATES['hive']
    return DistributionDescriptor(
        name="hive",
        version=version,
        distribution=distribution,
        download_url=url_template.format(version=version, distribution=distribution),
        archive_path=install_root / f"{distribution}.tgz",
        install_dir=install_root / distribution,
    )


def hadoop_distribution(install_root: Path, version: str, url_template: str = None) -> DistributionDescriptor:
    distribution = f"hadoop-{version}"
    url_template = url_template or DEFAULT_URL_TEMPLATES['hadoop']
    return DistributionDescriptor(
        name="hadoop",
        version=version,
        distribution=distribution,
        download_url=url_template.format(version=version, distribution=distribution),
        archive_path=install_root / f"{distribution}.tar.gz",
        install_dir=install_root / distribution,
    )


def spark_distribution(install_root: Path, version: str) -> SparkDistribution:
    return SparkDistribution(
        version=version,
        major_minor=major_minor(version),
        home=install_root / f"spark-{version}-bin-hadoop3",
    )


def iceberg_runtime_jar(spark: SparkDistribution, iceberg_version: str, scala_version: str,
                        url_template: str = None) -> RuntimeJar:
    artifact = f"iceberg-spark-runtime-{spark.major_minor}_{scala_version}"
    url_template = url_template or DEFAULT_URL_TEMPLATES['iceberg']
    return RuntimeJar(
        artifact=artifact,
        version=iceberg_version,
        download_url=url_template.format(artifact=artifact, version=iceberg_version),
        path=spark.jars_dir / f"{artifact}-{iceberg_version}.jar",
    )


@dataclass
class ResolvedVersions:
    hive: DistributionDescriptor
    hadoop: DistributionDescriptor
    spark: Optional[SparkDistribution] = None
    iceberg_jar: Optional[RuntimeJar] = None


class VersionResolver:
    """Turns raw overrides into descriptors, substituting defaults."""

    def __init__(self, config: HarnessConfig):
        self.config = config

    def _template(self, name: str) -> str:
        return self.config.url_templates.get(name) or DEFAULT_URL_TEMPLATES[name]

    def resolve(self) -> ResolvedVersions:
        config = self.config
        root = config.install_root

        hive = hive_distribution(root, config.hive_version or DEFAULT_HIVE_VERSION, self._template('hive'))
        hadoop = hadoop_distribution(root, config.hadoop_version or DEFAULT_HADOOP_VERSION, self._template('hadoop'))
        resolved = ResolvedVersions(hive=hive, hadoop=hadoop)

        if config.variant == VARIANT_SPARK:
            if not config.spark_version:
                raise ConfigurationError(
                    "SPARK_VERSION is not set. Please set it to the version of the local Spark distribution.",
                    "SPARK_VERSION_MISSING",
                )
            resolved.spark = spark_distribution(root, config.spark_version)
            resolved.iceberg_jar = iceberg_runtime_jar(
                resolved.spark,
                config.iceberg_version or DEFAULT_ICEBERG_VERSION,
                config.scala_version or DEFAULT_SCALA_VERSION,
                self._template('iceberg'),
            )

        logger.info(f"Resolved {hive.distribution}, {hadoop.distribution}"
                    + (f", spark {resolved.spark.version}" if resolved.spark else ""))
        return resolved
