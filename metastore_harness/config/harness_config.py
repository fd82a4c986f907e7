from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional

from metastore_harness.exceptions.base_exceptions import ConfigurationError

VARIANT_METASTORE = "metastore"
VARIANT_SPARK = "spark"
VARIANTS = (VARIANT_METASTORE, VARIANT_SPARK)

CLEAN_DIRECTIVE = "clean_metastore"


def _version(value) -> Optional[str]:
    # YAML reads 3.4 as a float
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class HarnessConfig:
    """Everything a provisioning run needs, resolved once at startup."""
    variant: str = VARIANT_METASTORE
    install_root: Path = field(default_factory=Path.home)
    data_dir: Path = Path("/tmp/data")
    log_file: Path = Path("/tmp/metastore.log")
    metastore_host: str = "localhost"
    metastore_port: int = 9083
    hive_version: Optional[str] = None
    hadoop_version: Optional[str] = None
    spark_version: Optional[str] = None
    iceberg_version: Optional[str] = None
    scala_version: Optional[str] = None
    url_templates: Dict[str, str] = field(default_factory=dict)
    wait_ready: bool = False
    ready_timeout: float = 60.0
    ready_interval: float = 0.5

    def __post_init__(self):
        if self.variant not in VARIANTS:
            raise ConfigurationError(f"Unknown variant: {self.variant}", "UNKNOWN_VARIANT")
        self.install_root = Path(self.install_root).expanduser()
        self.data_dir = Path(self.data_dir)
        self.log_file = Path(self.log_file)

    @classmethod
    def from_dict(cls, config: Dict[str, Any], variant: str = VARIANT_METASTORE,
                  wait_ready: Optional[bool] = None, ready_timeout: Optional[float] = None):
        versions = config.get('versions') or {}
        paths = config.get('paths') or {}
        metastore = config.get('metastore') or {}
        kwargs = {
            'variant': variant,
            'hive_version': _version(versions.get('hive')),
            'hadoop_version': _version(versions.get('hadoop')),
            'spark_version': _version(versions.get('spark')),
            'iceberg_version': _version(versions.get('iceberg')),
            'scala_version': _version(versions.get('scala')),
            'url_templates': dict(config.get('urls') or {}),
            'wait_ready': metastore.get('wait_ready', False) if wait_ready is None else wait_ready,
            'ready_timeout': float(metastore.get('ready_timeout', 60.0) if ready_timeout is None else ready_timeout),
            'ready_interval': float(metastore.get('ready_interval', 0.5)),
        }
        if paths.get('install_root'):
            kwargs['install_root'] = paths['install_root']
        if paths.get('data_dir'):
            kwargs['data_dir'] = paths['data_dir']
        if paths.get('log_file'):
            kwargs['log_file'] = paths['log_file']
        if metastore.get('host'):
            kwargs['metastore_host'] = metastore['host']
        if metastore.get('port'):
            kwargs['metastore_port'] = int(metastore['port'])
        return cls(**kwargs)

    @property
    def hms_dir(self) -> Path:
        return self.data_dir / "hms"

    @property
    def metastore_db(self) -> Path:
        return self.hms_dir / "metastore_db"

    @property
    def spark_warehouse(self) -> Path:
        return self.data_dir / "spark-warehouse"

    @property
    def reset_dir(self) -> Path:
        # The spark variant keeps the warehouse and only wipes the metastore db.
        if self.variant == VARIANT_SPARK:
            return self.hms_dir
        return self.data_dir

    @property
    def connection_url(self) -> str:
        return f"jdbc:derby:;databaseName={self.metastore_db};;create=true"

    @property
    def metastore_uri(self) -> str:
        return f"thrift://{self.metastore_host}:{self.metastore_port}"
