"""Application configuration management."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from loguru import logger
from dotenv import load_dotenv

from metastore_harness.exceptions.base_exceptions import ConfigurationError

load_dotenv()


def _env(name: str) -> Optional[str]:
    # An empty variable counts as unset.
    value = os.getenv(name)
    return value if value else None


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load harness configuration from defaults, a YAML file and the environment.

    Version overrides are kept raw (``None`` when unset); defaults for them
    are applied by the version resolver.

    Args:
        config_path: Path to configuration file. If None, uses default locations.

    Returns:
        Configuration dictionary
    """
    config = {
        'versions': {
            'hive': None,
            'hadoop': None,
            'spark': None,
            'iceberg': None,
            'scala': None,
        },
        'paths': {
            'install_root': str(Path.home()),
            'data_dir': '/tmp/data',
            'log_file': '/tmp/metastore.log',
        },
        'metastore': {
            'host': 'localhost',
            'port': 9083,
            'wait_ready': False,
            'ready_timeout': 60.0,
            'ready_interval': 0.5,
        },
        # Mirror overrides; unset entries fall back to the upstream templates.
        'urls': {},
        'logging': {
            'level': 'INFO',
            'file_path': 'logs/metastore_harness.log',
        },
    }

    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}", "CONFIG_NOT_FOUND")
    else:
        possible_paths = [
            Path('config/app_config.yaml'),
            Path('config.yaml'),
        ]
        config_file = None
        for path in possible_paths:
            if path.exists():
                config_file = path
                break

    if config_file:
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config from {config_file}: {e}", "CONFIG_INVALID")
        if file_config:
            for section, values in file_config.items():
                # A section whose keys are all commented out parses as None.
                if values is None:
                    continue
                if isinstance(config.get(section), dict):
                    if not isinstance(values, dict):
                        raise ConfigurationError(
                            f"Section '{section}' in {config_file} must be a mapping", "CONFIG_INVALID"
                        )
                    config[section].update(values)
                else:
                    config[section] = values
            logger.info(f"Configuration loaded from {config_file}")

    env_overrides = {
        'HIVE_VERSION': ('versions', 'hive'),
        'HADOOP_VERSION': ('versions', 'hadoop'),
        'SPARK_VERSION': ('versions', 'spark'),
        'ICEBERG_VERSION': ('versions', 'iceberg'),
        'SCALA_VERSION': ('versions', 'scala'),
        'HMS_INSTALL_ROOT': ('paths', 'install_root'),
        'HMS_DATA_DIR': ('paths', 'data_dir'),
        'HMS_LOG_FILE': ('paths', 'log_file'),
        'HMS_HOST': ('metastore', 'host'),
        'HMS_PORT': ('metastore', 'port'),
        'LOG_LEVEL': ('logging', 'level'),
    }

    for env_var, (section, key) in env_overrides.items():
        value = _env(env_var)
        if value:
            if key == 'port':
                try:
                    value = int(value)
                except ValueError:
                    raise ConfigurationError(f"Invalid port value in {env_var}: {value}", "INVALID_PORT")
            config[section][key] = value
            logger.debug(f"Configuration override from {env_var}: {section}.{key} = {value}")

    # LOG_FILE_PATH may be set to an empty string to turn the file sink off.
    if 'LOG_FILE_PATH' in os.environ:
        config['logging']['file_path'] = os.environ['LOG_FILE_PATH']

    return config


def get_logging_config(config: Dict[str, Any]) -> Dict[str, Any]:
    return config.get('logging', {})
