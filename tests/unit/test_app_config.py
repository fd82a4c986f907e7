import pytest
from pathlib import Path

from metastore_harness.config.app_config import load_config, get_logging_config
from metastore_harness.config.harness_config import HarnessConfig
from metastore_harness.exceptions.base_exceptions import ConfigurationError


class TestLoadConfig:

    @pytest.fixture(autouse=True)
    def isolated_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

    def test_defaults(self):
        config = load_config()

        assert config['versions']['spark'] is None
        assert config['paths']['data_dir'] == '/tmp/data'
        assert config['paths']['log_file'] == '/tmp/metastore.log'
        assert config['metastore']['port'] == 9083
        assert config['urls'] == {}

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv('HIVE_VERSION', 'hive-4.0.1')
        monkeypatch.setenv('SPARK_VERSION', '3.5.6')
        monkeypatch.setenv('HMS_PORT', '19083')

        config = load_config()

        assert config['versions']['hive'] == 'hive-4.0.1'
        assert config['versions']['spark'] == '3.5.6'
        assert config['metastore']['port'] == 19083

    def test_empty_environment_value_is_unset(self, monkeypatch):
        monkeypatch.setenv('HADOOP_VERSION', '')

        assert load_config()['versions']['hadoop'] is None

    def test_invalid_port(self, monkeypatch):
        monkeypatch.setenv('HMS_PORT', 'nine')

        with pytest.raises(ConfigurationError):
            load_config()

    def test_yaml_file_merges_sections(self, tmp_path, monkeypatch):
        config_file = tmp_path / "harness.yaml"
        config_file.write_text("versions:\n  hadoop: 3.4.0\npaths:\n  data_dir: /var/tmp/hms-data\n")
        monkeypatch.setenv('HADOOP_VERSION', '3.3.5')

        config = load_config(str(config_file))

        # environment wins over the file
        assert config['versions']['hadoop'] == '3.3.5'
        assert config['paths']['data_dir'] == '/var/tmp/hms-data'
        assert config['paths']['log_file'] == '/tmp/metastore.log'

    def test_empty_sections_keep_defaults(self, tmp_path):
        config_file = tmp_path / "harness.yaml"
        config_file.write_text("versions:\n  # hive: hive-4.0.1\npaths:\nmetastore:\n")

        config = load_config(str(config_file))

        assert config['versions']['hive'] is None
        assert config['paths']['data_dir'] == '/tmp/data'
        assert HarnessConfig.from_dict(config).metastore_port == 9083

    def test_section_that_is_not_a_mapping(self, tmp_path):
        config_file = tmp_path / "harness.yaml"
        config_file.write_text("paths: /tmp/data\n")

        with pytest.raises(ConfigurationError):
            load_config(str(config_file))

    def test_default_location(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "app_config.yaml").write_text("metastore:\n  host: 127.0.0.1\n")

        assert load_config()['metastore']['host'] == '127.0.0.1'

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_log_file_path_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv('LOG_FILE_PATH', '')

        assert get_logging_config(load_config())['file_path'] == ''


class TestHarnessConfig:

    def test_derived_paths(self):
        config = HarnessConfig(data_dir="/tmp/data")

        assert config.hms_dir == Path("/tmp/data/hms")
        assert config.metastore_db == Path("/tmp/data/hms/metastore_db")
        assert config.spark_warehouse == Path("/tmp/data/spark-warehouse")
        assert config.connection_url == "jdbc:derby:;databaseName=/tmp/data/hms/metastore_db;;create=true"
        assert config.metastore_uri == "thrift://localhost:9083"

    def test_reset_dir_depends_on_variant(self):
        assert HarnessConfig(variant="metastore", data_dir="/tmp/data").reset_dir == Path("/tmp/data")
        assert HarnessConfig(variant="spark", data_dir="/tmp/data").reset_dir == Path("/tmp/data/hms")

    def test_unknown_variant(self):
        with pytest.raises(ConfigurationError):
            HarnessConfig(variant="flink")

    def test_from_dict(self, tmp_path):
        raw = load_config()
        raw['paths']['install_root'] = str(tmp_path)
        raw['versions']['spark'] = '3.5.6'

        config = HarnessConfig.from_dict(raw, variant="spark", wait_ready=True, ready_timeout=5)

        assert config.install_root == tmp_path
        assert config.spark_version == '3.5.6'
        assert config.wait_ready is True
        assert config.ready_timeout == 5.0
        assert config.metastore_port == 9083

    def test_from_dict_with_null_sections(self):
        config = HarnessConfig.from_dict({'versions': None, 'paths': None, 'metastore': None, 'urls': None})

        assert config.hive_version is None
        assert config.data_dir == Path("/tmp/data")
        assert config.url_templates == {}
