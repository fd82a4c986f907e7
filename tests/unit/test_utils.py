import os
from pathlib import Path

from loguru import logger

from metastore_harness.utils.commands import build_service_env, format_command
from metastore_harness.utils.logger import setup_logger


class TestCommands:

    def test_format_command_quotes_arguments(self):
        assert format_command(["hive", "--service", "metastore"]) == "hive --service metastore"
        assert format_command([Path("/opt/my hive/bin/hive")]) == "'/opt/my hive/bin/hive'"

    def test_build_service_env(self):
        env = build_service_env(Path("/opt/hive"), Path("/opt/hadoop"), base={'PATH': '/usr/bin', 'HOME': '/root'})

        assert env['HIVE_HOME'] == '/opt/hive'
        assert env['HADOOP_HOME'] == '/opt/hadoop'
        assert env['PATH'] == os.pathsep.join(['/opt/hive/bin', '/opt/hadoop/bin', '/usr/bin'])
        assert env['HOME'] == '/root'

    def test_build_service_env_does_not_touch_os_environ(self):
        before = dict(os.environ)

        build_service_env(Path("/opt/hive"), Path("/opt/hadoop"))

        assert dict(os.environ) == before


class TestLogger:

    def test_file_sink(self, tmp_path):
        log_file = tmp_path / "logs" / "harness.log"
        setup_logger({'level': 'INFO', 'file_path': str(log_file)})

        logger.info("provisioning started")
        logger.remove()

        assert "provisioning started" in log_file.read_text()

    def test_console_only(self, tmp_path, capsys):
        setup_logger({'level': 'INFO', 'file_path': ''})

        logger.info("hello")

        assert "hello" in capsys.readouterr().out
        assert list(tmp_path.iterdir()) == []
