import io
import shutil
import tarfile
from pathlib import Path

import pytest

HARNESS_ENV_VARS = [
    'HIVE_VERSION', 'HADOOP_VERSION', 'SPARK_VERSION', 'ICEBERG_VERSION', 'SCALA_VERSION',
    'HMS_INSTALL_ROOT', 'HMS_DATA_DIR', 'HMS_LOG_FILE', 'HMS_HOST', 'HMS_PORT', 'LOG_LEVEL',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in HARNESS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('LOG_FILE_PATH', '')


def build_archive(archive: Path, top: str, files: dict) -> Path:
    """Write a .tar.gz holding ``top/<name>`` for each entry in ``files``.

    Values are file contents; names under ``bin/`` are made executable.
    """
    archive.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "w:gz") as tar:
        dir_info = tarfile.TarInfo(top)
        dir_info.type = tarfile.DIRTYPE
        dir_info.mode = 0o755
        tar.addfile(dir_info)
        for name, content in files.items():
            data = content.encode('utf-8')
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            info.mode = 0o755 if name.startswith("bin/") else 0o644
            tar.addfile(info, io.BytesIO(data))
    return archive


class CopyDownloader:
    """Stands in for the network: serves archives from a local mapping."""

    def __init__(self, sources=None):
        self.sources = sources or {}
        self.calls = []

    def __call__(self, url, dest):
        self.calls.append(url)
        shutil.copyfile(self.sources[url], dest)


@pytest.fixture
def make_archive(tmp_path):
    def _make(top, files=None, name=None):
        files = files or {"bin/tool": "#!/bin/sh\nexit 0\n"}
        return build_archive(tmp_path / "mirror" / (name or f"{top}.tar.gz"), top, files)
    return _make


@pytest.fixture
def downloader():
    return CopyDownloader()


@pytest.fixture(autouse=True)
def reset_loguru():
    yield
    from loguru import logger
    logger.remove()
