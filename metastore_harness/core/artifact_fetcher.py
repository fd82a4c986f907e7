#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import http.client
import os
import tarfile
import urllib.request
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from metastore_harness.exceptions.provisioning_exceptions import ArtifactFetchError, ArchiveExtractionError
from metastore_harness.models.artifacts import DistributionDescriptor, RuntimeJar
from metastore_harness.utils.commands import trace

Downloader = Callable[[str, Path], None]


def urlretrieve_download(url: str, dest: Path):
    urllib.request.urlretrieve(url, dest)


class ArtifactFetcher:
    """Download-if-absent and extract-if-absent for distributions and jars.

    Nothing is retried; every failure raises and ends the run.
    """

    def __init__(self, downloader: Optional[Downloader] = None):
        self.downloader = downloader or urlretrieve_download
        self.downloads = 0
        self.extractions = 0

    def _download(self, url: str, dest: Path, label: str):
        logger.info(f"⬇️ Downloading {label}...")
        logger.info(f"+ download {url} -> {dest}")
        try:
            self.downloader(url, dest)
        except (OSError, ValueError, http.client.HTTPException) as e:
            # urllib errors are OSError subclasses, bad URLs are ValueError,
            # a connection dropped mid-body is IncompleteRead
            if dest.exists():
                dest.unlink()
            raise ArtifactFetchError(f"Failed to download {label} from {url}: {e}", "DOWNLOAD_FAILED")
        self.downloads += 1

        if not dest.is_file():
            raise ArtifactFetchError(f"Failed to download {label}. Expected file missing: {dest}", "DOWNLOAD_FAILED")

    def _extract(self, archive: Path, target_dir: Path, label: str):
        trace(["tar", "xzf", archive, "-C", target_dir])
        try:
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(target_dir, filter="tar")
        except (tarfile.TarError, OSError) as e:
            raise ArchiveExtractionError(f"Failed to extract {label} from {archive}: {e}", "EXTRACT_FAILED")
        self.extractions += 1

    def ensure_distribution(self, descriptor: DistributionDescriptor) -> Path:
        """Return the resolved install dir, fetching and unpacking only when missing."""
        label = f"{descriptor.name} distro"

        if descriptor.install_dir.is_dir():
            home = Path(os.path.realpath(descriptor.install_dir))
            logger.info(f"✅ {descriptor.distribution} already installed at {home}")
            return home

        descriptor.install_root.mkdir(parents=True, exist_ok=True)

        if descriptor.archive_path.is_file():
            logger.info(f"Found existing {label} tarball")
        else:
            self._download(descriptor.download_url, descriptor.archive_path, label)

        self._extract(descriptor.archive_path, descriptor.install_root, label)
        if not descriptor.install_dir.is_dir():
            raise ArchiveExtractionError(
                f"Extracting {descriptor.archive_path} did not produce {descriptor.install_dir}",
                "EXTRACT_FAILED",
            )

        logger.info(f"Extracted {label}.")
        descriptor.archive_path.unlink()
        home = Path(os.path.realpath(descriptor.install_dir))
        logger.info(f"{descriptor.name} distro at {home}")
        return home

    def ensure_jar(self, jar: RuntimeJar) -> Path:
        """Fetch a jar into place unless it is already there."""
        if jar.path.is_file():
            logger.info(f"✅ Found existing {jar.path.name}")
            return jar.path

        if not jar.path.parent.is_dir():
            raise ArtifactFetchError(f"Jar directory does not exist: {jar.path.parent}", "JAR_DIR_MISSING")

        self._download(jar.download_url, jar.path, jar.path.name)
        logger.info(f"✅ Downloaded {jar.path.name}")
        return jar.path
