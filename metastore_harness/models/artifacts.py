#!/usr/bin/env python3
"""
Artifact descriptor models

Immutable descriptions of the distributions and jars a provisioning run
installs. They are built once by the version resolver and only read
afterwards.
"""

from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DistributionDescriptor(BaseModel):
    """A versioned tarball that unpacks into ``install_dir``"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Short component name, e.g. hive")
    version: str = Field(..., description="Resolved version string")
    distribution: str = Field(..., description="Top-level directory inside the archive")
    download_url: str
    archive_path: Path
    install_dir: Path

    @field_validator('name', 'version', 'distribution')
    @classmethod
    def validate_not_blank(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError('value cannot be empty')
        return v.strip()

    @property
    def install_root(self) -> Path:
        return self.install_dir.parent


class RuntimeJar(BaseModel):
    """A single jar used in place, never extracted"""

    model_config = ConfigDict(frozen=True)

    artifact: str
    version: str
    download_url: str
    path: Path


class SparkDistribution(BaseModel):
    """An already installed Spark distribution"""

    model_config = ConfigDict(frozen=True)

    version: str
    major_minor: str
    home: Path

    @property
    def jars_dir(self) -> Path:
        return self.home / "jars"

    @property
    def conf_file(self) -> Path:
        return self.home / "conf" / "spark-defaults.conf"
