#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Config Materializer

Writes hive-site.xml (always overwritten, never merged) and appends the
Iceberg catalog block to spark-defaults.conf once, guarded by a sentinel.
"""

from pathlib import Path
from typing import Dict

from loguru import logger

SPARK_CONF_SENTINEL = "HIVE_METASTORE_ICEBERG_TESTCONF"
ICEBERG_CATALOG_IMPL = "org.apache.iceberg.spark.SparkCatalog"

HIVE_SITE_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<!--
  Licensed to the Apache Software Foundation (ASF) under one or more
  contributor license agreements.  See the NOTICE file distributed with
  this work for additional information regarding copyright ownership.
  The ASF licenses this file to You under the Apache License, Version 2.0
  (the "License"); you may not use this file except in compliance with
  the License.  You may obtain a copy of the License at

      http://www.apache.org/licenses/LICENSE-2.0

  Unless required by applicable law or agreed to in writing, software
  distributed under the License is distributed on an "AS IS" BASIS,
  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
  See the License for the specific language governing permissions and
  limitations under the License.
-->
"""

PROPERTY_TEMPLATE = """    <property>
        <name>{name}</name>
        <value>{value}</value>
    </property>
"""


def hive_site_properties(connection_url: str) -> Dict[str, str]:
    """The fixed metastore settings, in file order."""
    return {
        'hive.server2.enable.doAs': 'false',
        'hive.exec.submit.local.task.via.child': 'false',
        'hive.compactor.worker.threads': '1',
        'mapreduce.framework.name': 'local',
        'javax.jdo.option.ConnectionURL': connection_url,
        'metastore.metastore.event.db.notification.api.auth': 'false',
    }


def render_hive_site(connection_url: str) -> str:
    body = "".join(
        PROPERTY_TEMPLATE.format(name=name, value=value)
        for name, value in hive_site_properties(connection_url).items()
    )
    return f"{HIVE_SITE_HEADER}<configuration>\n{body}</configuration>\n"


def write_hive_site(conf_dir: Path, connection_url: str) -> Path:
    """Truncate and rewrite ``hive-site.xml`` under ``conf_dir``."""
    conf_dir = Path(conf_dir)
    conf_dir.mkdir(parents=True, exist_ok=True)

    # log4j config is only created if missing, never overwritten
    (conf_dir / "hive-log4j2.properties").touch()

    hive_site = conf_dir / "hive-site.xml"
    with open(hive_site, 'w', encoding='utf-8') as f:
        f.write(render_hive_site(connection_url))

    logger.info(f"✅ Wrote {hive_site}")
    return hive_site


def render_spark_integration_block(metastore_uri: str, warehouse_dir: Path) -> str:
    return (
        "\n"
        f"# {SPARK_CONF_SENTINEL}\n"
        "spark.sql.variable.substitute true\n"
        f"spark.driver.extraJavaOptions -Dderby.system.home={warehouse_dir}/\n"
        "\n"
        f"spark.sql.catalog.spark_catalog={ICEBERG_CATALOG_IMPL}\n"
        "spark.sql.catalog.spark_catalog.type=hive\n"
        f"spark.sql.catalog.spark_catalog.uri={metastore_uri}\n"
        "spark.sql.defaultCatalog=spark_catalog\n"
        f"spark.sql.warehouse.dir={warehouse_dir}\n"
    )


def comment_out(content: bytes) -> bytes:
    """Prefix every line with ``# ``, keeping line endings as they are.

    Works on raw bytes so encodings and ``\\r\\n`` endings survive untouched.
    """
    if not content:
        return b""
    lines = content.split(b"\n")
    terminated = lines[-1] == b""
    if terminated:
        lines.pop()
    commented = b"\n".join(b"# " + line for line in lines)
    return commented + b"\n" if terminated else commented


def apply_spark_integration(spark_conf: Path, metastore_uri: str, warehouse_dir: Path) -> bool:
    """Point Spark's default catalog at the metastore through Iceberg.

    Existing settings are commented out rather than deleted so they can be
    restored by hand. Returns False when the sentinel is already present.
    """
    spark_conf = Path(spark_conf)
    logger.info("Verifying Spark conf...")

    existing = spark_conf.read_bytes() if spark_conf.is_file() else b""

    if SPARK_CONF_SENTINEL.encode() in existing:
        logger.info("Hive metastore iceberg conf already set")
        return False

    logger.info("Setting hive metastore iceberg conf...")
    spark_conf.parent.mkdir(parents=True, exist_ok=True)
    block = render_spark_integration_block(metastore_uri, warehouse_dir)
    with open(spark_conf, 'wb') as f:
        f.write(comment_out(existing))
        f.write(block.encode('utf-8'))

    logger.info(f"✅ Updated {spark_conf}")
    return True
