#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Hive Metastore Setup Script
Idempotent setup for hive metastore tests. Downloads hive and hadoop
distributions and sets up hive-site.xml.

Usage:
    python scripts/setup_hms.py [clean_metastore]
    SPARK_VERSION=3.5.6 python scripts/setup_hms.py --variant spark [clean_metastore]

Warning - first time setup may download large amounts of files
Warning - with --variant spark, comments out the existing spark-defaults.conf
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.absolute()
sys.path.insert(0, str(project_root))

from metastore_harness.cli import main

if __name__ == "__main__":
    sys.exit(main())
