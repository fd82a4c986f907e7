#!/usr/bin/env python3

import sys
import argparse
from typing import List, Optional
from loguru import logger

from metastore_harness.config.app_config import load_config, get_logging_config
from metastore_harness.config.harness_config import HarnessConfig, VARIANTS, VARIANT_METASTORE, VARIANT_SPARK, CLEAN_DIRECTIVE
from metastore_harness.core.pipeline_orchestrator import ProvisioningPipeline, ProvisioningReport
from metastore_harness.exceptions.base_exceptions import HarnessException
from metastore_harness.utils.logger import setup_logger


class HarnessCLI:

    def __init__(self):
        self.config = None
        self.pipeline = None

    def load_configuration(self, variant: str, config_path: Optional[str] = None,
                           wait_ready: Optional[bool] = None, ready_timeout: Optional[float] = None):
        raw = load_config(config_path)
        self.config = HarnessConfig.from_dict(raw, variant=variant, wait_ready=wait_ready,
                                              ready_timeout=ready_timeout)
        return raw

    def provision(self, directive: Optional[str] = None) -> ProvisioningReport:
        self.pipeline = ProvisioningPipeline(self.config)
        return self.pipeline.run(directive)


def build_parser(default_variant: str = VARIANT_METASTORE) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Idempotent setup for hive metastore tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Reuse the existing metastore database
  setup-hms

  # Wipe the metastore database and re-initialize the schema
  setup-hms {CLEAN_DIRECTIVE}

  # Also wire a local Spark install to the metastore through Iceberg
  SPARK_VERSION=3.5.6 setup-hms-iceberg {CLEAN_DIRECTIVE}

Warning - first time setup may download large amounts of files.
        """
    )
    parser.add_argument('directive', nargs='?',
                        help=f"'{CLEAN_DIRECTIVE}' resets the metastore database")
    parser.add_argument('--variant', choices=VARIANTS, default=default_variant,
                        help=f"what to provision (default: {default_variant})")
    parser.add_argument('--config', '-c',
                        help='YAML configuration file')
    parser.add_argument('--wait-ready', action='store_true', default=None,
                        help='wait until the metastore port accepts connections')
    parser.add_argument('--ready-timeout', type=float,
                        help='seconds to wait with --wait-ready')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='debug logging')
    return parser


def main(argv: Optional[List[str]] = None, default_variant: str = VARIANT_METASTORE) -> int:
    args = build_parser(default_variant).parse_args(argv)
    cli = HarnessCLI()
    level = 'DEBUG' if args.verbose else 'INFO'

    # console only until the configured sinks are known
    setup_logger({'level': level})

    try:
        raw = cli.load_configuration(args.variant, args.config, args.wait_ready, args.ready_timeout)
        logging_config = dict(get_logging_config(raw))
        if args.verbose:
            logging_config['level'] = level
        setup_logger(logging_config)

        cli.provision(args.directive)

    except HarnessException as e:
        logger.error(e.message)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 1

    return 0


def main_iceberg(argv: Optional[List[str]] = None) -> int:
    return main(argv, default_variant=VARIANT_SPARK)


def run():
    sys.exit(main())


def run_iceberg():
    sys.exit(main_iceberg())


if __name__ == "__main__":
    run()
