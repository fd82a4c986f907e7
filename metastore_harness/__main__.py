from metastore_harness.cli import run

run()
