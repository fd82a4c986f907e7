#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import shutil
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Set

import psutil
from loguru import logger

from metastore_harness.exceptions.provisioning_exceptions import SchemaInitializationError, ServiceLaunchError
from metastore_harness.utils.commands import run_command, trace


class TerminationOutcome(Enum):
    TERMINATED = "terminated"
    NOTHING_TO_TERMINATE = "nothing_to_terminate"


@dataclass
class PortReleaseResult:
    port: int
    outcome: TerminationOutcome
    pids: List[int] = field(default_factory=list)


def find_listeners(port: int) -> Set[int]:
    """Pids of processes in LISTEN state on ``port``."""
    pids = set()
    try:
        connections = psutil.net_connections(kind='inet')
    except psutil.AccessDenied:
        # macOS needs root for the system-wide table; fall back to per-process scans
        connections = []
        for proc in psutil.process_iter(['pid']):
            try:
                for conn in proc.net_connections(kind='inet'):
                    if conn.status == psutil.CONN_LISTEN and conn.laddr and conn.laddr.port == port:
                        pids.add(proc.pid)
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

    for conn in connections:
        if conn.status == psutil.CONN_LISTEN and conn.laddr and conn.laddr.port == port and conn.pid:
            pids.add(conn.pid)
    return pids


class ProcessSupervisor:
    """Kill, optionally wipe and re-init, then start the metastore"""

    def __init__(self, env: Optional[Dict[str, str]] = None):
        self.env = env

    def release_port(self, port: int) -> PortReleaseResult:
        logger.info("Killing any running metastore server...")
        killed = []
        for pid in sorted(find_listeners(port)):
            trace(["kill", "-9", pid])
            try:
                psutil.Process(pid).kill()
                killed.append(pid)
            except psutil.NoSuchProcess:
                logger.debug(f"Process {pid} exited before it could be killed")

        if not killed:
            logger.info(f"Nothing listening on port {port}")
            return PortReleaseResult(port=port, outcome=TerminationOutcome.NOTHING_TO_TERMINATE)

        logger.info(f"Terminated {killed} on port {port}")
        return PortReleaseResult(port=port, outcome=TerminationOutcome.TERMINATED, pids=killed)

    def reset_state(self, state_dir: Path) -> Path:
        """Delete the persisted metastore state and leave an empty directory."""
        logger.info("Clearing metastore database...")
        state_dir = Path(state_dir)
        trace(["rm", "-rf", state_dir])
        if state_dir.exists():
            shutil.rmtree(state_dir)
        state_dir.mkdir(parents=True, exist_ok=True)
        return state_dir

    def initialize_schema(self, hive_home: Path):
        logger.info("Initializing metastore schema...")
        result = run_command(
            [Path(hive_home) / "bin" / "schematool", "-initSchema", "-dbType", "derby", "--verbose"],
            env=self.env,
        )
        if result.returncode != 0:
            raise SchemaInitializationError(
                f"schematool exited with status {result.returncode}", "SCHEMA_INIT_FAILED"
            )

    def launch_metastore(self, hive_home: Path, log_file: Path) -> subprocess.Popen:
        """Start the metastore detached, output going to ``log_file``.

        Returns as soon as the process is spawned; readiness is not checked here.
        """
        logger.info("Starting metastore server...")
        cmd = [str(Path(hive_home) / "bin" / "hive"), "--skiphadoopversion", "--skiphbasecp", "--service", "metastore"]
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        trace(cmd + [">", str(log_file), "2>&1", "&"])

        try:
            with open(log_file, 'wb') as log:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    env=self.env,
                    start_new_session=True,
                )
        except OSError as e:
            raise ServiceLaunchError(f"Failed to start metastore: {e}", "LAUNCH_FAILED")

        logger.info(f"✅ Metastore started (pid {process.pid}), logging to {log_file}")
        return process
