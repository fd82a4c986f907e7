import os
import shlex
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from loguru import logger

Command = Sequence[Union[str, Path]]


def format_command(cmd: Command) -> str:
    return " ".join(shlex.quote(str(part)) for part in cmd)


def trace(cmd: Command):
    """Echo a command before it runs, like ``set -x``."""
    logger.info(f"+ {format_command(cmd)}")


def run_command(cmd: Command, env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
    """Run a command to completion, inheriting stdout/stderr.

    Does not raise on a non-zero exit; callers decide what a failure means.
    """
    trace(cmd)
    return subprocess.run([str(part) for part in cmd], env=env)


def build_service_env(hive_home: Path, hadoop_home: Path,
                      base: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Environment for Hive child processes."""
    env = dict(os.environ if base is None else base)
    env['HIVE_HOME'] = str(hive_home)
    env['HADOOP_HOME'] = str(hadoop_home)

    path_parts: List[str] = [str(hive_home / "bin"), str(hadoop_home / "bin")]
    if env.get('PATH'):
        path_parts.append(env['PATH'])
    env['PATH'] = os.pathsep.join(path_parts)
    return env
