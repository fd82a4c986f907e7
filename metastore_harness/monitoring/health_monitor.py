import socket
import time
from typing import Dict, Any, Optional, Callable
from dataclasses import dataclass
from enum import Enum
from loguru import logger

from metastore_harness.exceptions.provisioning_exceptions import ServiceNotReadyError
from metastore_harness.utils.error_handler import probe_policy, retry_with_policy

class HealthStatus(Enum):
    HEALTHY = "healthy"

@dataclass
class HealthCheck:
    """Result of one probe"""
    service: str
    status: HealthStatus
    message: str
    timestamp: float
    response_time_ms: Optional[float] = None
    details: Optional[Dict[str, Any]] = None

class MetastoreHealthMonitor:
    """TCP readiness probe for the metastore thrift port"""

    def __init__(self, host: str = "localhost", port: int = 9083, connect_timeout: float = 1.0,
                 sleep: Optional[Callable[[float], None]] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout
        self.sleep = sleep
        self.clock = clock or time.monotonic

    def _connect(self, timeout: float):
        with socket.create_connection((self.host, self.port), timeout=timeout):
            pass

    def wait_until_ready(self, timeout: float = 60.0, interval: float = 0.5) -> HealthCheck:
        """Poll until the port accepts connections or ``timeout`` runs out."""
        logger.info(f"Waiting for the metastore at {self.host}:{self.port}...")
        deadline = self.clock() + timeout

        @retry_with_policy(probe_policy(timeout, interval), sleep=self.sleep, clock=self.clock)
        def probe():
            # A slow connect must not carry the wait past the deadline.
            remaining = deadline - self.clock()
            self._connect(max(0.01, min(self.connect_timeout, remaining)))

        start_time = time.time()
        try:
            probe()
        except OSError as e:
            raise ServiceNotReadyError(
                f"Metastore service failed to start within {timeout} seconds: {e}", "NOT_READY"
            )

        logger.info(f"✅ Metastore service is up at {self.host}:{self.port}")
        return HealthCheck(
            service="metastore",
            status=HealthStatus.HEALTHY,
            message="Metastore is accepting connections",
            timestamp=time.time(),
            response_time_ms=(time.time() - start_time) * 1000,
            details={"host": self.host, "port": self.port}
        )
