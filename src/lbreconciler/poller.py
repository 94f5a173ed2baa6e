"""Wait for a load balancer to reach a terminal provisioning status.

The provider provisions load balancers asynchronously. This poller fetches
the status with bounded exponential backoff:
- ACTIVE ends the wait successfully
- ERROR ends the wait with ProvisioningFailedError, even with budget left
- a provider failure ends the wait with RemoteAPIError (not retried)
- anything else (PENDING_CREATE, PENDING_UPDATE, ...) keeps waiting

The wait is synchronous and cannot be cancelled once started. Render does
not call it; see LoadBalancerTask.wait_until_active.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .cloud import CloudError, LoadBalancerCloud
from .config import (
    LOADBALANCER_ACTIVE_FACTOR,
    LOADBALANCER_ACTIVE_INIT_DELAY_SECONDS,
    LOADBALANCER_ACTIVE_STEPS,
)
from .errors import ProvisioningFailedError, ProvisioningTimeoutError, RemoteAPIError
from .models import ACTIVE_STATUS, ERROR_STATUS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Backoff:
    """Exponential backoff schedule.

    ``steps`` is the maximum number of attempts. The poller sleeps between
    attempts, never after the last one, so there are ``steps - 1`` delays.
    """

    initial_delay_seconds: float = LOADBALANCER_ACTIVE_INIT_DELAY_SECONDS
    factor: float = LOADBALANCER_ACTIVE_FACTOR
    steps: int = LOADBALANCER_ACTIVE_STEPS

    def __post_init__(self) -> None:
        if self.steps < 1:
            raise ValueError(f"steps must be at least 1: {self.steps}")
        if self.initial_delay_seconds < 0:
            raise ValueError(f"initial delay cannot be negative: {self.initial_delay_seconds}")

    def delays(self) -> Iterator[float]:
        """Yield the sleep before each retry."""
        delay = self.initial_delay_seconds
        for _ in range(self.steps - 1):
            yield delay
            delay *= self.factor

    @property
    def total_wait_seconds(self) -> float:
        """Upper bound on time spent sleeping."""
        return sum(self.delays())


def wait_for_active(
    cloud: LoadBalancerCloud,
    lb_id: str,
    backoff: Backoff | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Poll until the load balancer is ACTIVE.

    Args:
        cloud: Provider boundary.
        lb_id: Remote load balancer id.
        backoff: Schedule to use (default: module constants).
        sleep: Sleep function, injectable for tests.

    Returns:
        The terminal provisioning status (always ACTIVE).

    Raises:
        RemoteAPIError: If fetching the status fails.
        ProvisioningFailedError: If the provider reports ERROR.
        ProvisioningTimeoutError: If the attempt budget runs out.
    """
    backoff = backoff or Backoff()
    delays = backoff.delays()
    status: str | None = None

    for attempt in range(1, backoff.steps + 1):
        try:
            record = cloud.get_load_balancer(lb_id)
        except CloudError as e:
            raise RemoteAPIError("get load balancer", lb_id, str(e)) from e

        status = record.provisioning_status
        if status == ACTIVE_STATUS:
            logger.info(
                "Load balancer is ACTIVE",
                extra={"lb_id": lb_id, "attempts": attempt},
            )
            return status
        if status == ERROR_STATUS:
            raise ProvisioningFailedError(lb_id, status)

        logger.info(
            "Waiting for load balancer to be ACTIVE...",
            extra={"lb_id": lb_id, "status": status, "attempt": attempt},
        )
        delay = next(delays, None)
        if delay is None:
            break
        sleep(delay)

    raise ProvisioningTimeoutError(lb_id, status)
