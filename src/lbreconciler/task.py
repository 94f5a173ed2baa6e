"""Load balancer unit as seen by the external scheduler.

The scheduler builds one LoadBalancerTask per load balancer, orders it
after the subnet and security-group units it depends on, and calls run()
(or find/check_changes/render itself) once per pass. Re-running a pass is
always safe: every step is idempotent and re-checkable.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol

from .changes import compute_changes, has_changes
from .cloud import LoadBalancerCloud
from .discovery import FindResult, find_load_balancer
from .errors import LifecycleViolationError, ReconcileError, RequiredFieldError
from .models import Lifecycle, LoadBalancer
from .poller import Backoff, wait_for_active
from .render import RenderAction, render
from .validation import check_changes

logger = logging.getLogger(__name__)


class TaskKind(str, Enum):
    """Kind tag every unit in an orchestration run exposes."""

    LOAD_BALANCER = "LoadBalancer"
    SUBNET = "Subnet"
    SECURITY_GROUP = "SecurityGroup"
    PORT = "Port"
    OTHER = "Other"


# Units a load balancer must be ordered after
DEPENDENCY_KINDS: frozenset[TaskKind] = frozenset({TaskKind.SUBNET, TaskKind.SECURITY_GROUP})


class ReconcileUnit(Protocol):
    """Capability the scheduler relies on for dependency queries."""

    kind: TaskKind


@dataclass
class ReconcileResult:
    """Result of a single reconciliation pass for one load balancer."""

    name: str | None
    lifecycle: Lifecycle = Lifecycle.SYNC
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    found: bool = False
    skipped: bool = False
    action: RenderAction | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Calculate duration in seconds."""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()


class LoadBalancerTask:
    """Reconciliation unit for one load balancer."""

    kind = TaskKind.LOAD_BALANCER

    def __init__(self, desired: LoadBalancer) -> None:
        self.desired = desired

    def __repr__(self) -> str:
        return f"LoadBalancerTask(name={self.desired.name!r}, id={self.desired.id!r})"

    @property
    def lifecycle(self) -> Lifecycle:
        return self.desired.lifecycle

    def get_dependencies(
        self,
        units: Mapping[str, Any] | Iterable[Any],
    ) -> list[ReconcileUnit]:
        """Return the subnet and security-group units among ``units``.

        Pure function of its input. Units without a ``kind`` tag are ignored.
        """
        candidates = units.values() if isinstance(units, Mapping) else units
        return [unit for unit in candidates if getattr(unit, "kind", None) in DEPENDENCY_KINDS]

    def compare_with_id(self) -> str | None:
        """Remote id for cross-referencing, None until created."""
        return self.desired.id

    def find(self, cloud: LoadBalancerCloud) -> LoadBalancer | None:
        """Discover the actual state and copy remote-assigned fields onto desired."""
        result: FindResult = find_load_balancer(cloud, self.desired)
        if result.patch is not None:
            result.patch.apply_to(self.desired)
        return result.actual

    def check_changes(self, actual: LoadBalancer | None, changes: LoadBalancer | None) -> None:
        check_changes(actual, self.desired, changes)

    def render(
        self,
        cloud: LoadBalancerCloud,
        actual: LoadBalancer | None,
        changes: LoadBalancer | None,
    ) -> RenderAction:
        return render(cloud, actual, self.desired, changes)

    def wait_until_active(
        self,
        cloud: LoadBalancerCloud,
        backoff: Backoff | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> str:
        """Block until the created load balancer is ACTIVE.

        Not part of run(): a scheduler that wants dependents to see an ACTIVE
        load balancer calls this after run(); one that relies on re-invoking
        the pass does not.
        """
        if self.desired.id is None:
            raise RequiredFieldError("id")
        return wait_for_active(cloud, self.desired.id, backoff=backoff, sleep=sleep)

    def run(self, cloud: LoadBalancerCloud) -> ReconcileResult:
        """Execute one pass: find, diff, validate, render.

        Raises:
            ReconcileError: Any reconciliation failure, after logging it.
        """
        result = ReconcileResult(name=self.desired.name, lifecycle=self.lifecycle)

        if self.lifecycle == Lifecycle.IGNORE:
            logger.info(
                "Skipping load balancer with Ignore lifecycle",
                extra={"lb_name": result.name},
            )
            result.skipped = True
            result.end_time = datetime.now(UTC)
            return result

        try:
            actual = self.find(cloud)
            result.found = actual is not None
            changes = compute_changes(actual, self.desired)

            match self.lifecycle:
                case Lifecycle.EXISTS_AND_VALIDATES | Lifecycle.EXISTS_AND_WARN_IF_CHANGES:
                    self._verify_existing(actual, changes, result)
                case _:
                    self.check_changes(actual, changes)
                    result.action = self.render(cloud, actual, changes)
        except ReconcileError as e:
            logger.error(
                "Load balancer reconciliation failed",
                extra={
                    "lb_name": result.name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise

        result.end_time = datetime.now(UTC)
        logger.info(
            "Load balancer reconciled",
            extra={
                "lb_name": result.name,
                "lb_id": self.desired.id,
                "found": result.found,
                "action": result.action.value if result.action else None,
                "duration_seconds": result.duration_seconds,
            },
        )
        return result

    def _verify_existing(
        self,
        actual: LoadBalancer | None,
        changes: LoadBalancer | None,
        result: ReconcileResult,
    ) -> None:
        strict = self.lifecycle == Lifecycle.EXISTS_AND_VALIDATES

        if actual is None:
            reason = "resource was not found"
        elif has_changes(changes):
            reason = "resource has changes that will not be applied"
        else:
            return

        if strict:
            raise LifecycleViolationError(self.desired.name, reason)
        result.warnings.append(reason)
        logger.warning(
            "Load balancer lifecycle check",
            extra={
                "lb_name": self.desired.name,
                "lifecycle": self.lifecycle.value,
                "reason": reason,
            },
        )
