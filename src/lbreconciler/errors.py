"""Error taxonomy for load balancer reconciliation.

Every error is fatal to the current reconciliation pass. The scheduler
decides whether to abort the run, retry the whole pass later, or report
to the operator. The only internal retry is the poller's fixed backoff.

A zero-match lookup is NOT an error: discovery represents it as "absent".
"""

from __future__ import annotations


class ReconcileError(Exception):
    """Base class for all reconciliation errors."""

    pass


class AmbiguousMatchError(ReconcileError):
    """Raised when more than one remote object matches a unique name."""

    def __init__(self, kind: str, key: str, count: int) -> None:
        self.kind = kind
        self.key = key
        self.count = count
        super().__init__(f"Multiple {kind}s for name {key!r} (found {count})")


class RemoteAPIError(ReconcileError):
    """Raised when a provider call fails at the transport or API level.

    Always raised ``from`` the underlying CloudError so the original
    cause stays attached.
    """

    def __init__(self, operation: str, key: str | None, detail: str = "") -> None:
        self.operation = operation
        self.key = key
        message = f"Failed to {operation} for {key!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RequiredFieldError(ReconcileError):
    """Raised when a field required for creation is unset."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Field is required: {field}")


class ImmutableFieldError(ReconcileError):
    """Raised when a delta tries to change an immutable field."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Field cannot be changed: {field}")


class ConfigurationResolutionError(ReconcileError):
    """Raised when a named lookup does not resolve to exactly one object.

    This is a precondition failure (the configuration names something that
    does not exist, or exists more than once), not a drift condition.
    """

    def __init__(self, kind: str, key: str | None, count: int) -> None:
        self.kind = kind
        self.key = key
        self.count = count
        super().__init__(f"Unexpected {kind}s for {key!r}. Expected 1, got {count}")


class ProvisioningTimeoutError(ReconcileError):
    """Raised when the poller exhausts its backoff budget."""

    def __init__(self, lb_id: str, last_status: str | None) -> None:
        self.lb_id = lb_id
        self.last_status = last_status
        super().__init__(
            f"Load balancer {lb_id} failed to go into ACTIVE provisioning status "
            f"within allotted time (last status: {last_status})"
        )


class ProvisioningFailedError(ReconcileError):
    """Raised when the provider reports a terminal failure status."""

    def __init__(self, lb_id: str, status: str) -> None:
        self.lb_id = lb_id
        self.status = status
        super().__init__(f"Load balancer {lb_id} has gone into {status} state")


class LifecycleViolationError(ReconcileError):
    """Raised when an ExistsAndValidates resource is missing or has drifted."""

    def __init__(self, name: str | None, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Load balancer {name!r}: {reason}")
