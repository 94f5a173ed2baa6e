"""Mock implementation of the LoadBalancerCloud protocol.

Tracks every call for assertions, supports failure injection per
operation and scripted provisioning-status sequences for the poller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from lbreconciler.cloud import CloudError
from lbreconciler.models import (
    LoadBalancerRecord,
    PortRecord,
    SecurityGroupRecord,
    SubnetRecord,
)

from .state import MockCloudState

# Operations that change provider state
MUTATING_OPERATIONS = frozenset({"create_load_balancer", "update_port_security_groups"})


@dataclass(frozen=True)
class MockCall:
    """A recorded provider call."""

    operation: str
    args: tuple[Any, ...] = ()


@dataclass
class MockCloud:
    """In-memory provider.

    Usage:
        cloud = MockCloud()
        subnet = cloud.state.add_subnet("subnet-a")
        cloud.fail_next("update_port_security_groups")
        ...
        assert cloud.mutation_count == 1
    """

    state: MockCloudState = field(default_factory=MockCloudState)
    calls: list[MockCall] = field(default_factory=list)
    _failures: dict[str, int] = field(default_factory=dict)
    _status_scripts: dict[str, list[str]] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Test controls
    # -------------------------------------------------------------------------

    def fail_next(self, operation: str, times: int = 1) -> None:
        """Make the next ``times`` calls of ``operation`` raise CloudError."""
        self._failures[operation] = self._failures.get(operation, 0) + times

    def script_statuses(self, lb_id: str, statuses: Sequence[str]) -> None:
        """Return these statuses from successive get_load_balancer calls.

        The last status repeats once the script is exhausted.
        """
        self._status_scripts[lb_id] = list(statuses)

    def calls_for(self, operation: str) -> list[MockCall]:
        """Recorded calls of one operation."""
        return [call for call in self.calls if call.operation == operation]

    @property
    def mutation_count(self) -> int:
        """Number of state-changing calls, failed ones included."""
        return sum(1 for call in self.calls if call.operation in MUTATING_OPERATIONS)

    def reset_calls(self) -> None:
        """Forget recorded calls."""
        self.calls.clear()

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append(MockCall(operation=operation, args=args))
        remaining = self._failures.get(operation, 0)
        if remaining:
            self._failures[operation] = remaining - 1
            raise CloudError(f"injected failure in {operation}")

    # -------------------------------------------------------------------------
    # LoadBalancerCloud
    # -------------------------------------------------------------------------

    def list_load_balancers(self, name: str) -> list[LoadBalancerRecord]:
        self._record("list_load_balancers", name)
        return [lb for lb in self.state.load_balancers.values() if lb.name == name]

    def get_load_balancer(self, lb_id: str) -> LoadBalancerRecord:
        self._record("get_load_balancer", lb_id)
        if lb_id not in self.state.load_balancers:
            raise CloudError(f"load balancer {lb_id} not found")
        record = self.state.load_balancers[lb_id]
        script = self._status_scripts.get(lb_id)
        if script:
            status = script.pop(0) if len(script) > 1 else script[0]
            record = replace(record, provisioning_status=status)
        return record

    def create_load_balancer(
        self,
        name: str,
        vip_subnet_id: str,
        flavor_id: str | None = None,
    ) -> LoadBalancerRecord:
        self._record("create_load_balancer", name, vip_subnet_id, flavor_id)
        return self.state.add_load_balancer(name, vip_subnet_id, flavor_id=flavor_id or "")

    def get_subnet(self, subnet_id: str) -> SubnetRecord:
        self._record("get_subnet", subnet_id)
        if subnet_id not in self.state.subnets:
            raise CloudError(f"subnet {subnet_id} not found")
        return self.state.subnets[subnet_id]

    def list_subnets(self, name: str) -> list[SubnetRecord]:
        self._record("list_subnets", name)
        return [subnet for subnet in self.state.subnets.values() if subnet.name == name]

    def list_security_groups(self, name: str) -> list[SecurityGroupRecord]:
        self._record("list_security_groups", name)
        return [group for group in self.state.security_groups.values() if group.name == name]

    def get_port(self, port_id: str) -> PortRecord:
        self._record("get_port", port_id)
        if port_id not in self.state.ports:
            raise CloudError(f"port {port_id} not found")
        return self.state.ports[port_id]

    def update_port_security_groups(
        self,
        port_id: str,
        security_groups: Sequence[str],
    ) -> PortRecord:
        self._record("update_port_security_groups", port_id, tuple(security_groups))
        if port_id not in self.state.ports:
            raise CloudError(f"port {port_id} not found")
        return self.state.set_port_security_groups(port_id, tuple(security_groups))
