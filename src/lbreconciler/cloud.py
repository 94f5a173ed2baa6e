"""Cloud provider boundary.

The reconciliation core only talks to the provider through this protocol.
The SDK client and wire protocol live in an adapter outside this package.

Adapters MUST raise CloudError for transport and provider failures so the
core can wrap them with the operation and identifying key.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .models import (
    LoadBalancerRecord,
    PortRecord,
    SecurityGroupRecord,
    SubnetRecord,
)


class CloudError(Exception):
    """Raised by adapters when a provider call fails."""

    pass


@runtime_checkable
class LoadBalancerCloud(Protocol):
    """Provider operations used by the load balancer unit."""

    def list_load_balancers(self, name: str) -> list[LoadBalancerRecord]:
        """List load balancers whose name equals ``name``."""
        ...

    def get_load_balancer(self, lb_id: str) -> LoadBalancerRecord:
        """Fetch a load balancer (including provisioning status) by id."""
        ...

    def create_load_balancer(
        self,
        name: str,
        vip_subnet_id: str,
        flavor_id: str | None = None,
    ) -> LoadBalancerRecord:
        """Create a load balancer on the given subnet."""
        ...

    def get_subnet(self, subnet_id: str) -> SubnetRecord:
        """Fetch a subnet by id."""
        ...

    def list_subnets(self, name: str) -> list[SubnetRecord]:
        """List subnets whose name equals ``name``."""
        ...

    def list_security_groups(self, name: str) -> list[SecurityGroupRecord]:
        """List security groups whose name equals ``name``."""
        ...

    def get_port(self, port_id: str) -> PortRecord:
        """Fetch a network port by id."""
        ...

    def update_port_security_groups(
        self,
        port_id: str,
        security_groups: Sequence[str],
    ) -> PortRecord:
        """Replace a port's security-group list wholesale."""
        ...
