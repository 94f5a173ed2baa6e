"""Discover the remote load balancer matching a desired descriptor.

Discovery never mutates the caller's descriptor. It returns the actual
state together with a patch of remote-assigned fields that the caller
applies to its own copy (LoadBalancerTask.find does so).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .cloud import CloudError, LoadBalancerCloud
from .errors import AmbiguousMatchError, RemoteAPIError
from .models import (
    Lifecycle,
    LoadBalancer,
    LoadBalancerPatch,
    LoadBalancerRecord,
    SecurityGroupRecord,
    SecurityGroupRef,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FindResult:
    """Outcome of discovery. ``actual`` is None when the resource is absent."""

    actual: LoadBalancer | None = None
    patch: LoadBalancerPatch | None = None

    @property
    def found(self) -> bool:
        return self.actual is not None


def find_security_group_by_name(
    cloud: LoadBalancerCloud,
    name: str,
) -> SecurityGroupRecord | None:
    """Look up a security group by exact name.

    Returns:
        The single match, or None if there is none.

    Raises:
        RemoteAPIError: If the listing fails.
        AmbiguousMatchError: If more than one group has this name.
    """
    try:
        groups = cloud.list_security_groups(name)
    except CloudError as e:
        raise RemoteAPIError("list security groups", name, str(e)) from e

    if not groups:
        return None
    if len(groups) > 1:
        raise AmbiguousMatchError("security group", name, len(groups))
    return groups[0]


def load_balancer_from_cloud(
    cloud: LoadBalancerCloud,
    lifecycle: Lifecycle,
    record: LoadBalancerRecord,
    track_security_group: bool = True,
) -> LoadBalancer:
    """Reconstruct a full descriptor from a provider record.

    The subnet id is resolved back to a subnet name. The security group is
    looked up by the load balancer's own name, but only when the caller
    tracks one.
    """
    try:
        subnet = cloud.get_subnet(record.vip_subnet_id)
    except CloudError as e:
        raise RemoteAPIError("get subnet", record.vip_subnet_id, str(e)) from e

    actual = LoadBalancer(
        id=record.id,
        name=record.name,
        lifecycle=lifecycle,
        port_id=record.vip_port_id,
        subnet=subnet.name or None,
        vip_subnet_id=record.vip_subnet_id,
        provider=record.provider,
        flavor_id=record.flavor_id,
    )

    if track_security_group:
        group = find_security_group_by_name(cloud, record.name)
        if group is not None:
            actual.security_group = SecurityGroupRef(name=group.name, id=group.id)

    return actual


def find_load_balancer(cloud: LoadBalancerCloud, desired: LoadBalancer) -> FindResult:
    """Find the remote load balancer named by ``desired``.

    Args:
        cloud: Provider boundary.
        desired: Desired descriptor; only ``name``, ``lifecycle`` and whether
            a security group is set are consulted.

    Returns:
        FindResult with actual state and patch, or an empty result if absent.

    Raises:
        RemoteAPIError: If a provider call fails.
        AmbiguousMatchError: If several load balancers share the name.
    """
    if not desired.name:
        # Unset identity cannot be searched for; an empty filter would list everything
        return FindResult()

    try:
        records = cloud.list_load_balancers(desired.name)
    except CloudError as e:
        raise RemoteAPIError("list load balancers", desired.name, str(e)) from e

    if not records:
        logger.debug("Load balancer not found", extra={"lb_name": desired.name})
        return FindResult()
    if len(records) > 1:
        raise AmbiguousMatchError("load balancer", desired.name, len(records))

    record = records[0]
    actual = load_balancer_from_cloud(
        cloud,
        desired.lifecycle,
        record,
        track_security_group=desired.security_group is not None,
    )
    logger.debug(
        "Found load balancer",
        extra={"lb_name": desired.name, "lb_id": record.id, "port_id": record.vip_port_id},
    )
    return FindResult(actual=actual, patch=LoadBalancerPatch.from_record(record))
