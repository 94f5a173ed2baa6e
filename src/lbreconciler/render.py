"""Converge the remote load balancer toward the desired descriptor.

Two paths:
1. Creation (actual absent): resolve subnet, create, record remote-assigned
   fields on ``desired``, attach the security group to the VIP port.
2. Repair (actual present): make sure the VIP port carries the desired
   security group first. This heals a previous pass that created the load
   balancer but failed to update the port.

No other field of an existing load balancer is ever changed.
"""

from __future__ import annotations

import logging
from enum import Enum

from .cloud import CloudError, LoadBalancerCloud
from .errors import ConfigurationResolutionError, RemoteAPIError
from .models import LoadBalancer, LoadBalancerPatch, PortRecord, SecurityGroupRef

logger = logging.getLogger(__name__)


class RenderAction(str, Enum):
    """What render did to the remote system."""

    CREATED = "created"
    PORT_UPDATED = "port_updated"
    NO_OP = "no_op"


def resolve_subnet_id(cloud: LoadBalancerCloud, subnet_name: str | None) -> str:
    """Resolve a subnet name to exactly one subnet id."""
    if not subnet_name:
        raise ConfigurationResolutionError("subnet", subnet_name, 0)

    try:
        subnets = cloud.list_subnets(subnet_name)
    except CloudError as e:
        raise RemoteAPIError("list subnets", subnet_name, str(e)) from e

    if len(subnets) != 1:
        raise ConfigurationResolutionError("subnet", subnet_name, len(subnets))
    return subnets[0].id


def resolve_security_group_id(cloud: LoadBalancerCloud, group: SecurityGroupRef) -> str:
    """Return the group's id, looking it up by name when not yet known."""
    if group.id is not None:
        return group.id

    try:
        groups = cloud.list_security_groups(group.name)
    except CloudError as e:
        raise RemoteAPIError("list security groups", group.name, str(e)) from e

    if len(groups) != 1:
        raise ConfigurationResolutionError("security group", group.name, len(groups))
    group.id = groups[0].id
    return group.id


def port_has_security_group(port: PortRecord, group_id: str) -> bool:
    """The desired group must be the first entry of the port's list."""
    return len(port.security_groups) >= 1 and port.security_groups[0] == group_id


def _set_port_security_group(cloud: LoadBalancerCloud, port_id: str, group_id: str) -> None:
    try:
        cloud.update_port_security_groups(port_id, [group_id])
    except CloudError as e:
        raise RemoteAPIError("update security group for port", port_id, str(e)) from e


def render(
    cloud: LoadBalancerCloud,
    actual: LoadBalancer | None,
    desired: LoadBalancer,
    changes: LoadBalancer | None,
) -> RenderAction:
    """Apply the delta to the provider.

    ``changes`` is accepted for symmetry with check_changes; render decides
    from ``actual`` and ``desired`` alone so that it can repair drift the
    delta does not show.

    Raises:
        ConfigurationResolutionError: If the subnet or security group name
            does not resolve to exactly one object.
        RemoteAPIError: If a provider call fails.
    """
    if actual is None:
        return _create(cloud, desired)
    return _repair(cloud, actual, desired)


def _create(cloud: LoadBalancerCloud, desired: LoadBalancer) -> RenderAction:
    logger.info(
        "Creating load balancer",
        extra={"lb_name": desired.name, "subnet": desired.subnet},
    )

    subnet_id = resolve_subnet_id(cloud, desired.subnet)

    try:
        record = cloud.create_load_balancer(
            name=desired.name or "",
            vip_subnet_id=subnet_id,
            flavor_id=desired.flavor_id,
        )
    except CloudError as e:
        raise RemoteAPIError("create load balancer", desired.name, str(e)) from e

    LoadBalancerPatch.from_record(record).apply_to(desired)
    logger.info(
        "Created load balancer",
        extra={"lb_name": record.name, "lb_id": record.id, "port_id": record.vip_port_id},
    )

    if desired.security_group is not None:
        # Load balancer exists from here on; a failure leaves the port for repair
        group_id = resolve_security_group_id(cloud, desired.security_group)
        _set_port_security_group(cloud, record.vip_port_id, group_id)

    return RenderAction.CREATED


def _repair(cloud: LoadBalancerCloud, actual: LoadBalancer, desired: LoadBalancer) -> RenderAction:
    port_id = actual.port_id or ""
    try:
        port = cloud.get_port(port_id)
    except CloudError as e:
        raise RemoteAPIError("get port", port_id, str(e)) from e

    if desired.security_group is not None:
        group_id = resolve_security_group_id(cloud, desired.security_group)
        if not port_has_security_group(port, group_id):
            logger.info(
                "Repairing security group on load balancer port",
                extra={
                    "lb_name": actual.name,
                    "port_id": port_id,
                    "security_group_id": group_id,
                    "current_security_groups": list(port.security_groups),
                },
            )
            _set_port_security_group(cloud, port_id, group_id)
            return RenderAction.PORT_UPDATED

    logger.debug("Load balancer render did nothing", extra={"lb_name": actual.name})
    return RenderAction.NO_OP
