"""Load balancer resource descriptor and remote records.

The same ``LoadBalancer`` model plays three roles during one pass:
1. desired: operator intent, remote-assigned fields usually unset
2. actual: reconstructed from the provider, assigned fields always set
3. delta: field-wise difference, only set fields are meaningful

Remote records are plain frozen dataclasses returned by the cloud boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field

# Provisioning status values reported by the load balancer service
ACTIVE_STATUS = "ACTIVE"
ERROR_STATUS = "ERROR"


class Lifecycle(str, Enum):
    """How the scheduler treats a unit.

    Passed through untouched by discovery, validation and convergence.
    Only the task's run method interprets it.
    """

    SYNC = "Sync"
    IGNORE = "Ignore"
    WARN_IF_INSUFFICIENT_ACCESS = "WarnIfInsufficientAccess"
    EXISTS_AND_VALIDATES = "ExistsAndValidates"
    EXISTS_AND_WARN_IF_CHANGES = "ExistsAndWarnIfChanges"


class SecurityGroupRef(BaseModel):
    """Weak reference to a separately managed security group.

    ``id`` may be unset in the desired state; it is resolved by name.
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    name: Annotated[str, Field(min_length=1)]
    id: str | None = None

    def same_group(self, other: SecurityGroupRef | None) -> bool:
        """Compare by id when both ids are known, by name otherwise."""
        if other is None:
            return False
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return self.name == other.name


class LoadBalancer(BaseModel):
    """Load balancer descriptor (desired, actual or delta)."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    name: str | None = Field(None, min_length=1)
    id: str | None = None
    subnet: str | None = Field(None, min_length=1)
    vip_subnet_id: str | None = Field(None, alias="vipSubnetId")
    port_id: str | None = Field(None, alias="portId")
    provider: str | None = None
    flavor_id: str | None = Field(None, alias="flavorId")
    security_group: SecurityGroupRef | None = Field(None, alias="securityGroup")
    lifecycle: Lifecycle = Lifecycle.SYNC


@dataclass(frozen=True)
class LoadBalancerRecord:
    """Load balancer as reported by the provider."""

    id: str
    name: str
    vip_subnet_id: str
    vip_port_id: str
    provider: str = ""
    flavor_id: str = ""
    provisioning_status: str = ""


@dataclass(frozen=True)
class SubnetRecord:
    """Subnet as reported by the provider."""

    id: str
    name: str


@dataclass(frozen=True)
class PortRecord:
    """Network port with its security-group identity list (ordered)."""

    id: str
    security_groups: tuple[str, ...] = ()


@dataclass(frozen=True)
class SecurityGroupRecord:
    """Security group as reported by the provider."""

    id: str
    name: str


@dataclass(frozen=True)
class LoadBalancerPatch:
    """Remote-assigned fields to copy onto a caller's desired descriptor.

    Returned by discovery instead of mutating the caller's descriptor.
    """

    id: str
    port_id: str
    vip_subnet_id: str
    provider: str
    flavor_id: str

    @classmethod
    def from_record(cls, record: LoadBalancerRecord) -> LoadBalancerPatch:
        """Build a patch from a provider record."""
        return cls(
            id=record.id,
            port_id=record.vip_port_id,
            vip_subnet_id=record.vip_subnet_id,
            provider=record.provider,
            flavor_id=record.flavor_id,
        )

    def apply_to(self, descriptor: LoadBalancer) -> None:
        """Write the remote-assigned fields onto a descriptor in place."""
        descriptor.id = self.id
        descriptor.port_id = self.port_id
        descriptor.vip_subnet_id = self.vip_subnet_id
        descriptor.provider = self.provider
        descriptor.flavor_id = self.flavor_id
