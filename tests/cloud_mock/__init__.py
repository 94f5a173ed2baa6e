"""Provider mock for load balancer reconciliation tests.

Provides an in-memory implementation of the LoadBalancerCloud protocol
so discovery, render and the poller can be tested without a provider.

Key Features:
- In-memory state for load balancers, subnets, security groups and ports
- Call log for asserting on remote mutations
- Failure injection per operation
- Scripted provisioning-status sequences

Usage:
    from cloud_mock import MockCloud

    cloud = MockCloud()
    cloud.state.add_subnet("subnet-a")
    task = LoadBalancerTask(LoadBalancer(name="lb1", subnet="subnet-a"))
    task.run(cloud)
    assert cloud.mutation_count == 1
"""

from .cloud import MUTATING_OPERATIONS, MockCall, MockCloud
from .state import MockCloudState

__all__ = [
    "MUTATING_OPERATIONS",
    "MockCall",
    "MockCloud",
    "MockCloudState",
]
