"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add tests to path for cloud_mock imports
tests_path = Path(__file__).parent
sys.path.insert(0, str(tests_path))

from cloud_mock import MockCloud  # noqa: E402

from lbreconciler.models import LoadBalancer, SecurityGroupRef  # noqa: E402

SUBNET_NAME = "subnet.k8s.local"
LB_NAME = "api.k8s.local"


@pytest.fixture
def cloud() -> MockCloud:
    """Provider with one subnet and one security group named after the load balancer."""
    mock = MockCloud()
    mock.state.add_subnet(SUBNET_NAME, subnet_id="subnet-1")
    mock.state.add_security_group(LB_NAME, group_id="sg-1")
    return mock


@pytest.fixture
def desired() -> LoadBalancer:
    """Desired load balancer with a security group."""
    return LoadBalancer(
        name=LB_NAME,
        subnet=SUBNET_NAME,
        security_group=SecurityGroupRef(name=LB_NAME),
    )
