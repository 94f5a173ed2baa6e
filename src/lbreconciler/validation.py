"""Admissibility checks for a requested load balancer transition."""

from __future__ import annotations

from .errors import ImmutableFieldError, RequiredFieldError
from .models import LoadBalancer


def check_changes(
    actual: LoadBalancer | None,
    desired: LoadBalancer,
    changes: LoadBalancer | None,
) -> None:
    """Reject illegal transitions.

    On creation only ``name`` is required. On update ``id`` and ``name`` are
    immutable; every other field is allowed here because render only ever
    acts on the security group of an existing load balancer.

    Raises:
        RequiredFieldError: If creating without a name.
        ImmutableFieldError: If the delta changes ``id`` or ``name``.
    """
    if actual is None:
        if not desired.name:
            raise RequiredFieldError("name")
        return

    if changes is None:
        return
    if changes.id is not None:
        raise ImmutableFieldError("id")
    if changes.name is not None:
        raise ImmutableFieldError("name")
