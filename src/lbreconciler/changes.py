"""Field-wise delta between actual and desired descriptors.

Unset desired fields mean "don't care" and never produce a change.
The lifecycle is scheduler metadata and is not diffed.
"""

from __future__ import annotations

from .models import LoadBalancer

# Scalar fields compared by value
DIFFED_FIELDS: tuple[str, ...] = (
    "name",
    "id",
    "subnet",
    "vip_subnet_id",
    "port_id",
    "provider",
    "flavor_id",
)


def has_changes(changes: LoadBalancer | None) -> bool:
    """Return True if any field of the delta is set."""
    if changes is None:
        return False
    if changes.security_group is not None:
        return True
    return any(getattr(changes, name) is not None for name in DIFFED_FIELDS)


def compute_changes(
    actual: LoadBalancer | None,
    desired: LoadBalancer,
) -> LoadBalancer | None:
    """Compute desired minus actual.

    Returns:
        A copy of ``desired`` when actual is absent, a delta holding only the
        differing fields otherwise, or None when nothing differs.
    """
    if actual is None:
        return desired.model_copy(deep=True)

    delta = LoadBalancer(lifecycle=desired.lifecycle)
    for name in DIFFED_FIELDS:
        wanted = getattr(desired, name)
        if wanted is not None and wanted != getattr(actual, name):
            setattr(delta, name, wanted)

    group = desired.security_group
    if group is not None and not group.same_group(actual.security_group):
        delta.security_group = group.model_copy()

    return delta if has_changes(delta) else None
