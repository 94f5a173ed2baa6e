"""Load balancer spec file loading with validation.

Spec files hold the desired descriptor, either flat or wrapped in a
Kubernetes-style envelope:

```yaml
apiVersion: lbreconciler/v1
kind: LoadBalancer
metadata:
  name: api
spec:
  name: api.k8s.local
  subnet: subnet.k8s.local
  securityGroup:
    name: api.k8s.local
```
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .config import MAX_SPEC_FILE_SIZE_BYTES
from .models import LoadBalancer

logger = logging.getLogger(__name__)

SPEC_KIND = "LoadBalancer"


class SpecLoadError(Exception):
    """Raised when spec loading or validation fails."""

    pass


def load_load_balancer_spec(spec_path: Path) -> LoadBalancer:
    """Load and validate a desired load balancer descriptor from YAML.

    Args:
        spec_path: Path to the spec file.

    Returns:
        Validated descriptor.

    Raises:
        SpecLoadError: If the spec cannot be loaded or fails validation.
    """
    if not spec_path.exists():
        raise SpecLoadError(f"Spec file not found: {spec_path}")

    try:
        file_size = spec_path.stat().st_size
    except OSError as e:
        raise SpecLoadError(f"Failed to stat spec file {spec_path}: {e}") from e

    if file_size > MAX_SPEC_FILE_SIZE_BYTES:
        raise SpecLoadError(
            f"Spec file exceeds maximum size of {MAX_SPEC_FILE_SIZE_BYTES} bytes: {spec_path}"
        )

    try:
        content = spec_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SpecLoadError(f"Failed to read spec file {spec_path}: {e}") from e

    try:
        raw_data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"Invalid YAML in {spec_path}: {e}") from e

    if not isinstance(raw_data, dict):
        raise SpecLoadError(f"Spec file must contain a YAML mapping: {spec_path}")

    if "apiVersion" in raw_data and "spec" in raw_data:
        kind = raw_data.get("kind", SPEC_KIND)
        if kind != SPEC_KIND:
            raise SpecLoadError(f"Unsupported kind {kind!r} in {spec_path}, expected {SPEC_KIND}")
        spec_data = raw_data.get("spec")
        if not isinstance(spec_data, dict):
            raise SpecLoadError(f"Spec section must be a mapping: {spec_path}")
    else:
        spec_data = raw_data

    try:
        descriptor = LoadBalancer.model_validate(spec_data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            msg = error["msg"]
            errors.append(f"  - {loc}: {msg}")

        error_list = "\n".join(errors)
        raise SpecLoadError(f"Validation failed for {spec_path}:\n{error_list}") from e

    logger.info("Loaded load balancer spec '%s' from %s", descriptor.name, spec_path)
    return descriptor
