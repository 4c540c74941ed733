"""Domain probes for infrastructure adapters.

Adapters report what happened to tenant databases (connected, provisioned,
tables ensured, disposed) through these probes instead of logging directly.
"""

from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)
from shared_kernel.observability_context import ObservationContext

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "ObservationContext",
]
