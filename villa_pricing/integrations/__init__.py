"""Integration shortcuts."""

from .availability_client import (
    AvailabilityClient,
    AvailabilityClientError,
    build_availability_client,
)

__all__ = [
    "AvailabilityClient",
    "AvailabilityClientError",
    "build_availability_client",
]
