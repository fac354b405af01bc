from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class SRVRecord:
    """Represents a DNS SRV record."""

    priority: int
    """Priority of the target host (lower values are preferred)."""

    weight: int
    """Weight for hosts with the same priority."""

    port: int
    """Port number of the service."""

    target: str
    """Target hostname, possibly terminated by a trailing dot."""
