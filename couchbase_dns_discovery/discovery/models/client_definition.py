from dataclasses import dataclass, field


@dataclass(slots=True)
class ClientDefinition:
    """
    Client configuration for connecting to a Couchbase cluster.

    Only ``servers`` is populated by DNS discovery, every other field
    belongs to the caller.
    """

    servers: list[str] = field(default_factory=list)
    """Bootstrap URLs of the cluster nodes, in connection order."""

    username: str | None = None
    password: str | None = None
    bucket: str | None = None
