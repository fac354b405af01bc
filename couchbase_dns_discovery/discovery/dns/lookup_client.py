"""
SRV record lookup for cluster discovery.

Wraps aiodns so the resolver only sees SRVRecord instances, in the
order the DNS server answered with them.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Protocol

import aiodns
import pycares

from couchbase_dns_discovery.discovery.models import SRVRecord

if TYPE_CHECKING:
    from couchbase_dns_discovery.env import Env


# Answers meaning the name has no SRV records, rather than a failed query.
EMPTY_ANSWER_CODES = frozenset({
    aiodns.error.ARES_ENODATA,
    aiodns.error.ARES_ENOTFOUND,
})


class DNSError(Exception):
    """Raised when DNS resolution fails."""

    def __init__(self, hostname: str, message: str):
        self.hostname = hostname
        super().__init__(f"DNS resolution failed for '{hostname}': {message}")


class LookupClient(Protocol):
    async def query_srv(self, record_name: str) -> Iterable[SRVRecord]:
        ...


@dataclass
class AiodnsLookupClient:
    """
    Queries DNS SRV records through aiodns.

    Usage:
        client = AiodnsLookupClient(nameservers=["10.0.0.2"])
        records = await client.query_srv("_couchbase._tcp.services.local")
        for record in records:
            print(f"{record.target}:{record.port} (priority={record.priority})")
    """

    nameservers: list[str] | None = None
    """Nameservers to query. None uses the system configuration."""

    timeout_seconds: float = 5.0
    """Timeout for a single SRV query."""

    tries: int | None = None
    """Attempts made by the underlying resolver before failing."""

    _resolver: aiodns.DNSResolver | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls, env: Env) -> AiodnsLookupClient:
        return cls(**env.get_lookup_client_config())

    def _get_resolver(self) -> aiodns.DNSResolver:
        # aiodns binds to the running loop, so it is created on first query.
        if self._resolver is None:
            options = {}
            if self.timeout_seconds:
                options["timeout"] = self.timeout_seconds

            if self.tries:
                options["tries"] = self.tries

            self._resolver = aiodns.DNSResolver(
                nameservers=self.nameservers,
                **options,
            )

        return self._resolver

    async def query_srv(self, record_name: str) -> list[SRVRecord]:
        """
        Query the SRV records for a service name.

        Args:
            record_name: The SRV record name to query
                         Example: _couchbase._tcp.services.local

        Returns:
            List of SRVRecord objects in answer order. Empty when the
            name exists without SRV data or does not exist.

        Raises:
            DNSError: If the query times out or fails
        """
        resolver = self._get_resolver()

        try:
            result = await asyncio.wait_for(
                resolver.query_dns(record_name, "SRV"),
                timeout=self.timeout_seconds,
            )

        except asyncio.TimeoutError:
            raise DNSError(
                record_name,
                f"SRV resolution timeout ({self.timeout_seconds}s)",
            )

        except aiodns.error.DNSError as exc:
            if exc.args and exc.args[0] in EMPTY_ANSWER_CODES:
                return []

            raise DNSError(record_name, f"SRV query failed: {exc}") from exc

        return [
            SRVRecord(
                priority=answer.data.priority,
                weight=answer.data.weight,
                port=answer.data.port,
                target=answer.data.target,
            )
            for answer in result.answer
            if answer.type == pycares.QUERY_TYPE_SRV
        ]

    async def close(self) -> None:
        if self._resolver is not None:
            await self._resolver.close()
            self._resolver = None
