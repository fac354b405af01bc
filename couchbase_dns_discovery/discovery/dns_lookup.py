"""
DNS SRV based bootstrap for Couchbase client definitions.

Resolves the nodes of a cluster from the SRV records of a service name
and replaces the server list of a ClientDefinition with them:

    _couchbase._tcp.services.local. 30 IN SRV 10 10 8091 couchbase1.services.local.
    _couchbase._tcp.services.local. 30 IN SRV 10 10 8091 couchbase2.services.local.
    _couchbase._tcp.services.local. 30 IN SRV 20 10 8091 couchbase3.services.local.  # backup

gives ["http://couchbase1.services.local:8091/pools",
"http://couchbase2.services.local:8091/pools"]. Only the lowest priority
value is used, and records keep the order the query returned them in.
Query failures never reach the caller: they are logged and leave the
server list empty.
"""

from typing import Iterable

from couchbase_dns_discovery.discovery.dns.lookup_client import LookupClient
from couchbase_dns_discovery.discovery.errors import InvalidArgumentError
from couchbase_dns_discovery.discovery.logging_models import DnsLookupError
from couchbase_dns_discovery.discovery.models import (
    ClientDefinition,
    SRVRecord,
    to_resolved_url,
)
from couchbase_dns_discovery.logging import Logger


def select_priority_tier(records: Iterable[SRVRecord]) -> list[SRVRecord]:
    """Return the records sharing the lowest priority, in their original order."""
    records = list(records)
    if not records:
        return []

    min_priority = min(record.priority for record in records)

    return [record for record in records if record.priority == min_priority]


class DnsLookup:
    def __init__(
        self,
        lookup_client: LookupClient,
        logger: Logger,
    ) -> None:
        if lookup_client is None:
            raise InvalidArgumentError("lookup_client")

        if logger is None:
            raise InvalidArgumentError("logger")

        self._lookup_client = lookup_client
        self._logger = logger

    async def apply(
        self,
        client_definition: ClientDefinition,
        record_name: str,
    ) -> None:
        """
        Replace ``client_definition.servers`` with the URLs of the
        preferred SRV records for ``record_name``.

        Raises:
            InvalidArgumentError: If client_definition or record_name is missing
        """
        if client_definition is None:
            raise InvalidArgumentError("client_definition")

        if not record_name:
            raise InvalidArgumentError("record_name")

        client_definition.servers = []

        try:
            records = await self._lookup_client.query_srv(record_name)

            servers = [
                to_resolved_url(record) for record in select_priority_tier(records)
            ]

        except Exception as err:
            await self._logger.log(
                DnsLookupError(
                    message=f"[apply] FAILED: SRV lookup failed for record_name={record_name}",
                    record_name=record_name,
                    error=str(err),
                    error_type=type(err).__name__,
                )
            )

            return

        client_definition.servers = servers
