"""
DNS SRV discovery for Couchbase client bootstrap.

Usage:
    from couchbase_dns_discovery.discovery import (
        AiodnsLookupClient,
        ClientDefinition,
        DnsLookup,
    )
    from couchbase_dns_discovery.logging import Logger

    lookup = DnsLookup(AiodnsLookupClient(), Logger())
    definition = ClientDefinition()
    await lookup.apply(definition, "_couchbase._tcp.services.local")
"""

# Models
from couchbase_dns_discovery.discovery.models import (
    ClientDefinition as ClientDefinition,
    SRVRecord as SRVRecord,
    to_resolved_url as to_resolved_url,
)

# Errors
from couchbase_dns_discovery.discovery.errors import (
    InvalidArgumentError as InvalidArgumentError,
)

# DNS
from couchbase_dns_discovery.discovery.dns.lookup_client import (
    AiodnsLookupClient as AiodnsLookupClient,
    DNSError as DNSError,
    LookupClient as LookupClient,
)

# Lookup
from couchbase_dns_discovery.discovery.dns_lookup import (
    DnsLookup as DnsLookup,
    select_priority_tier as select_priority_tier,
)
from couchbase_dns_discovery.discovery.bootstrap import (
    DnsDiscoveryBootstrap as DnsDiscoveryBootstrap,
)
