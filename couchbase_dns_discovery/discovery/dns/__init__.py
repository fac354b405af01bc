"""DNS query components for the discovery system."""

from couchbase_dns_discovery.discovery.dns.lookup_client import (
    AiodnsLookupClient as AiodnsLookupClient,
    DNSError as DNSError,
    LookupClient as LookupClient,
)
