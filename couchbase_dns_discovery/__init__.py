from .discovery import (
    AiodnsLookupClient as AiodnsLookupClient,
    ClientDefinition as ClientDefinition,
    DnsDiscoveryBootstrap as DnsDiscoveryBootstrap,
    DnsLookup as DnsLookup,
    DNSError as DNSError,
    InvalidArgumentError as InvalidArgumentError,
    SRVRecord as SRVRecord,
)
