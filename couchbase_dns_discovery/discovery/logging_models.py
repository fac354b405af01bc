from couchbase_dns_discovery.logging.models import Entry, LogLevel


class DnsLookupError(Entry, kw_only=True):
    record_name: str
    error: str
    error_type: str
    level: LogLevel = LogLevel.ERROR


class DnsDiscoveryWarning(Entry, kw_only=True):
    record_name: str
    fallback_servers: list[str]
    level: LogLevel = LogLevel.WARN


class DnsDiscoveryInfo(Entry, kw_only=True):
    record_name: str
    servers: list[str]
    level: LogLevel = LogLevel.INFO
