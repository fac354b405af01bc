from .srv_record import SRVRecord


RESOLVED_URL_SCHEME = "http"
RESOLVED_URL_PATH = "/pools"


def to_resolved_url(record: SRVRecord) -> str:
    """
    Build the bootstrap URL for an SRV record.

    A single trailing dot is removed from the target, so
    ``couchbase1.services.local.`` on port 8091 becomes
    ``http://couchbase1.services.local:8091/pools``.
    """
    host = record.target
    if host.endswith("."):
        host = host[:-1]

    return f"{RESOLVED_URL_SCHEME}://{host}:{record.port}{RESOLVED_URL_PATH}"
