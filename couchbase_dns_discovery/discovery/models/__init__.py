from .client_definition import ClientDefinition as ClientDefinition
from .resolved_url import to_resolved_url as to_resolved_url
from .srv_record import SRVRecord as SRVRecord
