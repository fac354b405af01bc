from __future__ import annotations

import pathlib

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr, field_validator
from typing import Callable, Dict, Literal, Union

from couchbase_dns_discovery.logging.models import LogLevelName

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    DNS_DISCOVERY_RECORD_NAME: StrictStr | None = None
    DNS_DISCOVERY_NAMESERVERS: StrictStr | None = None
    DNS_DISCOVERY_TIMEOUT: StrictFloat = 5.0
    DNS_DISCOVERY_TRIES: StrictInt | None = None
    DNS_DISCOVERY_STATIC_SERVERS: StrictStr | None = None
    DNS_DISCOVERY_LOG_LEVEL: LogLevelName = "info"
    DNS_DISCOVERY_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    DNS_DISCOVERY_LOGS_PATH: StrictStr | None = None

    @field_validator("DNS_DISCOVERY_LOGS_PATH")
    @classmethod
    def validate_logs_path(cls, logs_path: str | None):
        if logs_path and pathlib.Path(logs_path).suffix != ".json":
            raise ValueError("DNS_DISCOVERY_LOGS_PATH must name a .json file")

        return logs_path

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "DNS_DISCOVERY_RECORD_NAME": str,
            "DNS_DISCOVERY_NAMESERVERS": str,
            "DNS_DISCOVERY_TIMEOUT": float,
            "DNS_DISCOVERY_TRIES": int,
            "DNS_DISCOVERY_STATIC_SERVERS": str,
            "DNS_DISCOVERY_LOG_LEVEL": str,
            "DNS_DISCOVERY_LOG_OUTPUT": str,
            "DNS_DISCOVERY_LOGS_PATH": str,
        }

    @staticmethod
    def _split(value: str | None) -> list[str]:
        if value is None:
            return []

        return [item.strip() for item in value.split(",") if item.strip()]

    def get_nameservers(self) -> list[str]:
        return self._split(self.DNS_DISCOVERY_NAMESERVERS)

    def get_static_servers(self) -> list[str]:
        return self._split(self.DNS_DISCOVERY_STATIC_SERVERS)

    def get_lookup_client_config(self) -> dict:
        """Get SRV lookup client settings from environment settings."""
        return {
            'nameservers': self.get_nameservers() or None,
            'timeout_seconds': self.DNS_DISCOVERY_TIMEOUT,
            'tries': self.DNS_DISCOVERY_TRIES,
        }

    def get_logging_config(self) -> dict:
        """Get logging settings from environment settings."""
        return {
            'log_level': self.DNS_DISCOVERY_LOG_LEVEL,
            'log_output': self.DNS_DISCOVERY_LOG_OUTPUT,
        }
