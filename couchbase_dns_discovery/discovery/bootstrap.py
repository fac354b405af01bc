from __future__ import annotations

from couchbase_dns_discovery.discovery.dns.lookup_client import (
    AiodnsLookupClient,
    LookupClient,
)
from couchbase_dns_discovery.discovery.dns_lookup import DnsLookup
from couchbase_dns_discovery.discovery.logging_models import (
    DnsDiscoveryInfo,
    DnsDiscoveryWarning,
)
from couchbase_dns_discovery.discovery.models import ClientDefinition
from couchbase_dns_discovery.env import Env, load_env
from couchbase_dns_discovery.logging import Logger, LoggingConfig


class DnsDiscoveryBootstrap:
    """
    Startup step that fills a ClientDefinition from DNS.

    Falls back to DNS_DISCOVERY_STATIC_SERVERS when discovery produces
    no servers. Without a record name the definition is left as the
    caller configured it.

    Usage:
        bootstrap = DnsDiscoveryBootstrap.from_env()
        definition = await bootstrap.configure(ClientDefinition())
    """

    def __init__(
        self,
        env: Env | None = None,
        lookup_client: LookupClient | None = None,
        logger: Logger | None = None,
    ) -> None:
        if env is None:
            env = Env()

        self._default_lookup_client: AiodnsLookupClient | None = None
        if lookup_client is None:
            lookup_client = self._default_lookup_client = AiodnsLookupClient.from_env(env)

        if logger is None:
            LoggingConfig().update(**env.get_logging_config())
            logger = Logger()

            if env.DNS_DISCOVERY_LOGS_PATH:
                logger.configure(path=env.DNS_DISCOVERY_LOGS_PATH)

        self._env = env
        self._logger = logger
        self._logs_path = env.DNS_DISCOVERY_LOGS_PATH
        self._lookup = DnsLookup(lookup_client, logger)

    @classmethod
    def from_env(cls, env_file: str | None = None) -> DnsDiscoveryBootstrap:
        return cls(env=load_env(Env, env_file=env_file))

    async def configure(
        self,
        client_definition: ClientDefinition,
        record_name: str | None = None,
    ) -> ClientDefinition:
        if record_name is None:
            record_name = self._env.DNS_DISCOVERY_RECORD_NAME

        if not record_name:
            return client_definition

        await self._lookup.apply(client_definition, record_name)

        if client_definition.servers:
            await self._logger.log(
                DnsDiscoveryInfo(
                    message=f"Discovered {len(client_definition.servers)} servers for {record_name}",
                    record_name=record_name,
                    servers=list(client_definition.servers),
                ),
                path=self._logs_path,
            )

            return client_definition

        fallback_servers = self._env.get_static_servers()
        if fallback_servers:
            client_definition.servers = fallback_servers

            await self._logger.log(
                DnsDiscoveryWarning(
                    message=f"No servers discovered for {record_name}, using static servers",
                    record_name=record_name,
                    fallback_servers=fallback_servers,
                ),
                path=self._logs_path,
            )

        return client_definition

    async def close(self):
        if self._default_lookup_client is not None:
            await self._default_lookup_client.close()

        await self._logger.close()
