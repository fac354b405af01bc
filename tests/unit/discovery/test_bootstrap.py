from unittest.mock import MagicMock

import msgspec
import pytest

from couchbase_dns_discovery.discovery import (
    AiodnsLookupClient,
    ClientDefinition,
    DnsDiscoveryBootstrap,
)
from couchbase_dns_discovery.discovery.logging_models import (
    DnsDiscoveryInfo,
    DnsDiscoveryWarning,
    DnsLookupError,
)
from couchbase_dns_discovery.env import Env
from couchbase_dns_discovery.logging import LoggingConfig, LogLevel


STATIC_SERVERS = "http://static1.local:8091/pools,http://static2.local:8091/pools"


class TestConfigure:
    @pytest.mark.asyncio
    async def test_without_record_name_leaves_definition_untouched(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
    ):
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(),
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )
        client_definition = ClientDefinition(servers=["http://static:8091/pools"])

        result = await bootstrap.configure(client_definition)

        assert result is client_definition
        assert client_definition.servers == ["http://static:8091/pools"]
        mock_lookup_client.query_srv.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uses_record_name_from_env(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
        record_name: str,
        srv_record_factory,
    ):
        mock_lookup_client.query_srv.return_value = [srv_record_factory("a.local.")]
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(DNS_DISCOVERY_RECORD_NAME=record_name),
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )

        client_definition = await bootstrap.configure(ClientDefinition())

        mock_lookup_client.query_srv.assert_awaited_once_with(record_name)
        assert client_definition.servers == ["http://a.local:8091/pools"]

        entry = mock_logger.log.await_args.args[0]
        assert isinstance(entry, DnsDiscoveryInfo)
        assert entry.servers == ["http://a.local:8091/pools"]

    @pytest.mark.asyncio
    async def test_record_name_argument_overrides_env(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
    ):
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(DNS_DISCOVERY_RECORD_NAME="_couchbase._tcp.env.local"),
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )

        await bootstrap.configure(ClientDefinition(), "_couchbase._tcp.arg.local")

        mock_lookup_client.query_srv.assert_awaited_once_with("_couchbase._tcp.arg.local")

    @pytest.mark.asyncio
    async def test_empty_discovery_without_fallback_stays_empty(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
        record_name: str,
    ):
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(DNS_DISCOVERY_RECORD_NAME=record_name),
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )

        client_definition = await bootstrap.configure(
            ClientDefinition(servers=["http://stale:8091/pools"])
        )

        assert client_definition.servers == []
        mock_logger.log.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_discovery_uses_static_servers(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
        record_name: str,
    ):
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(
                DNS_DISCOVERY_RECORD_NAME=record_name,
                DNS_DISCOVERY_STATIC_SERVERS=STATIC_SERVERS,
            ),
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )

        client_definition = await bootstrap.configure(ClientDefinition())

        assert client_definition.servers == [
            "http://static1.local:8091/pools",
            "http://static2.local:8091/pools",
        ]

        entry = mock_logger.log.await_args.args[0]
        assert isinstance(entry, DnsDiscoveryWarning)
        assert entry.level == LogLevel.WARN

    @pytest.mark.asyncio
    async def test_failed_discovery_logs_error_then_falls_back(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
        record_name: str,
    ):
        mock_lookup_client.query_srv.side_effect = Exception("Badness Happened")
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(
                DNS_DISCOVERY_RECORD_NAME=record_name,
                DNS_DISCOVERY_STATIC_SERVERS=STATIC_SERVERS,
            ),
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )

        client_definition = await bootstrap.configure(ClientDefinition())

        assert len(client_definition.servers) == 2

        entries = [call.args[0] for call in mock_logger.log.await_args_list]
        assert [type(entry) for entry in entries] == [DnsLookupError, DnsDiscoveryWarning]

    @pytest.mark.asyncio
    async def test_logs_path_passed_to_logger(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
        record_name: str,
        srv_record_factory,
        tmp_path,
    ):
        logs_path = str(tmp_path / "discovery.json")
        mock_lookup_client.query_srv.return_value = [srv_record_factory("a.local.")]
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(
                DNS_DISCOVERY_RECORD_NAME=record_name,
                DNS_DISCOVERY_LOGS_PATH=logs_path,
            ),
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )

        await bootstrap.configure(ClientDefinition())

        assert mock_logger.log.await_args.kwargs["path"] == logs_path

    @pytest.mark.asyncio
    async def test_close_closes_logger(
        self,
        mock_lookup_client: MagicMock,
        mock_logger: MagicMock,
    ):
        bootstrap = DnsDiscoveryBootstrap(
            lookup_client=mock_lookup_client,
            logger=mock_logger,
        )

        await bootstrap.close()

        mock_logger.close.assert_awaited_once()


    @pytest.mark.asyncio
    async def test_lookup_error_written_to_logs_path(
        self,
        mock_lookup_client: MagicMock,
        record_name: str,
        tmp_path,
    ):
        logs_path = tmp_path / "logs" / "discovery.json"
        mock_lookup_client.query_srv.side_effect = Exception("Badness Happened")
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(
                DNS_DISCOVERY_RECORD_NAME=record_name,
                DNS_DISCOVERY_STATIC_SERVERS=STATIC_SERVERS,
                DNS_DISCOVERY_LOGS_PATH=str(logs_path),
            ),
            lookup_client=mock_lookup_client,
        )

        await bootstrap.configure(ClientDefinition())
        await bootstrap.close()

        logs = [msgspec.json.decode(line) for line in logs_path.read_bytes().splitlines()]
        assert [log["entry"]["level"] for log in logs] == ["ERROR", "WARN"]

        error_log = logs[0]
        assert error_log["function_name"] == "apply"
        assert error_log["entry"]["record_name"] == record_name
        assert error_log["entry"]["error"] == "Badness Happened"


class TestDefaults:
    def test_builds_default_collaborators(self):
        bootstrap = DnsDiscoveryBootstrap(
            env=Env(
                DNS_DISCOVERY_LOG_LEVEL="error",
                DNS_DISCOVERY_LOG_OUTPUT="stdout",
            ),
        )

        assert isinstance(bootstrap._lookup._lookup_client, AiodnsLookupClient)

        config = LoggingConfig()
        assert config.enabled("default", LogLevel.ERROR)
        assert config.enabled("default", LogLevel.WARN) is False
        assert config.output.value == "stdout"

    def test_from_env_reads_env_file(self, tmp_path, monkeypatch):
        for envar_name in Env.types_map():
            monkeypatch.delenv(envar_name, raising=False)

        env_file = tmp_path / ".env"
        env_file.write_text(
            "DNS_DISCOVERY_RECORD_NAME=_couchbase._tcp.services.local\n"
            "DNS_DISCOVERY_TIMEOUT=2.5\n"
        )

        bootstrap = DnsDiscoveryBootstrap.from_env(env_file=str(env_file))

        assert bootstrap._env.DNS_DISCOVERY_RECORD_NAME == "_couchbase._tcp.services.local"
        assert bootstrap._lookup._lookup_client.timeout_seconds == 2.5
