import contextvars
from typing import List, Literal

from couchbase_dns_discovery.logging.models import LogLevel, LogLevelName
from .log_level_map import LogLevelMap
from .stream_type import StreamType


LogOutput = Literal['stdout', 'stderr']

LEVEL_RANKS = LogLevelMap()

_minimum_level = contextvars.ContextVar("_minimum_level", default=LogLevel.INFO)
_disabled_loggers = contextvars.ContextVar("_disabled_loggers", default=())
_output = contextvars.ContextVar("_output", default=StreamType.STDERR)


class LoggingConfig:
    """
    Process-wide switches read by every LoggerStream: the minimum
    level, the stream console entries go to, and the names of
    silenced loggers.
    """

    def update(
        self,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
        disabled_loggers: List[str] | None = None,
    ):
        if log_level:
            _minimum_level.set(LogLevel.to_level(log_level))

        if log_output:
            _output.set(StreamType(log_output))

        if disabled_loggers is not None:
            _disabled_loggers.set(tuple(disabled_loggers))

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        if logger_name in _disabled_loggers.get():
            return False

        return LEVEL_RANKS[log_level] >= LEVEL_RANKS[_minimum_level.get()]

    @property
    def output(self) -> StreamType:
        return _output.get()
