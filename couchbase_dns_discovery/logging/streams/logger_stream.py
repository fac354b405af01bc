import asyncio
import functools
import io
import os
import pathlib
import sys
from collections import defaultdict
from typing import (
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from couchbase_dns_discovery.logging.config.logging_config import LoggingConfig
from couchbase_dns_discovery.logging.config.stream_type import StreamType
from couchbase_dns_discovery.logging.models import Entry, Log

from .protocol import LoggerProtocol


T = TypeVar('T', bound=Entry)

DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
FALLBACK_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message} - {error}"


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()
        self._stream_writers: Dict[StreamType, asyncio.StreamWriter] = {}
        self._streams: Dict[StreamType, io.TextIOBase] = {}
        self._owned_writers: set[StreamType] = set()
        self._loop: asyncio.AbstractEventLoop | None = None

        self._files: Dict[str, io.FileIO] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False

    @property
    def name(self):
        return self._name


    async def initialize(
        self,
        stdout_writer: asyncio.StreamWriter | None = None,
        stderr_writer: asyncio.StreamWriter | None = None,
    ):
        async with self._init_lock:

            if self._initialized:
                return

            if self._loop is None:
                self._loop = asyncio.get_running_loop()

            if self._cwd is None:
                self._cwd = await self._loop.run_in_executor(
                    None,
                    os.getcwd,
                )

            if stdout_writer:
                self._stream_writers[StreamType.STDOUT] = stdout_writer

            if stderr_writer:
                self._stream_writers[StreamType.STDERR] = stderr_writer

            self._initialized = True

    async def _get_stream_writer(self, output: StreamType):
        if (
            output not in self._stream_writers
            and output not in self._streams
        ):
            source = sys.stdout if output == StreamType.STDOUT else sys.stderr
            await self._connect_stream(output, source)

        return self._stream_writers.get(output)

    async def _connect_stream(
        self,
        stream_type: StreamType,
        source: io.TextIOBase,
    ):
        stream = await self._dup_stream(source)
        self._streams[stream_type] = stream

        try:
            transport, protocol = await self._loop.connect_write_pipe(
                LoggerProtocol,
                stream,
            )

        except ValueError:
            # Regular files cannot back a pipe transport and are written
            # through the executor.
            return

        self._stream_writers[stream_type] = asyncio.StreamWriter(
            transport,
            protocol,
            None,
            self._loop,
        )
        self._owned_writers.add(stream_type)

    async def _dup_stream(self, source: io.TextIOBase):
        fileno = await self._loop.run_in_executor(
            None,
            source.fileno,
        )

        fileno_dup = await self._loop.run_in_executor(
            None,
            os.dup,
            fileno,
        )

        return await self._loop.run_in_executor(
            None,
            functools.partial(
                os.fdopen,
                fileno_dup,
                mode="w",
            )
        )

    async def log(
        self,
        entry: T | Log[T],
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        filename: str | None = None
        directory: str | None = None

        if path:
            logfile_path = pathlib.Path(path)
            is_logfile = len(logfile_path.suffix) > 0

            filename = logfile_path.name if is_logfile else None
            directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

        if template is None:
            template = self._default_template

        if filename is None:
            filename = self._default_logfile

        if directory is None:
            directory = self._default_log_directory

        if filename:
            await self._log_to_file(
                entry,
                filename=filename,
                directory=directory,
                filter=filter,
            )

        else:
            await self._log(
                entry,
                template=template,
                filter=filter,
            )

    def _to_log(self, entry_or_log: T | Log[T]) -> Log[T]:
        if isinstance(entry_or_log, Log):
            return entry_or_log

        log_file, line_number, function_name = self._find_caller()

        return Log(
            entry=entry_or_log,
            filename=log_file,
            function_name=function_name,
            line_number=line_number,
        )

    def _should_log(
        self,
        entry: Entry,
        filter: Callable[[T], bool] | None = None,
    ):
        if self._config.enabled(self._name, entry.level) is False:
            return False

        return filter is None or filter(entry) is not False

    async def _log(
        self,
        entry_or_log: T | Log[T],
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        log = self._to_log(entry_or_log)

        if self._should_log(log.entry, filter) is False:
            return

        if template is None:
            template = DEFAULT_TEMPLATE

        try:
            if self._initialized is False:
                await self.initialize()

            line = log.entry.to_template(
                template,
                context=self._to_context(log),
            )

            output = self._config.output
            stream_writer = await self._get_stream_writer(output)

            if stream_writer is None:
                await self._loop.run_in_executor(
                    None,
                    self._write_to_stream,
                    self._streams[output],
                    line,
                )

                return

            if stream_writer.is_closing():
                return

            stream_writer.write(line.encode() + b"\n")
            await stream_writer.drain()

        except Exception as err:
            await self._write_fallback(log, err)

    def _write_to_stream(self, stream: io.TextIOBase, line: str):
        stream.write(line + "\n")
        stream.flush()

    async def _write_fallback(self, log: Log[T], err: Exception):
        stderr = sys.stderr
        if stderr is None or getattr(stderr, "closed", False):
            return

        context = self._to_context(log)
        context["error"] = f"{type(err).__name__}: {err}"

        await asyncio.get_running_loop().run_in_executor(
            None,
            self._write_to_stream,
            stderr,
            log.entry.to_template(
                FALLBACK_TEMPLATE,
                context=context,
            ),
        )

    def _to_context(self, log: Log[T]):
        return {
            "filename": log.filename,
            "function_name": log.function_name,
            "line_number": log.line_number,
            "thread_id": log.thread_id,
            "timestamp": log.timestamp,
        }

    async def _log_to_file(
        self,
        entry_or_log: T | Log[T],
        filename: str,
        directory: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        log = self._to_log(entry_or_log)

        if self._should_log(log.entry, filter) is False:
            return

        try:
            if self._initialized is False:
                await self.initialize()

            logfile_path = self._to_logfile_path(filename, directory=directory)

            async with self._file_locks[logfile_path]:
                if (
                    logfile := self._files.get(logfile_path)
                ) is None or logfile.closed:
                    self._files[logfile_path] = await self._loop.run_in_executor(
                        None,
                        self._open_file,
                        logfile_path,
                    )

                await self._loop.run_in_executor(
                    None,
                    self._write_to_file,
                    log,
                    logfile_path,
                )

        except Exception as err:
            await self._write_fallback(log, err)

    def _open_file(self, logfile_path: str):
        pathlib.Path(logfile_path).parent.mkdir(parents=True, exist_ok=True)
        return open(logfile_path, "ab+")

    def _write_to_file(self, log: Log, logfile_path: str):
        logfile = self._files[logfile_path]
        logfile.write(msgspec.json.encode(log) + b"\n")
        logfile.flush()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        if filename_path.suffix != ".json":
            raise ValueError(f"Log file {filename} must be a JSON file")

        if directory is None:
            directory = self._cwd

        return os.path.join(directory, filename_path)

    def _find_caller(self):
        """
        Find the stack frame of the caller so that we can note the source
        file name, line number and function name.
        """
        frame = sys._getframe(4)
        code = frame.f_code

        return (
            code.co_filename,
            frame.f_lineno,
            code.co_name,
        )

    async def close(self):
        await asyncio.gather(
            *[writer.drain() for writer in self._stream_writers.values()]
        )

        for logfile_path, logfile in self._files.items():
            async with self._file_locks[logfile_path]:
                if logfile.closed is False:
                    await self._loop.run_in_executor(
                        None,
                        logfile.close,
                    )

        for stream_type, stream in self._streams.items():
            if stream_type in self._owned_writers:
                self._stream_writers[stream_type].close()

            elif stream.closed is False:
                stream.close()

        self._files.clear()
        self._streams.clear()
        self._stream_writers.clear()
        self._owned_writers.clear()
        self._initialized = False
