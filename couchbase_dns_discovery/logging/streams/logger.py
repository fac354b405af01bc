from __future__ import annotations

import asyncio
import pathlib
import sys
from typing import (
    Callable,
    Dict,
    TypeVar,
)

from couchbase_dns_discovery.logging.models import Entry, Log

from .logger_stream import LoggerStream

T = TypeVar('T', bound=Entry)


class Logger:
    def __init__(self) -> None:
        self._streams: Dict[str, LoggerStream] = {}

    def __getitem__(self, name: str):

        if self._streams.get(name) is None:
            self._streams[name] = LoggerStream(name=name)

        return self._streams[name]

    def get_stream(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ):
        if name is None:
            name = 'default'

        self.configure(
            name=name,
            template=template,
            path=path,
        )

        return self._streams[name]

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ):
        if name is None:
            name = 'default'

        filename: str | None = None
        directory: str | None = None

        if path:
            logfile_path = pathlib.Path(path)
            is_logfile = len(logfile_path.suffix) > 0

            filename = logfile_path.name if is_logfile else None
            directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

        self._streams[name] = LoggerStream(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
        )

    async def log(
        self,
        entry: T,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if name is None:
            name = 'default'

        frame = sys._getframe(1)
        code = frame.f_code

        await self[name].log(
            Log(
                entry=entry,
                filename=code.co_filename,
                function_name=code.co_name,
                line_number=frame.f_lineno,
            ),
            template=template,
            path=path,
            filter=filter,
        )

    async def close(self):
        if len(self._streams) > 0:
            await asyncio.gather(*[
                stream.close() for stream in self._streams.values()
            ])
