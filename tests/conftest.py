"""Pytest fixtures for fileuploader tests."""
import asyncio
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from fileuploader import PartParams, UploadConfig


@pytest.fixture
def make_file():
    """Factory creating temporary files of a given size."""
    paths = []

    def factory(size: int = 0, content: bytes = None) -> Path:
        fd, path = tempfile.mkstemp(suffix='.jpg')
        data = content if content is not None else bytes(i % 251 for i in range(size))
        os.write(fd, data)
        os.close(fd)
        paths.append(Path(path))
        return Path(path)

    yield factory

    for path in paths:
        path.unlink(missing_ok=True)


@pytest.fixture
def part_params():
    """Part parameters of the reference upload."""
    return PartParams(field_name='file', file_name='a.jpg', mime_type='image/jpeg')


@pytest.fixture
def make_config(part_params):
    """Factory for configurations pointing at a given URL."""
    def factory(server_url: str, **kwargs) -> UploadConfig:
        values = dict(
            server_url=server_url,
            headers=(('X-Test', '1'),),
            form_fields={'k': 'v'},
            part_params=part_params,
            segment_size=2048,
        )
        values.update(kwargs)
        return UploadConfig(**values)

    return factory


class RecordingServer:
    """Local aiohttp server recording multipart uploads."""

    def __init__(self, handler=None):
        self.requests = []
        self.release = asyncio.Event()
        self._handler = handler
        app = web.Application()
        app.router.add_post('/upload', self._handle)
        self._server = TestServer(app, host='127.0.0.1')

    @property
    def url(self) -> str:
        return str(self._server.make_url('/upload'))

    async def start(self) -> None:
        await self._server.start_server()

    async def close(self) -> None:
        self.release.set()
        await self._server.close()

    async def _handle(self, request: web.Request) -> web.StreamResponse:
        if self._handler is not None:
            return await self._handler(self, request)
        await self.record(request)
        return web.Response(text='{"status":"ok"}', content_type='application/json')

    async def record(self, request: web.Request) -> dict:
        """Parse and store a multipart request."""
        entry = {
            'headers': request.headers.copy(),
            'content_type': request.content_type,
            'fields': {},
            'files': {},
        }
        reader = await request.multipart()
        while True:
            part = await reader.next()
            if part is None:
                break
            if part.filename is not None:
                entry['files'][part.name] = {
                    'filename': part.filename,
                    'content_type': part.headers.get('Content-Type'),
                    'data': await part.read(),
                }
            else:
                entry['fields'][part.name] = await part.text()
        self.requests.append(entry)
        return entry


@pytest.fixture
def upload_server():
    """Factory starting a RecordingServer for the duration of a test."""
    @asynccontextmanager
    async def start(handler=None):
        server = RecordingServer(handler)
        await server.start()
        try:
            yield server
        finally:
            await server.close()

    return start
