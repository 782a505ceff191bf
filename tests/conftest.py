"""Shared fixtures: a scripted in-memory channel and a fake daemon socket."""

import asyncio
import shutil
import tempfile
from contextlib import asynccontextmanager

import pytest

from syslog_ng_ctl.exceptions import ControlChannelError


class FakeControlChannel:
    """
    ControlChannel fake that answers from a command -> response mapping.

    A response that is an exception instance is raised instead of returned.
    Every command sent is recorded in ``commands``.
    """

    def __init__(self, responses: dict[str, str | Exception] | None = None):
        self.responses = responses or {}
        self.commands: list[str] = []

    async def send_command(self, command: str) -> str:
        self.commands.append(command)
        response = self.responses.get(command)
        if response is None:
            raise ControlChannelError("fake.ctl", f"no response scripted for {command}")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_channel():
    """FakeControlChannel with no scripted responses."""
    return FakeControlChannel()


@pytest.fixture
def socket_path():
    """Short socket path (Unix socket paths are limited to ~100 bytes)."""
    tmpdir = tempfile.mkdtemp(prefix="sngctl-", dir="/tmp")
    yield f"{tmpdir}/syslog-ng.ctl"
    shutil.rmtree(tmpdir, ignore_errors=True)


class FakeDaemon:
    """
    Minimal control socket server.

    Replies to each command with the bytes from ``replies`` and then closes
    the connection. Commands without a reply are held open until the client
    disconnects, which lets tests exercise timeouts and cancellation.
    """

    def __init__(self, replies: dict[str, bytes]):
        self.replies = replies
        self.commands: list[str] = []
        self.received = asyncio.Event()
        self.disconnected = asyncio.Event()

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            command = (await reader.readline()).decode().rstrip("\n")
            self.commands.append(command)
            self.received.set()
            reply = self.replies.get(command)
            if reply is None:
                await reader.read()
                self.disconnected.set()
                return
            writer.write(reply)
            await writer.drain()
        finally:
            writer.close()


@pytest.fixture
def fake_daemon(socket_path):
    """Factory for a running FakeDaemon bound to socket_path."""

    @asynccontextmanager
    async def _start(replies: dict[str, bytes]):
        daemon = FakeDaemon(replies)
        server = await asyncio.start_unix_server(daemon.handle, path=socket_path)
        try:
            yield daemon
        finally:
            server.close()

    return _start
