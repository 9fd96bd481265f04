"""Decoding of the channel list reported by the editor process."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from nvgrid.events import ParseError

logger = logging.getLogger(__name__)

_U64_LIMIT = 1 << 64


def _expect_map(value: Any) -> list[tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return list(value.items())
    raise ParseError("map", value)


def _expect_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise ParseError("string", value)


def _expect_u64(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < _U64_LIMIT:
        return value
    raise ParseError("u64", value)


class ChannelStreamType(enum.Enum):
    STDIO = "stdio"
    STDERR = "stderr"
    SOCKET = "socket"
    JOB = "job"


class ChannelMode(enum.Enum):
    BYTES = "bytes"
    TERMINAL = "terminal"
    RPC = "rpc"


class ClientType(enum.Enum):
    REMOTE = "remote"
    UI = "ui"
    EMBEDDER = "embedder"
    HOST = "host"
    PLUGIN = "plugin"


@dataclass
class ClientVersion:
    """A client's version as it registered itself."""

    major: int = 0
    minor: Optional[int] = None
    patch: Optional[int] = None
    prerelease: Optional[str] = None
    commit: Optional[str] = None


@dataclass
class ClientInfo:
    """What a client told the editor about itself."""

    name: str = ""
    version: ClientVersion = field(default_factory=ClientVersion)
    client_type: ClientType = ClientType.REMOTE


@dataclass
class ChannelInfo:
    """One open channel of the editor process."""

    id: int = 0
    stream: ChannelStreamType = ChannelStreamType.STDIO
    mode: ChannelMode = ChannelMode.BYTES
    pty: Optional[str] = None
    buffer: Optional[str] = None
    client: Optional[ClientInfo] = None


def _parse_enum(enum_type: type[enum.Enum], value: Any) -> Any:
    name = _expect_string(value)
    try:
        return enum_type(name)
    except ValueError:
        raise ParseError() from None


def parse_channel_stream_type(value: Any) -> ChannelStreamType:
    """Decode a channel's stream name; unknown names raise ParseError."""
    return _parse_enum(ChannelStreamType, value)


def parse_channel_mode(value: Any) -> ChannelMode:
    """Decode a channel's mode name; unknown names raise ParseError."""
    return _parse_enum(ChannelMode, value)


def parse_client_type(value: Any) -> ClientType:
    """Decode a client type name; unknown names raise ParseError."""
    return _parse_enum(ClientType, value)


def parse_client_version(value: Any) -> ClientVersion:
    """Decode a client version map; unknown keys are ignored."""
    version = ClientVersion()
    for name, item in _expect_map(value):
        if not isinstance(name, str):
            logger.info("Invalid client version format")
            continue
        if name == "major":
            version.major = _expect_u64(item)
        elif name == "minor":
            version.minor = _expect_u64(item)
        elif name == "patch":
            version.patch = _expect_u64(item)
        elif name == "prerelease":
            version.prerelease = _expect_string(item)
        elif name == "commit":
            version.commit = _expect_string(item)
        else:
            logger.info("Ignored client version property: %s", name)
    return version


def parse_client_info(value: Any) -> ClientInfo:
    """Decode a client info map; unknown keys are ignored."""
    info = ClientInfo()
    for name, item in _expect_map(value):
        if not isinstance(name, str):
            logger.info("Invalid client info format")
            continue
        if name == "name":
            info.name = _expect_string(item)
        elif name == "version":
            info.version = parse_client_version(item)
        elif name == "type":
            info.client_type = parse_client_type(item)
        else:
            logger.info("Ignored client type property: %s", name)
    return info


def parse_channel_info(value: Any) -> ChannelInfo:
    """Decode one channel info map; unknown keys are ignored."""
    channel = ChannelInfo()
    for name, item in _expect_map(value):
        if not isinstance(name, str):
            logger.info("Invalid channel info format")
            continue
        if name == "id":
            channel.id = _expect_u64(item)
        elif name == "stream":
            channel.stream = parse_channel_stream_type(item)
        elif name == "mode":
            channel.mode = parse_channel_mode(item)
        elif name == "pty":
            channel.pty = _expect_string(item)
        elif name == "buffer":
            channel.buffer = _expect_string(item)
        elif name == "client":
            channel.client = parse_client_info(item)
        else:
            logger.info("Ignored channel info property: %s", name)
    return channel


def parse_channel_list(channel_infos: Iterable[Any]) -> list[ChannelInfo]:
    """Decode every channel in the list; the first malformed one raises."""
    return [parse_channel_info(info) for info in channel_infos]


def find_channel_id(channel_list: Iterable[ChannelInfo], client_name: str) -> int | None:
    """Return the id of the first channel whose client has this name, or None."""
    return next(
        (
            channel.id
            for channel in channel_list
            if channel.client is not None and channel.client.name == client_name
        ),
        None,
    )