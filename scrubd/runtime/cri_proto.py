"""Decoding CRI ListContainers responses from raw protobuf bytes."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from scrubd.runtime.models import Container

_MASK64 = (1 << 64) - 1


class CRIProtoError(ValueError):
    """Raised when protobuf data is malformed."""


@contextmanager
def _malformed(message: str) -> Iterator[None]:
    try:
        yield
    except CRIProtoError:
        raise CRIProtoError(message) from None


def _text(value: bytes) -> str:
    return bytes(value).decode("utf-8", errors="surrogateescape")


def consume_proto_varint(data: bytes) -> tuple[int, bytes]:
    """Read a varint of at most ten bytes, returning it and the rest."""
    value = 0
    for position, byte in enumerate(data):
        if position == 10:
            raise CRIProtoError("varint too long")
        value |= (byte & 0x7F) << (7 * position)
        if byte < 0x80:
            return value & _MASK64, data[position + 1 :]
    raise CRIProtoError("truncated varint")


def consume_proto_key(data: bytes) -> tuple[int, int, bytes]:
    """Read a field key, returning field number, wire type and the rest."""
    key, rest = consume_proto_varint(data)
    return key >> 3, key & 0x7, rest


def consume_proto_bytes(data: bytes) -> tuple[bytes, bytes]:
    """Read a length-delimited value, returning it and the rest."""
    size, rest = consume_proto_varint(data)
    if size > len(rest):
        raise CRIProtoError("length exceeds data")
    return rest[:size], rest[size:]


def skip_proto_value(data: bytes, wire: int) -> bytes:
    """Skip one value of the given wire type, returning the rest."""
    if wire == 0:
        return consume_proto_varint(data)[1]
    if wire == 1:
        if len(data) < 8:
            raise CRIProtoError("truncated fixed64")
        return data[8:]
    if wire == 2:
        return consume_proto_bytes(data)[1]
    if wire == 5:
        if len(data) < 4:
            raise CRIProtoError("truncated fixed32")
        return data[4:]
    raise CRIProtoError(f"unsupported wire type {wire}")


def cri_state_name(state: int) -> str:
    """Name a CRI container state."""
    return {0: "created", 1: "running", 2: "exited"}.get(state, "unknown")


def _first_string_field(data: bytes, context: str) -> str:
    while data:
        with _malformed(f"malformed CRI {context}: invalid field key"):
            field, wire, data = consume_proto_key(data)
        if field == 1 and wire == 2:
            with _malformed(f"malformed CRI {context}: invalid name"):
                value, _ = consume_proto_bytes(data)
            return _text(value)
        with _malformed(f"malformed CRI {context}: invalid field value"):
            data = skip_proto_value(data, wire)
    return ""


def parse_cri_metadata_name(data: bytes) -> str:
    """Return the name held in a ContainerMetadata message, or ""."""
    return _first_string_field(data, "metadata")


def parse_cri_image_name(data: bytes) -> str:
    """Return the image held in an ImageSpec message, or ""."""
    return _first_string_field(data, "image")


def parse_cri_container(data: bytes) -> Container:
    """Decode one CRI Container message."""
    container = Container()
    while data:
        with _malformed("malformed CRI container: invalid field key"):
            field, wire, data = consume_proto_key(data)
        if field == 1 and wire == 2:
            with _malformed("malformed CRI container: invalid id"):
                value, data = consume_proto_bytes(data)
            container.id = _text(value)
        elif field == 3 and wire == 2:
            with _malformed("malformed CRI container: invalid metadata"):
                value, data = consume_proto_bytes(data)
            name = parse_cri_metadata_name(value)
            if name:
                container.names = [name]
        elif field == 4 and wire == 2:
            with _malformed("malformed CRI container: invalid image"):
                value, data = consume_proto_bytes(data)
            container.image = parse_cri_image_name(value)
        elif field == 6 and wire == 0:
            with _malformed("malformed CRI container: invalid state"):
                state, data = consume_proto_varint(data)
            container.state = cri_state_name(state)
            container.status = container.state
        else:
            with _malformed("malformed CRI container: invalid field value"):
                data = skip_proto_value(data, wire)
    return container


def parse_cri_list_containers_response(data: bytes) -> list[Container]:
    """Decode a ListContainersResponse into containers."""
    containers: list[Container] = []
    while data:
        with _malformed("malformed CRI list containers response: invalid field key"):
            field, wire, data = consume_proto_key(data)
        if field == 1 and wire == 2:
            with _malformed("malformed CRI list containers response: invalid container message"):
                value, data = consume_proto_bytes(data)
            containers.append(parse_cri_container(value))
        else:
            with _malformed("malformed CRI list containers response: invalid field value"):
                data = skip_proto_value(data, wire)
    return containers