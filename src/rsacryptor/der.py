"""Minimal DER reader for walking RSA key structures.

Only what the key header code needs: decoding tag/length headers in short and long form, and encoding lengths back
in canonical shortest form. Every index derived from a length field is validated against the buffer before use.

Typical usage example:

    node = read_node(data, 0, SEQUENCE)
    first = read_node(data, node.start)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

from rsacryptor.errors import MalformedKeyData

INTEGER = 0x02
BIT_STRING = 0x03
OCTET_STRING = 0x04
NULL = 0x05
OBJECT_IDENTIFIER = 0x06
SEQUENCE = 0x30

TAG_NAMES = {
    INTEGER: "INTEGER",
    BIT_STRING: "BIT STRING",
    OCTET_STRING: "OCTET STRING",
    NULL: "NULL",
    OBJECT_IDENTIFIER: "OBJECT IDENTIFIER",
    SEQUENCE: "SEQUENCE",
}


class DerNode(typing.NamedTuple):
    """A decoded tag/length header and the position of its value within the source buffer.

    Attributes:
        tag: The tag byte.
        offset: Offset of the tag byte.
        start: Offset of the first value byte.
        length: Length of the value.
    """
    tag: int
    offset: int
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def value(self, data: bytes) -> bytes:
        return data[self.start:self.end]

    def tlv(self, data: bytes) -> bytes:
        """The complete tag, length and value bytes."""
        return data[self.offset:self.end]


def read_header(data: bytes, offset: int) -> tuple[int, int]:
    """Decodes the tag/length header starting at offset.

    Args:
        data: The DER buffer.
        offset: Offset of the tag byte.

    Returns:
        The offset of the value and its length.

    Raises:
        MalformedKeyData: If the buffer is too short for the header or its length bytes, or the length uses the
            indefinite form.
    """
    if offset < 0 or len(data) < offset + 2:
        raise MalformedKeyData(f"Buffer too short for a DER header at offset {offset}")
    size = data[offset + 1]
    i = offset + 2
    if size < 0x80:
        return i, size
    count = size & 0x7f
    if count == 0:
        raise MalformedKeyData(f"Indefinite DER length at offset {offset + 1}")
    if len(data) < i + count:
        raise MalformedKeyData(f"DER length bytes at offset {offset + 1} overrun the buffer")
    return i + count, int.from_bytes(data[i:i + count], byteorder="big", signed=False)


def read_node(data: bytes, offset: int, expected_tag: int | None = None) -> DerNode:
    """Decodes the header at offset and checks the value fits inside the buffer.

    Args:
        data: The DER buffer.
        offset: Offset of the tag byte.
        expected_tag: If given, the tag the element must carry.

    Returns:
        The decoded node.

    Raises:
        MalformedKeyData: On a tag mismatch, or if header or value overrun the buffer.
    """
    if offset < 0 or offset >= len(data):
        raise MalformedKeyData(f"Expected a DER element at offset {offset}, buffer ends at {len(data)}")
    tag = data[offset]
    if expected_tag is not None and tag != expected_tag:
        raise MalformedKeyData(f"Invalid byte at offset {offset} (0x{tag:02x}), expected "
                               f"{TAG_NAMES.get(expected_tag, hex(expected_tag))}")
    start, length = read_header(data, offset)
    if start + length > len(data):
        raise MalformedKeyData(f"DER value at offset {offset} claims {length} bytes, "
                               f"only {len(data) - start} remain")
    return DerNode(tag, offset, start, length)


def encode_length(length: int) -> bytes:
    """Encodes a DER length in its shortest form."""
    if length < 0:
        raise ValueError("DER length cannot be negative")
    if length < 0x80:
        return bytes([length])
    body = length.to_bytes((length.bit_length() + 7) // 8, byteorder="big")
    return bytes([0x80 | len(body)]) + body
