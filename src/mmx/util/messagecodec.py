"""
JSON interchange for channel and topic identifiers.

This module provides JSON serialization support for the addressing types:

- Identifiers (:class:`~mmx.core.identifier.ChannelId`,
  :class:`~mmx.core.identifier.TopicId`) under the platform field names
  ``channelId``/``topicId``, ``userId``, ``channelName``/``topicName`` and
  ``displayName``
- Info records, flattened next to their identifier's fields
- Datetimes as ISO-8601 strings and enums as their values
- Payload dataclasses that embed the above, as plain field dictionaries

The payload classes of the messaging protocol consume these mappings as
already-parsed values, so no type tags are written.
"""

from collections.abc import Iterable
import enum
import json
import typing

from dataclasses import is_dataclass, fields
from datetime import datetime

from mmx.core.identifier import Identifier
from mmx.core.info import AddressInfo


class Decodable(typing.Protocol):
    @classmethod
    def from_dict(cls, data: typing.Any) -> typing.Any: ...


T = typing.TypeVar("T", bound=Decodable)


class AddressEncoder(json.JSONEncoder):
    """
    JSON encoder for identifiers, info records and their field values.

    This encoder extends the standard JSON encoder to handle:

    - Identifier and info objects (serialized through their ``to_dict``)
    - Datetime objects (ISO-8601)
    - Enum members (their value)
    - Other dataclass objects (serialized as dictionaries)
    """

    def default(self, o: typing.Any):
        if isinstance(o, (Identifier, AddressInfo)):
            return o.to_dict()

        elif isinstance(o, datetime):
            return o.isoformat()

        elif isinstance(o, enum.Enum):
            return o.value

        elif is_dataclass(o) and not isinstance(o, type):
            return {f.name: getattr(o, f.name) for f in fields(o)}

        return json.JSONEncoder.default(self, o)


def to_json(obj: typing.Any, **kwargs: typing.Any) -> str:
    """
    Serialize an identifier, info record, or a collection of them.

    :param obj: Object to serialize.
    :type obj: typing.Any
    :param kwargs: Passed through to :func:`json.dumps`.
    :return: JSON text.
    :rtype: str
    """
    return json.dumps(obj, cls=AddressEncoder, **kwargs)


def from_json(text: str | bytes, cls: type[T]) -> T:
    """
    Deserialize a single JSON object into ``cls``.

    :param text: JSON text holding one object.
    :type text: str | bytes
    :param cls: Target type providing ``from_dict``, e.g. ``ChannelId``.
    :type cls: type[T]
    :return: The decoded object.
    :rtype: T
    :raises ValueError: If the JSON value is not an object.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object for {cls.__name__}")
    return cls.from_dict(data)


def from_json_list(text: str | bytes, cls: type[T]) -> list[T]:
    """
    Deserialize a JSON array of objects into a list of ``cls``.

    :raises ValueError: If the JSON value is not an array of objects.
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of {cls.__name__}")
    return list(_decode_all(data, cls))


def _decode_all(items: Iterable[typing.Any], cls: type[T]) -> Iterable[T]:
    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"Expected a JSON object for {cls.__name__}")
        yield cls.from_dict(item)
