import enum
import typing

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import datetime

from .identifier import ChannelId, Identifier, Identifiable

# Python attribute -> JSON field
INFO_FIELDS: dict[str, str] = {
    "is_collection": "isCollection",
    "description": "description",
    "persistent": "isPersistent",
    "max_items": "maxItems",
    "max_payload_size": "maxPayloadSize",
    "creation_date": "creationDate",
    "modification_date": "modificationDate",
    "publish_permission": "publishPermission",
    "creator": "creatorUserId",
    "subscription_enabled": "subscriptionEnabled",
}

_DATE_FIELDS = ("creation_date", "modification_date")


class PublishPermission(enum.Enum):
    """Who may publish to a channel."""

    ANYONE = "anyone"
    OWNER = "owner"
    SUBSCRIBERS = "subscribers"


@dataclass(eq=False)
class AddressInfo:
    """
    Metadata about a channel (topic), held next to its identifier.

    Identity is entirely that of :attr:`identifier`: two records describing
    the same address are equal regardless of their metadata.
    """

    identifier: Identifier
    is_collection: bool = False
    description: str | None = None
    persistent: bool = False
    max_items: int = 0
    max_payload_size: int = 0
    creation_date: datetime | None = None
    modification_date: datetime | None = None
    publish_permission: PublishPermission | None = None
    creator: str | None = None
    subscription_enabled: bool = True

    @property
    def id(self) -> str | None:
        return self.identifier.id

    @property
    def owner(self) -> str | None:
        return self.identifier.owner

    @property
    def name(self) -> str | None:
        return self.identifier.name

    @property
    def display_name(self) -> str | None:
        return self.identifier.display_name

    def equals_identifier(self, other: Identifiable | None) -> bool:
        return self.identifier.equals_identifier(other)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AddressInfo):
            return self.identifier == other.identifier
        if isinstance(other, Identifier):
            return self.identifier == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.identifier)

    def to_dict(self) -> dict[str, typing.Any]:
        """
        JSON field mapping: the identifier's fields followed by the metadata.
        Absent values are omitted; dates and enums are left for the encoder.

        :rtype: dict[str, typing.Any]
        """
        out: dict[str, typing.Any] = self.identifier.to_dict()
        for f in fields(self):
            if f.name == "identifier":
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[INFO_FIELDS[f.name]] = value
        return out

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, typing.Any],
        identifier_type: type[Identifier] = ChannelId,
    ) -> "AddressInfo":
        """
        Rebuild a record from its JSON field mapping.

        :param data: Decoded JSON object.
        :type data: collections.abc.Mapping[str, typing.Any]
        :param identifier_type: :class:`ChannelId` or :class:`TopicId`,
            selecting which field names carry the id and name.
        :type identifier_type: type[Identifier]
        :rtype: AddressInfo
        :raises MissingName: If the mapping names neither an id nor a name.
        """
        kwargs: dict[str, typing.Any] = {}
        for attr, key in INFO_FIELDS.items():
            if key not in data or data[key] is None:
                continue
            value = data[key]
            if attr in _DATE_FIELDS and isinstance(value, str):
                value = parse_date(value)
            elif attr == "publish_permission":
                value = PublishPermission(value)
            kwargs[attr] = value
        return cls(identifier_type.from_dict(data), **kwargs)

    def __str__(self) -> str:
        return (
            f"[channel={self.identifier}, id={self.id}, name={self.display_name}, "
            f"desc={self.description}, sub={self.subscription_enabled}, "
            f"maxItems={self.max_items}, maxSize={self.max_payload_size}, "
            f"pubtype={self.publish_permission}, create={self.creation_date}, "
            f"mod={self.modification_date}]"
        )


def parse_date(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
