import logging
import typing

from collections.abc import Mapping

from .escape import escape_node, unescape_node
from .naming import AddressError, base_name
from .nodeid import (
    FOR_APP,
    SEPARATOR,
    build_node_id,
    compact_join,
    split_node_id,
)

logger = logging.getLogger("mmx")

OWNER_FIELD = "userId"
DISPLAY_NAME_FIELD = "displayName"


class MissingName(AddressError):
    """
    Raised when an identifier is built with neither an internal id nor a
    fully qualified name.
    """

    ...


class Identifiable(typing.Protocol):
    """
    The capability set shared by everything that names a channel or topic.

    Richer records (see :class:`mmx.core.info.AddressInfo`) hold an
    ``Identifiable`` rather than extending one.
    """

    @property
    def id(self) -> str | None: ...

    @property
    def owner(self) -> str | None: ...

    @property
    def name(self) -> str | None: ...

    @property
    def display_name(self) -> str | None: ...

    def equals_identifier(self, other: "Identifiable | None") -> bool: ...


IdentifierType = typing.TypeVar("IdentifierType", bound="Identifier")


def _equal_ignore_case(a: str | None, b: str | None) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return a.lower() == b.lower()


def _local_part(id: str | None) -> str | None:
    if id is None:
        return None
    hash_index = id.find(SEPARATOR)
    return id[hash_index + 1 :] if hash_index > 0 else id


class Identifier:
    """
    Identity of a channel (topic) under the global name-space or under a
    user's personal name-space.

    A global name is unique within its application; a personal name is
    unique under its owner within the application.  Either the internal id,
    the fully qualified name, or both are known.  The owner always takes
    part in equality; when both sides carry an internal id its local part
    decides the rest, otherwise the name does.  Names and owners compare
    case-insensitively and the display name never takes part in equality.

    Use the ``from_*`` class methods rather than the constructor; the
    constructor takes the owner in its escaped form.
    """

    ID_FIELD: typing.ClassVar[str] = "id"
    NAME_FIELD: typing.ClassVar[str] = "name"

    _id: str | None
    _esc_owner: str | None
    _name: str | None
    _display_name: str | None

    _owner: str | None
    _owner_cached: bool
    _hash: int | None

    def __init__(
        self,
        id: str | None = None,
        display_name: str | None = None,
        esc_owner: str | None = None,
        name: str | None = None,
    ) -> None:
        """
        :param id: Internal id, optionally prefixed with ``owner#``.
        :type id: str | None
        :param display_name: Display name; defaults to the last component of ``name``.
        :type display_name: str | None
        :param esc_owner: Escaped owner id, or None for a global address.
            Taken from the ``owner#`` prefix of ``id`` when not given.
        :type esc_owner: str | None
        :param name: Fully qualified, possibly ``/``-delimited name.
        :type name: str | None
        :raises MissingName: If neither ``id`` nor ``name`` is given.
        """
        if not id and not name:
            raise MissingName("Channel name cannot be null or empty")

        self._id = id or None
        self._name = name or None

        if not esc_owner and self._id is not None:
            hash_index = self._id.find(SEPARATOR)
            if hash_index > 0:
                esc_owner = self._id[:hash_index]
        self._esc_owner = esc_owner or None

        if display_name is None and self._name is not None:
            display_name = base_name(self._name)
        self._display_name = display_name

        self._owner = None
        self._owner_cached = False
        self._hash = None

    @classmethod
    def from_id(
        cls: type[IdentifierType], id: str, display_name: str | None = None
    ) -> IdentifierType:
        """
        Identifier from an internal id such as ``"news"`` or ``"alice#news"``.

        :param id: Internal id; an ``owner#`` prefix makes the address personal.
        :type id: str
        :param display_name: Optional display name.
        :type display_name: str | None
        :rtype: Identifier
        """
        return cls(id, display_name, None, None)

    @classmethod
    def parse(cls: type[IdentifierType], compact_id: str) -> IdentifierType:
        """Counterpart of :meth:`to_compact_id`."""
        return cls.from_id(compact_id)

    @classmethod
    def from_name(
        cls: type[IdentifierType],
        owner: str | None,
        name: str,
        display_name: str | None = None,
    ) -> IdentifierType:
        """
        Identifier from a fully qualified name.

        :param owner: Human-readable owner id of a personal address, or None.
        :type owner: str | None
        :param name: Fully qualified name.
        :type name: str
        :param display_name: Overrides the last component of ``name``.
        :type display_name: str | None
        :rtype: Identifier
        :raises MissingName: If ``name`` is empty.
        """
        if not name:
            raise MissingName("Channel name cannot be null or empty")
        return cls(None, display_name, escape_node(owner), name)

    @classmethod
    def from_id_name(
        cls: type[IdentifierType], id: str, owner: str | None, name: str
    ) -> IdentifierType:
        return cls(id, None, escape_node(owner), name)

    @classmethod
    def from_compact_name(cls: type[IdentifierType], compact_name: str) -> IdentifierType:
        """
        Identifier from ``owner#name`` or ``name``, where the owner part is
        already escaped.
        """
        owner, sep, name = compact_name.partition(SEPARATOR)
        if not sep:
            return cls(None, None, None, compact_name)
        return cls(None, None, owner, name)

    @classmethod
    def from_node_id(
        cls: type[IdentifierType], node_id: str, display_name: str | None = None
    ) -> IdentifierType | None:
        """
        Identifier from a node identifier of the pub/sub transport.

        :param node_id: A node identifier such as ``/app/alice/news``.
        :type node_id: str
        :param display_name: Optional display name.
        :type display_name: str | None
        :return: The identifier, or None if ``node_id`` is not an address.
        :rtype: Identifier | None
        """
        parts = split_node_id(node_id)
        if parts is None or not parts.internal_id:
            logger.debug(f"Not a node id: {node_id!r}")
            return None
        return cls.from_id(
            compact_join(parts.owner_token, parts.internal_id), display_name
        )

    @classmethod
    def from_dict(cls: type[IdentifierType], data: Mapping[str, typing.Any]) -> IdentifierType:
        """
        Identifier from its JSON field mapping.

        :param data: Mapping using the class's field names.
        :type data: collections.abc.Mapping[str, typing.Any]
        :rtype: Identifier
        """
        return cls(
            data.get(cls.ID_FIELD),
            data.get(DISPLAY_NAME_FIELD),
            escape_node(data.get(OWNER_FIELD)),
            data.get(cls.NAME_FIELD),
        )

    @property
    def id(self) -> str | None:
        """
        Internal id, usable in a URL path.

        :return: ``owner#id`` or ``id``, or None if only the name is known.
        :rtype: str | None
        """
        return self._id

    @property
    def local_id(self) -> str | None:
        """Internal id without its ``owner#`` prefix."""
        return _local_part(self._id)

    @property
    def owner(self) -> str | None:
        """
        Human-readable owner id of a personal address.

        :return: The owner id, or None for a global address.
        :rtype: str | None
        """
        if not self._owner_cached:
            self._owner = unescape_node(self._esc_owner)
            self._owner_cached = True
        return self._owner

    @property
    def esc_owner(self) -> str | None:
        return self._esc_owner

    @property
    def name(self) -> str | None:
        """Fully qualified name; compared case-insensitively."""
        return self._name

    @property
    def display_name(self) -> str | None:
        """Display name; case-sensitive and ignored by equality."""
        return self._display_name

    def set_display_name(self, display_name: str | None) -> None:
        """Set the display name once it is resolved, e.g. from a lookup."""
        self._display_name = display_name

    @property
    def is_personal(self) -> bool:
        return self._esc_owner is not None

    def equals_identifier(self, other: Identifiable | None) -> bool:
        """
        Compare two identifiers.

        :param other: Identifier to compare with.
        :type other: Identifiable | None
        :return: True if both denote the same address.
        :rtype: bool
        """
        if other is self:
            return True
        if other is None:
            return False
        other_id = other.id
        if (self._id is None) != (other_id is None):
            return False
        if not _equal_ignore_case(self.owner, other.owner):
            return False
        if self._id is not None:
            return _equal_ignore_case(self.local_id, _local_part(other_id))
        return _equal_ignore_case(self._name, other.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.equals_identifier(other)

    def __hash__(self) -> int:
        if self._hash is None:
            key = self.local_id if self._id is not None else self._name
            owner = self.owner
            self._hash = hash((typing.cast(str, key).lower(), owner and owner.lower()))
        return self._hash

    def to_compact_id(self) -> str:
        """
        Compact identifier for REST paths.

        :return: ``owner#id`` for a personal address, ``id`` for a global one.
            The name stands in for the id when only the name is known.
        :rtype: str
        """
        local = self.local_id if self._id is not None else self._name
        return compact_join(self._esc_owner, typing.cast(str, local))

    def to_node_id(self, app_id: str) -> str:
        """Node identifier of this address within application ``app_id``."""
        local = self.local_id if self._id is not None else self._name
        return build_node_id(app_id, self._esc_owner, local)

    def to_display_string(self) -> str:
        # Debug form only; not parseable.
        scope = self.owner if self.is_personal else FOR_APP
        label = self._name if self._name is not None else self.local_id
        return f"{scope}/{label}"

    def to_dict(self) -> dict[str, str]:
        """
        JSON field mapping of this identifier; absent values are omitted.

        :rtype: dict[str, str]
        """
        fields = {
            self.ID_FIELD: self._id,
            OWNER_FIELD: self.owner,
            self.NAME_FIELD: self._name,
            DISPLAY_NAME_FIELD: self._display_name,
        }
        return {k: v for k, v in fields.items() if v is not None}

    def to_channel_id(self) -> "ChannelId":
        return ChannelId(self._id, self._display_name, self._esc_owner, self._name)

    def to_topic_id(self) -> "TopicId":
        return TopicId(self._id, self._display_name, self._esc_owner, self._name)

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self._id!r}, owner={self.owner!r}, "
            f"name={self._name!r}, display_name={self._display_name!r})"
        )


class ChannelId(Identifier):
    """Identifier of a channel."""

    ID_FIELD = "channelId"
    NAME_FIELD = "channelName"


class TopicId(Identifier):
    """Identifier of a topic.  Same rules as :class:`ChannelId`."""

    ID_FIELD = "topicId"
    NAME_FIELD = "topicName"


class AppIdentifier:
    """
    An identifier together with the application it was parsed from.

    Produced by :func:`parse_node_id`; it only lives while a node identifier
    is being resolved and is not meant to be stored.  The wire form carries
    no name, so :attr:`name` and :attr:`display_name` stay unset until the
    caller resolves them (see :meth:`Identifier.set_display_name`).
    """

    app_id: str
    internal_id: str
    identifier: Identifier

    def __init__(
        self, app_id: str, owner_token: str | None, internal_id: str
    ) -> None:
        """
        :param app_id: Application id, the first node id segment.
        :type app_id: str
        :param owner_token: Escaped owner, or None for a global address.
        :type owner_token: str | None
        :param internal_id: Raw internal id segment(s) of the node id.
        :type internal_id: str
        """
        self.app_id = app_id
        self.internal_id = internal_id
        self.identifier = Identifier(
            compact_join(owner_token, internal_id), None, owner_token, None
        )

    @property
    def id(self) -> str | None:
        return self.identifier.id

    @property
    def owner(self) -> str | None:
        return self.identifier.owner

    @property
    def esc_owner(self) -> str | None:
        return self.identifier.esc_owner

    @property
    def name(self) -> str | None:
        return self.identifier.name

    @property
    def display_name(self) -> str | None:
        return self.identifier.display_name

    @property
    def is_personal(self) -> bool:
        return self.identifier.is_personal

    @property
    def node_id(self) -> str:
        return build_node_id(self.app_id, self.esc_owner, self.internal_id)

    def equals_identifier(self, other: Identifiable | None) -> bool:
        """Compare the address, ignoring the application."""
        return self.identifier.equals_identifier(other)

    def to_compact_id(self) -> str:
        return self.identifier.to_compact_id()

    def to_channel_id(self) -> ChannelId:
        return self.identifier.to_channel_id()

    def to_topic_id(self) -> TopicId:
        return self.identifier.to_topic_id()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppIdentifier):
            return NotImplemented
        return self.app_id == other.app_id and self.identifier == other.identifier

    def __hash__(self) -> int:
        return hash((self.app_id, self.identifier))

    def __repr__(self) -> str:
        return (
            f"AppIdentifier(app={self.app_id!r}, "
            f"channel={self.identifier.to_display_string()!r})"
        )


def parse_node_id(node_id: str | None) -> AppIdentifier | None:
    """
    Parse a node identifier.

    :param node_id: A node identifier such as ``/app/*/news``.
    :type node_id: str | None
    :return: The parsed address, or None if ``node_id`` does not follow the
        node identifier grammar.
    :rtype: AppIdentifier | None
    """
    parts = split_node_id(node_id)
    if parts is None or not parts.internal_id:
        logger.debug(f"Not a node id: {node_id!r}")
        return None
    return AppIdentifier(parts.app_id, parts.owner_token, parts.internal_id)
