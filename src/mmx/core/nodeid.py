"""
Wire-level node identifiers.

A node identifier names a channel (topic) on the pub/sub transport::

    /<app_id>/<owner_token>/<internal_id>

``owner_token`` is ``*`` for a global address or the lower-cased, escaped
owner id for a personal one.  The bare ``<app_id>`` denotes the root of an
application.  The compact identifier used in REST paths is ``<internal_id>``
or ``<owner>#<internal_id>``.

Every query in this module treats input that does not follow the grammar
as "not an address in this namespace" and answers ``None``/``False`` rather
than raising, because the transport is shared with other namespaces.
"""

import logging
import typing

from .naming import DELIM, MalformedName

logger = logging.getLogger("mmx")

FOR_APP = "*"
SEPARATOR = "#"


class NodeParts(typing.NamedTuple):
    """
    The three segments of a leaf node identifier.

    :param app_id: Application (tenant) id.
    :type app_id: str
    :param owner_token: Escaped owner id, or None for a global address.
    :type owner_token: str | None
    :param internal_id: Everything after the owner segment.
    :type internal_id: str
    """

    app_id: str
    owner_token: str | None
    internal_id: str


def split_node_id(node_id: str | None) -> NodeParts | None:
    """
    Split a node identifier into its segments.

    :param node_id: A node identifier from the transport.
    :type node_id: str | None
    :return: The segments, or None if ``node_id`` lacks the leading delimiter
        or either of the two delimiters that follow it, or has an empty app
        id or owner segment.
    :rtype: NodeParts | None
    """
    if not node_id or node_id[0] != DELIM:
        return None
    index1 = node_id.find(DELIM, 1)
    if index1 <= 1:
        return None
    index2 = node_id.find(DELIM, index1 + 1)
    if index2 < 0:
        return None

    owner_token = node_id[index1 + 1 : index2]
    if not owner_token:
        return None
    return NodeParts(
        app_id=node_id[1:index1],
        owner_token=None if owner_token[0] == FOR_APP else owner_token,
        internal_id=node_id[index2 + 1 :],
    )


def build_node_id(
    app_id: str, owner: str | None = None, internal_id: str | None = None
) -> str:
    """
    Build a node identifier.

    Returns ``app_id`` alone (the application root) when both ``owner`` and
    ``internal_id`` are absent.  The owner token and internal id are lower
    cased; an absent or empty owner becomes the global marker.

    :param app_id: Application id.
    :type app_id: str
    :param owner: Escaped owner id for a personal address, or None.
    :type owner: str | None
    :param internal_id: Internal id of the channel, or None.
    :type internal_id: str | None
    :return: The node identifier.
    :rtype: str
    :raises MalformedName: If ``owner`` contains the delimiter, i.e. was not escaped.
    """
    if owner is None and internal_id is None:
        return app_id

    if not owner:
        owner_token = FOR_APP
    elif DELIM in owner:
        raise MalformedName(f"Owner must be escaped before use in a node id: {owner!r}")
    else:
        owner_token = owner.lower()

    parts = [app_id, owner_token]
    if internal_id is not None:
        parts.append(internal_id.lower())
    return DELIM + DELIM.join(parts)


def compact_join(owner: str | None, name: str) -> str:
    """``owner#name`` for a personal address, ``name`` for a global one."""
    if owner is None:
        return name
    return f"{owner}{SEPARATOR}{name}"


def to_compact_id(node_id: str | None) -> str | None:
    """
    Convert a node identifier to the compact form used in REST paths.

    :param node_id: A node identifier.
    :type node_id: str | None
    :return: ``owner#id`` or ``id``, or None if ``node_id`` is malformed.
    :rtype: str | None
    """
    parts = split_node_id(node_id)
    if parts is None or not parts.internal_id:
        logger.debug(f"Not a node id: {node_id!r}")
        return None
    return compact_join(parts.owner_token, parts.internal_id)


def node_id_from_compact(app_id: str, compact_id: str) -> str:
    """
    Convert a compact identifier back to a node identifier.

    A separator at position zero does not count as an owner prefix.
    """
    hash_index = compact_id.find(SEPARATOR)
    if hash_index <= 0:
        return build_node_id(app_id, None, compact_id)
    return build_node_id(
        app_id, compact_id[:hash_index], compact_id[hash_index + 1 :]
    )


def is_app_scoped(node_id: str | None, app_id: str) -> bool:
    """
    Check whether a node identifier belongs to an application.

    :param node_id: A node identifier.
    :type node_id: str | None
    :param app_id: Application id to match exactly.
    :type app_id: str
    :return: True if the first segment is ``app_id``; False for malformed input.
    :rtype: bool
    """
    if not node_id:
        return False
    return node_id.startswith(node_prefix(app_id))


def is_personal_address(node_id: str | None) -> bool:
    """
    Check whether a node identifier is under a user's personal scope.

    :return: True if an owner segment is present and is not the global marker.
    :rtype: bool
    """
    if not node_id or node_id[0] != DELIM:
        return False
    index1 = node_id.find(DELIM, 1)
    if index1 <= 1:
        return False
    owner_token = node_id[index1 + 1 :].partition(DELIM)[0]
    return bool(owner_token) and owner_token[0] != FOR_APP


def is_top_level(node_id: str | None) -> bool:
    """
    Check whether a node identifier is a root rather than a leaf.

    The application root (``app``), the global root (``/app/*``) and a
    user's personal root (``/app/owner``) are top level; ``/app/owner/leaf``
    is not.

    :param node_id: A node identifier.
    :type node_id: str | None
    :return: True if ``node_id`` has at most two segments.
    :rtype: bool
    """
    if not node_id:
        return False
    segments = node_id.strip(DELIM).split(DELIM)
    return all(segments) and len(segments) <= 2


def get_app_id(node_id: str) -> str:
    """First segment of a node identifier, with or without a leading delimiter."""
    start = 1 if node_id.startswith(DELIM) else 0
    end = node_id.find(DELIM, start)
    return node_id[start:] if end < 0 else node_id[start:end]


def node_prefix(app_id: str) -> str:
    return f"{DELIM}{app_id}{DELIM}"


def app_node_id(app_id: str) -> str:
    """Node id of the application root."""
    return build_node_id(app_id)


def global_node_id(app_id: str) -> str:
    """Node id under which all global channels of an application live."""
    return node_prefix(app_id) + FOR_APP


def personal_node_id(app_id: str, owner: str) -> str:
    """Node id under which all personal channels of ``owner`` live."""
    return build_node_id(app_id, owner)


def prefix_length(node_id: str) -> int:
    """
    Length of the ``/<app_id>/<owner_token>/`` prefix of a leaf node id,
    or 0 if ``node_id`` has no such prefix.
    """
    parts = split_node_id(node_id)
    if parts is None:
        return 0
    return len(node_id) - len(parts.internal_id)


def parent_node_id(node_id: str) -> str | None:
    """
    Node id one level up a hierarchical internal id.

    :return: The parent node id, or None if ``node_id`` is not a leaf or its
        internal id is already flat.
    :rtype: str | None
    """
    prefix = prefix_length(node_id)
    if prefix == 0:
        return None
    offset = node_id.rfind(DELIM)
    if offset < prefix:
        return None
    return node_id[:offset]
