import re

from .settings import MAX_NAME_LEN, MAX_USER_ID_LEN

DELIM = "/"
NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.\-]*$")

# System topics published by the server for device and location events
OS_ROOT = "com.magnet.os"
GEOLOC = "com.magnet.geoloc"
LEAF_ALL = "_all_"


class AddressError(ValueError):
    """
    Base class for errors raised while building or validating an address.
    """

    ...


class MalformedName(AddressError):
    """
    Raised when a channel/topic name or owner id is empty, too long, or
    uses characters or syntax the current naming policy does not allow.
    """

    ...


def normalize_path(path: str | None) -> str:
    """
    Collapse runs of the path delimiter into a single delimiter.

    Case is preserved. Normalizing an already normalized path returns it
    unchanged.

    :param path: A possibly hierarchical name such as ``"sports//soccer"``.
    :type path: str | None
    :return: The normalized path.
    :rtype: str
    :raises MalformedName: If ``path`` is empty or starts or ends with the delimiter.
    """
    if not path:
        raise MalformedName("Name cannot be null or empty")
    if path[0] == DELIM or path[-1] == DELIM:
        raise MalformedName(f"Name cannot start or end with '{DELIM}': {path!r}")
    return DELIM.join(part for part in path.split(DELIM) if part)


def check_name_allowed(
    name: str | None,
    max_len: int = MAX_NAME_LEN,
    path_syntax_restricted: bool = True,
) -> None:
    """
    Check a channel/topic name against the naming policy.

    :param name: Name to check.
    :type name: str | None
    :param max_len: Maximum allowed length.
    :type max_len: int
    :param path_syntax_restricted: If True, the name may not contain the
        path delimiter at all.
    :type path_syntax_restricted: bool
    :raises MalformedName: If the name is empty, longer than ``max_len``, or
        hierarchical while path syntax is restricted.
    """
    if not name:
        raise MalformedName("The name cannot be null or empty")
    if len(name) > max_len:
        raise MalformedName(f"The length of name exceeds {max_len}: {name!r}")
    if path_syntax_restricted and DELIM in name:
        raise MalformedName(
            f"The path syntax is disabled; name cannot contain '{DELIM}': {name!r}"
        )


def check_owner_allowed(owner: str | None, max_len: int = MAX_USER_ID_LEN) -> None:
    """
    Check an owner (user) id before it is embedded in an address.

    :raises MalformedName: If the owner id is empty or longer than ``max_len``.
    """
    if not owner:
        raise MalformedName("The owner id cannot be null or empty")
    if len(owner) > max_len:
        raise MalformedName(f"The length of owner id exceeds {max_len}: {owner!r}")


def validate_name(name: str | None, max_len: int = MAX_NAME_LEN) -> bool:
    """
    Strict, non-raising check used for application-defined names.

    :return: True if ``name`` is non-empty, at most ``max_len`` long and only
        uses letters, digits, ``_``, ``.`` and ``-``.
    :rtype: bool
    """
    if not name or len(name) > max_len:
        return False
    return NAME_PATTERN.match(name) is not None


def base_name(path: str) -> str:
    """Last component of a delimited path, or the whole path if flat."""
    return path.rpartition(DELIM)[2]


def os_topic_name(os_type: str | None = None, version: str | None = None) -> str:
    """
    Name of the system topic for an operating system, optionally narrowed
    to one OS version.

    :param os_type: OS type such as ``"ANDROID"``; None for the OS root.
    :type os_type: str | None
    :param version: OS version, ignored when ``os_type`` is None.
    :type version: str | None
    :return: A hierarchical system topic name.
    :rtype: str
    """
    if os_type is None:
        return OS_ROOT
    if version is None:
        return DELIM.join([OS_ROOT, os_type])
    return DELIM.join([OS_ROOT, os_type, version])


def device_topic_name(os_type: str) -> str:
    return os_topic_name(os_type)


def device_all_leaf_topic_name(os_type: str) -> str:
    return DELIM.join([device_topic_name(os_type), LEAF_ALL])
