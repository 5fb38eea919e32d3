import logging
import os
import sys
import typing

from abc import ABC, ABCMeta
from dataclasses import dataclass

if sys.version_info < (3, 12):
    from typing_extensions import dataclass_transform
else:
    from typing import dataclass_transform

logger = logging.getLogger("mmx")

MAX_NAME_LEN = 50
MAX_USER_ID_LEN = 42

MAX_NAME_LEN_ENV = "MMX_MAX_NAME_LEN"
MAX_USER_ID_LEN_ENV = "MMX_MAX_USER_ID_LEN"
PATH_SYNTAX_RESTRICTED_ENV = "MMX_PATH_SYNTAX_RESTRICTED"

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off")

# All settings classes are dataclasses
# https://rednafi.github.io/digressions/python/2020/06/26/python-metaclasses.html
#  see -- #avoiding-dataclass-decorator-with-metaclasses


@dataclass_transform()
class SettingsMeta(ABCMeta):
    """
    Metaclass that automatically applies dataclass decorator to Settings classes.

    This metaclass ensures all Settings subclasses are automatically converted
    to frozen dataclasses, so a settings object can be handed to any number of
    callers without one of them changing the policy for the others.
    """

    def __new__(
        cls,
        name: str,
        bases: tuple[type, ...],
        classdict: dict[str, typing.Any],
        **kwargs: typing.Any,
    ) -> type["Settings"]:
        """
        Create a new Settings class with dataclass transformation.

        :param name: Name of the class being created.
        :type name: str
        :param bases: Base classes for the new class.
        :type bases: tuple[type, ...]
        :param classdict: Class namespace dictionary.
        :type classdict: dict[str, typing.Any]
        :param kwargs: Additional keyword arguments.
        :return: New Settings class with dataclass applied.
        :rtype: type[Settings]
        """
        new_cls = super().__new__(cls, name, bases, classdict)
        return dataclass(frozen=True)(new_cls)  # type: ignore


class Settings(ABC, metaclass=SettingsMeta):
    """
    To carry configuration into the naming rules, inherit from ``Settings``.

    .. code-block:: python

       class YourSettings(Settings):
          setting1: int
          setting2: bool = True

    Instances are frozen; use :func:`dataclasses.replace` to derive a variant.

    .. note::
       ``Settings`` uses type hints to define member variables, but does not enforce type checking.
    """

    ...


class NamingSettings(Settings):
    """
    Policy applied when validating channel and topic names.

    :param max_name_len: Maximum length of a channel/topic name.
    :type max_name_len: int
    :param max_user_id_len: Maximum length of an owner (user) identifier.
    :type max_user_id_len: int
    :param path_syntax_restricted: When True, names may not contain the path
        delimiter, which disables hierarchical names.
    :type path_syntax_restricted: bool
    """

    max_name_len: int = MAX_NAME_LEN
    max_user_id_len: int = MAX_USER_ID_LEN
    path_syntax_restricted: bool = True

    @classmethod
    def from_env(cls) -> "NamingSettings":
        """
        Build settings from ``MMX_*`` environment variables, falling back to
        the protocol defaults for anything unset or unparseable.

        :return: Settings reflecting the current environment.
        :rtype: NamingSettings
        """
        return cls(
            max_name_len=_env_int(MAX_NAME_LEN_ENV, MAX_NAME_LEN),
            max_user_id_len=_env_int(MAX_USER_ID_LEN_ENV, MAX_USER_ID_LEN),
            path_syntax_restricted=_env_bool(PATH_SYNTAX_RESTRICTED_ENV, True),
        )


DEFAULT_NAMING = NamingSettings()


def _env_int(var: str, default: int) -> int:
    value = os.environ.get(var)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Ignoring ${var}={value!r}; expected an integer")
        return default
    if parsed <= 0:
        logger.warning(f"Ignoring ${var}={value!r}; must be positive")
        return default
    return parsed


def _env_bool(var: str, default: bool) -> bool:
    value = os.environ.get(var)
    if value is None:
        return default
    if value.strip().lower() in _TRUE_STRINGS:
        return True
    if value.strip().lower() in _FALSE_STRINGS:
        return False
    logger.warning(f"Ignoring ${var}={value!r}; expected a boolean")
    return default
