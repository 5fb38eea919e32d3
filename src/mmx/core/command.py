import argparse
import logging
import sys

from dataclasses import replace

from .escape import escape_node, unescape_node
from .identifier import parse_node_id
from .naming import (
    AddressError,
    check_name_allowed,
    check_owner_allowed,
    normalize_path,
    validate_name,
)
from .nodeid import (
    build_node_id,
    is_app_scoped,
    is_personal_address,
    is_top_level,
    node_id_from_compact,
    to_compact_id,
)
from .settings import (
    DEFAULT_NAMING,
    MAX_NAME_LEN_ENV,
    PATH_SYNTAX_RESTRICTED_ENV,
    NamingSettings,
)

logger = logging.getLogger("mmx")

COMMANDS = [
    "escape",
    "unescape",
    "normalize",
    "check",
    "validate",
    "build",
    "parse",
    "compact",
    "node",
    "scope",
]

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NOT_AN_ADDRESS = 2


def cmdline(argv: list[str] | None = None) -> None:
    """
    Command-line interface for inspecting and converting channel addresses.

    Provides commands for escaping owner ids, checking names against the
    naming policy, and converting between node, compact and display forms.
    """
    parser = argparse.ArgumentParser(
        "mmx.core",
        description="inspect and convert channel/topic addresses",
        epilog=f"""
            The naming policy can also be changed with environment variables.
            Maximum name length is read from ${MAX_NAME_LEN_ENV};
            hierarchical names are allowed when ${PATH_SYNTAX_RESTRICTED_ENV} is false.
        """,
    )

    parser.add_argument("command", help="command for mmx", choices=COMMANDS)

    parser.add_argument(
        "value",
        help="owner id, name, compact id or node id to operate on",
        nargs="?",
        default=None,
    )

    parser.add_argument("--app", help="Application id for node ids", default=None)

    parser.add_argument(
        "--owner",
        help="Human-readable owner id of a personal channel. Only used when `command` is 'build'.",
        default=None,
    )

    parser.add_argument(
        "--max-len", help="Override the maximum name length", type=int, default=None
    )

    parser.add_argument(
        "--allow-paths",
        help="Accept hierarchical ('/'-delimited) names when checking.",
        action="store_true",
    )

    class Args:
        command: str
        value: str | None
        app: str | None
        owner: str | None
        max_len: int | None
        allow_paths: bool

    args = parser.parse_args(argv, namespace=Args)

    if args.value is None and args.command != "build":
        parser.error(f"'{args.command}' needs a value")
    if args.app is None and args.command in ["build", "node"]:
        parser.error(f"'{args.command}' needs --app")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    settings = NamingSettings.from_env()
    if args.max_len is not None:
        settings = replace(settings, max_name_len=args.max_len)
    if args.allow_paths:
        settings = replace(settings, path_syntax_restricted=False)

    sys.exit(
        run_command(
            args.command,
            args.value,
            settings,
            app_id=args.app,
            owner=args.owner,
        )
    )


def run_command(
    cmd: str,
    value: str | None,
    settings: NamingSettings = DEFAULT_NAMING,
    app_id: str | None = None,
    owner: str | None = None,
) -> int:
    """
    Run an mmx command and print its result.

    :param cmd: One of :data:`COMMANDS`.
    :type cmd: str
    :param value: The argument of the command.
    :type value: str | None
    :param settings: Naming policy used by 'check', 'validate' and 'build'.
    :type settings: NamingSettings
    :param app_id: Application id for 'build', 'node' and 'scope'.
    :type app_id: str | None
    :param owner: Human-readable owner id for 'build'.
    :type owner: str | None
    :return: Process exit status; 1 for a rejected name, 2 when the value
        is not an address.
    :rtype: int
    """
    try:
        return _run(cmd, value, settings, app_id, owner)
    except AddressError as e:
        logger.error(f"{cmd}: {e}")
        return EXIT_INVALID


def _run(
    cmd: str,
    value: str | None,
    settings: NamingSettings,
    app_id: str | None,
    owner: str | None,
) -> int:
    if cmd == "escape":
        print(escape_node(value))

    elif cmd == "unescape":
        print(unescape_node(value))

    elif cmd == "normalize":
        print(normalize_path(value))

    elif cmd == "check":
        check_name_allowed(
            value, settings.max_name_len, settings.path_syntax_restricted
        )
        print(value)

    elif cmd == "validate":
        valid = validate_name(value, settings.max_name_len)
        print(valid)
        if not valid:
            return EXIT_INVALID

    elif cmd == "build":
        if owner is not None:
            check_owner_allowed(owner, settings.max_user_id_len)
        if value is not None:
            check_name_allowed(
                value, settings.max_name_len, settings.path_syntax_restricted
            )
        print(build_node_id(_require(app_id), escape_node(owner), value))

    elif cmd == "parse":
        parsed = parse_node_id(value)
        if parsed is None:
            logger.warning(f"Not a node id: {value}")
            return EXIT_NOT_AN_ADDRESS
        print(f"app: {parsed.app_id}")
        print(f"owner: {parsed.owner if parsed.is_personal else '*'}")
        print(f"id: {parsed.internal_id}")
        print(f"compact: {parsed.to_compact_id()}")

    elif cmd == "compact":
        compact = to_compact_id(value)
        if compact is None:
            logger.warning(f"Not a node id: {value}")
            return EXIT_NOT_AN_ADDRESS
        print(compact)

    elif cmd == "node":
        print(node_id_from_compact(_require(app_id), _require(value)))

    elif cmd == "scope":
        scope = "personal" if is_personal_address(value) else "global"
        print(f"scope: {scope}")
        print(f"top-level: {is_top_level(value)}")
        if app_id is not None:
            print(f"app-scoped: {is_app_scoped(value, app_id)}")

    else:
        raise ValueError(
            f"Unknown command '{cmd}'. Available options are {', '.join(COMMANDS)}."
        )

    return EXIT_OK


def _require(value: str | None) -> str:
    if value is None:
        raise ValueError("missing argument")
    return value


if __name__ == "__main__":
    cmdline()
