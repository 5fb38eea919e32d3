"""
Reversible escaping of user identifiers embedded in node identifiers.

Characters that may not appear in a node segment are replaced with a
backslash followed by two hex digits, following the JID node escaping
table (XEP-0106):

==========  ========
Character   Sequence
==========  ========
<space>     ``\\20``
``"``       ``\\22``
``&``       ``\\26``
``'``       ``\\27``
``/``       ``\\2f``
``:``       ``\\3a``
``<``       ``\\3c``
``>``       ``\\3e``
``@``       ``\\40``
``\\``      ``\\5c``
==========  ========
"""

import typing

ESCAPE_CHAR = "\\"

ESCAPE_TABLE: dict[str, str] = {
    " ": "20",
    '"': "22",
    "&": "26",
    "'": "27",
    "/": "2f",
    ":": "3a",
    "<": "3c",
    ">": "3e",
    "@": "40",
    "\\": "5c",
}

UNESCAPE_TABLE: dict[str, str] = {code: c for c, code in ESCAPE_TABLE.items()}


@typing.overload
def escape_node(node: str) -> str: ...


@typing.overload
def escape_node(node: None) -> None: ...


def escape_node(node: str | None) -> str | None:
    """
    Escape a user identifier so it can occupy one node segment.

    Callers must not escape an already escaped value; the backslash itself
    is escaped, so a second pass is not a no-op.

    :param node: Raw user identifier, or None.
    :type node: str | None
    :return: Escaped identifier, or None if ``node`` is None.
    :rtype: str | None
    """
    if node is None:
        return None
    return "".join(
        ESCAPE_CHAR + ESCAPE_TABLE[c] if c in ESCAPE_TABLE else c for c in node
    )


@typing.overload
def unescape_node(node: str) -> str: ...


@typing.overload
def unescape_node(node: None) -> None: ...


def unescape_node(node: str | None) -> str | None:
    """
    Reverse :func:`escape_node`.

    A backslash that is not followed by a known two-character code is kept
    as a literal character, so malformed or truncated sequences never raise.

    :param node: Escaped identifier, or None.
    :type node: str | None
    :return: Unescaped identifier, or None if ``node`` is None.
    :rtype: str | None
    """
    if node is None:
        return None
    if ESCAPE_CHAR not in node:
        return node

    out: list[str] = []
    i, n = 0, len(node)
    while i < n:
        c = node[i]
        if c == ESCAPE_CHAR and i + 2 < n:
            original = UNESCAPE_TABLE.get(node[i + 1 : i + 3])
            if original is not None:
                out.append(original)
                i += 3
                continue
        out.append(c)
        i += 1
    return "".join(out)
