"""
mmx addressing core.

Channels (topics) are named three ways: by the node identifier used on the
pub/sub transport, by the compact identifier used in REST paths, and by a
human-facing display name.  This package converts between them.

Key modules:
- :mod:`mmx.core.escape`: Owner id escaping for node identifiers
- :mod:`mmx.core.naming`: Name validation, normalization and system topic names
- :mod:`mmx.core.nodeid`: Node identifier codec and scope queries
- :mod:`mmx.core.identifier`: Channel and topic identifier value objects
- :mod:`mmx.core.info`: Channel metadata records
- :mod:`mmx.core.settings`: Naming limits and policies
- :mod:`mmx.core.command`: Command line interface
"""
