import pytest

from mmx.core.identifier import (
    AppIdentifier,
    ChannelId,
    Identifier,
    MissingName,
    TopicId,
    parse_node_id,
)
from mmx.core.naming import AddressError


def test_from_id_global():
    channel = ChannelId.from_id("news")
    assert channel.id == "news"
    assert channel.local_id == "news"
    assert channel.owner is None
    assert channel.esc_owner is None
    assert channel.name is None
    assert channel.display_name is None
    assert not channel.is_personal


def test_from_id_personal():
    channel = ChannelId.from_id("joe\\20smith#news", "Daily News")
    assert channel.id == "joe\\20smith#news"
    assert channel.local_id == "news"
    assert channel.esc_owner == "joe\\20smith"
    assert channel.owner == "joe smith"
    assert channel.display_name == "Daily News"
    assert channel.is_personal


def test_leading_separator_is_not_an_owner():
    channel = ChannelId.from_id("#news")
    assert not channel.is_personal
    assert channel.local_id == "#news"


def test_from_name():
    channel = ChannelId.from_name("Joe Smith", "sports/Soccer")
    assert channel.id is None
    assert channel.name == "sports/Soccer"
    assert channel.display_name == "Soccer"
    assert channel.owner == "Joe Smith"
    assert channel.esc_owner == "Joe\\20Smith"
    assert channel.is_personal


def test_from_name_display_name_override():
    channel = TopicId.from_name(None, "sports/soccer", "Football")
    assert channel.display_name == "Football"
    assert not channel.is_personal


@pytest.mark.parametrize("name", [None, ""])
def test_missing_name(name):
    with pytest.raises(MissingName):
        ChannelId.from_name("alice", name)
    with pytest.raises(MissingName):
        Identifier(None, "display", "alice", name)
    assert issubclass(MissingName, AddressError)


def test_from_id_name():
    channel = ChannelId.from_id_name("alice#news", "alice", "News")
    assert channel.id == "alice#news"
    assert channel.owner == "alice"
    assert channel.name == "News"
    assert channel.display_name == "News"


def test_from_compact_name():
    personal = TopicId.from_compact_name("alice#sports/soccer")
    assert personal.owner == "alice"
    assert personal.name == "sports/soccer"
    assert personal.id is None

    shared = TopicId.from_compact_name("sports")
    assert shared.owner is None
    assert shared.name == "sports"


def test_from_node_id():
    channel = ChannelId.from_node_id("/appX/alice/news", "News")
    assert isinstance(channel, ChannelId)
    assert channel.id == "alice#news"
    assert channel.owner == "alice"
    assert channel.display_name == "News"

    shared = ChannelId.from_node_id("/appX/*/news")
    assert shared is not None
    assert shared.id == "news"
    assert not shared.is_personal

    assert ChannelId.from_node_id("not-a-node") is None
    assert ChannelId.from_node_id("/appX/*/") is None


def test_name_equality_ignores_case():
    a = ChannelId.from_name(None, "Sports/Soccer")
    b = ChannelId.from_name(None, "sports/soccer")
    assert a == b
    assert hash(a) == hash(b)


def test_owner_equality_ignores_case():
    a = ChannelId.from_name("Alice", "news")
    b = ChannelId.from_name("alice", "news")
    assert a == b
    assert hash(a) == hash(b)


def test_display_name_does_not_affect_equality():
    a = ChannelId.from_name(None, "news", "Daily News")
    b = ChannelId.from_name(None, "news", "DAILY news")
    assert a == b


def test_id_equality_ignores_case():
    a = TopicId.from_id("Alice#News")
    b = TopicId.from_id("alice#news")
    assert a == b
    assert hash(a) == hash(b)

    c = TopicId.from_id_name("news", "Alice", "News")
    assert c == b
    assert hash(c) == hash(b)
    assert c.to_compact_id() == "Alice#news"


@pytest.mark.parametrize(
    "a, b",
    [
        (ChannelId.from_name(None, "news"), ChannelId.from_name("alice", "news")),
        (ChannelId.from_name("alice", "news"), ChannelId.from_name("bob", "news")),
        (ChannelId.from_name(None, "news"), ChannelId.from_name(None, "sports")),
        (ChannelId.from_id("news"), ChannelId.from_name(None, "news")),
        (ChannelId.from_id("alice#news"), ChannelId.from_id("bob#news")),
        (ChannelId.from_id_name("news", "alice", "News"), ChannelId.from_id("news")),
        (ChannelId.from_id_name("news", "alice", "News"), ChannelId.from_id("bob#news")),
    ],
)
def test_inequality(a: ChannelId, b: ChannelId):
    assert a != b
    assert not a.equals_identifier(b)


def test_equals_identifier_edge_cases():
    channel = ChannelId.from_id("news")
    assert channel.equals_identifier(channel)
    assert not channel.equals_identifier(None)
    assert channel != "news"


def test_channel_and_topic_share_identity():
    assert ChannelId.from_id("alice#news") == TopicId.from_id("alice#news")
    assert ChannelId.from_id("x").to_topic_id() == TopicId.from_id("x")


def test_hash_is_memoized():
    channel = ChannelId.from_name("alice", "news")
    first = hash(channel)
    channel.set_display_name("Something Else")
    assert hash(channel) == first
    assert channel._hash == first


def test_identifiers_work_as_keys():
    subscriptions = {ChannelId.from_name("Alice", "News"): 1}
    assert subscriptions[ChannelId.from_name("alice", "news")] == 1
    assert len({ChannelId.from_id("a"), ChannelId.from_id("A")}) == 1


def test_owner_is_unescaped_once():
    channel = ChannelId.from_id("joe\\20smith#news")
    assert not channel._owner_cached
    assert channel.owner == "joe smith"
    assert channel._owner_cached
    assert channel.owner is channel.owner


def test_set_display_name():
    channel = ChannelId.from_id("news")
    assert channel.display_name is None
    channel.set_display_name("Daily News")
    assert channel.display_name == "Daily News"


@pytest.mark.parametrize(
    "channel, compact",
    [
        (ChannelId.from_id("news"), "news"),
        (ChannelId.from_id("alice#news"), "alice#news"),
        (ChannelId.from_name(None, "news"), "news"),
        (ChannelId.from_name("alice", "news"), "alice#news"),
        (ChannelId.from_name("bob@example.com", "news"), "bob\\40example.com#news"),
        (ChannelId.from_id_name("news", "alice", "News"), "alice#news"),
    ],
)
def test_to_compact_id(channel: ChannelId, compact: str):
    assert channel.to_compact_id() == compact
    assert ChannelId.parse(compact).owner == channel.owner


def test_to_node_id():
    assert ChannelId.from_id("alice#News").to_node_id("appX") == "/appX/alice/news"
    assert ChannelId.from_id("News").to_node_id("appX") == "/appX/*/news"
    assert ChannelId.from_name("Joe Smith", "a/B").to_node_id("appX") == (
        "/appX/joe\\20smith/a/b"
    )


def test_node_id_round_trip():
    channel = ChannelId.from_name("bob@example.com", "news")
    parsed = parse_node_id(channel.to_node_id("appX"))
    assert parsed is not None
    assert parsed.owner == "bob@example.com"
    assert parsed.internal_id == "news"
    assert parsed.to_channel_id() == ChannelId.from_id(channel.to_compact_id().lower())


def test_display_string():
    assert str(ChannelId.from_name(None, "sports/soccer")) == "*/sports/soccer"
    assert str(ChannelId.from_name("Joe Smith", "news")) == "Joe Smith/news"
    assert ChannelId.from_id("alice#news").to_display_string() == "alice/news"
    assert "owner='alice'" in repr(ChannelId.from_id("alice#news"))


def test_to_dict_field_names():
    channel = ChannelId.from_id_name("alice#news", "alice", "News")
    assert channel.to_dict() == {
        "channelId": "alice#news",
        "userId": "alice",
        "channelName": "News",
        "displayName": "News",
    }
    assert TopicId.from_id("news").to_dict() == {"topicId": "news"}


def test_from_dict():
    channel = ChannelId.from_dict({"userId": "Joe Smith", "channelName": "news"})
    assert channel.owner == "Joe Smith"
    assert channel.esc_owner == "Joe\\20Smith"
    assert channel == ChannelId.from_name("joe smith", "NEWS")

    topic = TopicId.from_dict(TopicId.from_id("alice#news", "News").to_dict())
    assert topic.id == "alice#news"
    assert topic.display_name == "News"

    with pytest.raises(MissingName):
        ChannelId.from_dict({"userId": "alice"})


def test_app_identifier():
    parsed = parse_node_id("/appX/alice/news")
    assert isinstance(parsed, AppIdentifier)
    assert parsed.app_id == "appX"
    assert parsed.internal_id == "news"
    assert parsed.identifier == ChannelId.from_id("alice#news")
    assert parsed.equals_identifier(ChannelId.from_id("alice#news"))
    assert parsed.to_channel_id() == ChannelId.from_id("alice#news")
    assert repr(parsed) == "AppIdentifier(app='appX', channel='alice/news')"


def test_app_identifier_leaves_name_unresolved():
    parsed = parse_node_id("/appX/*/sports/soccer")
    assert parsed is not None
    assert parsed.name is None
    assert parsed.display_name is None
    parsed.identifier.set_display_name("Soccer")
    assert parsed.display_name == "Soccer"


def test_app_identifier_equality_includes_app():
    parsed = parse_node_id("/appX/alice/news")
    assert parsed == parse_node_id("/appX/ALICE/News")
    assert hash(parsed) == hash(parse_node_id("/appX/ALICE/News"))
    assert parsed != parse_node_id("/appY/alice/news")
    assert parsed != ChannelId.from_id("alice#news")


def test_app_identifier_has_no_identifier_factories():
    for factory in ("from_id", "from_name", "from_node_id", "from_dict", "parse"):
        assert not hasattr(AppIdentifier, factory)
