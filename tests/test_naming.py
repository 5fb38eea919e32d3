import pytest
from contextlib import nullcontext as does_not_raise

from mmx.core.naming import (
    MalformedName,
    AddressError,
    base_name,
    check_name_allowed,
    check_owner_allowed,
    device_all_leaf_topic_name,
    device_topic_name,
    normalize_path,
    os_topic_name,
    validate_name,
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("news", "news"),
        ("sports/soccer", "sports/soccer"),
        ("sports//soccer", "sports/soccer"),
        ("a///b////c", "a/b/c"),
        ("Mixed/CASE", "Mixed/CASE"),
    ],
)
def test_normalize_path(path: str, expected: str):
    normalized = normalize_path(path)
    assert normalized == expected
    assert normalize_path(normalized) == normalized


@pytest.mark.parametrize("path", ["", None, "/news", "news/", "/", "//a//"])
def test_normalize_path_rejects(path):
    with pytest.raises(MalformedName):
        normalize_path(path)


@pytest.mark.parametrize(
    "name, max_len, restricted, expectation",
    [
        ("", 50, True, pytest.raises(MalformedName)),
        (None, 50, False, pytest.raises(MalformedName)),
        ("a/b", 50, True, pytest.raises(MalformedName)),
        ("a/b", 50, False, does_not_raise()),
        ("x" * 50, 50, True, does_not_raise()),
        ("x" * 51, 50, True, pytest.raises(MalformedName)),
        ("abc", 2, False, pytest.raises(MalformedName)),
        ("news feed", 50, True, does_not_raise()),
    ],
)
def test_check_name_allowed(name, max_len: int, restricted: bool, expectation):
    with expectation:
        check_name_allowed(name, max_len, restricted)


def test_malformed_name_is_value_error():
    with pytest.raises(ValueError):
        check_name_allowed("")
    assert issubclass(MalformedName, AddressError)


def test_check_owner_allowed():
    check_owner_allowed("alice")
    with pytest.raises(MalformedName):
        check_owner_allowed("")
    with pytest.raises(MalformedName):
        check_owner_allowed("u" * 43)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("news", True),
        ("News_2.0-beta", True),
        ("", False),
        (None, False),
        ("news feed", False),
        ("a/b", False),
        ("x" * 50, True),
        ("x" * 51, False),
        ("café", False),
    ],
)
def test_validate_name(name, expected: bool):
    assert validate_name(name) is expected


def test_validate_name_max_len():
    assert validate_name("abcd", 4)
    assert not validate_name("abcde", 4)


def test_base_name():
    assert base_name("news") == "news"
    assert base_name("sports/soccer/Scores") == "Scores"


def test_os_topic_names():
    assert os_topic_name() == "com.magnet.os"
    assert os_topic_name("ANDROID") == "com.magnet.os/ANDROID"
    assert os_topic_name("IOS", "9.1") == "com.magnet.os/IOS/9.1"
    assert device_topic_name("IOS") == "com.magnet.os/IOS"
    assert device_all_leaf_topic_name("ANDROID") == "com.magnet.os/ANDROID/_all_"
