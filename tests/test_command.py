import dataclasses

import pytest

from mmx.core.command import (
    EXIT_INVALID,
    EXIT_NOT_AN_ADDRESS,
    EXIT_OK,
    cmdline,
    run_command,
)
from mmx.core.settings import DEFAULT_NAMING


def lines(capsys) -> list[str]:
    return capsys.readouterr().out.splitlines()


@pytest.mark.parametrize(
    "cmd, value, expected",
    [
        ("escape", "joe smith@example.com", "joe\\20smith\\40example.com"),
        ("unescape", "joe\\20smith", "joe smith"),
        ("normalize", "a//b", "a/b"),
        ("check", "news", "news"),
        ("validate", "news", "True"),
        ("compact", "/appX/alice/news", "alice#news"),
    ],
)
def test_simple_commands(capsys, cmd: str, value: str, expected: str):
    assert run_command(cmd, value) == EXIT_OK
    assert lines(capsys) == [expected]


def test_build(capsys):
    assert run_command("build", "News", app_id="appX", owner="Joe Smith") == EXIT_OK
    assert lines(capsys) == ["/appX/joe\\20smith/news"]

    assert run_command("build", None, app_id="appX") == EXIT_OK
    assert lines(capsys) == ["appX"]


def test_build_rejects_paths_unless_allowed(capsys):
    assert run_command("build", "a/b", app_id="appX") == EXIT_INVALID
    allow = dataclasses.replace(DEFAULT_NAMING, path_syntax_restricted=False)
    assert run_command("build", "a/b", allow, app_id="appX") == EXIT_OK
    assert lines(capsys) == ["/appX/*/a/b"]


def test_parse(capsys):
    assert run_command("parse", "/appX/joe\\20smith/news") == EXIT_OK
    assert lines(capsys) == [
        "app: appX",
        "owner: joe smith",
        "id: news",
        "compact: joe\\20smith#news",
    ]


def test_not_an_address():
    assert run_command("parse", "not-a-node") == EXIT_NOT_AN_ADDRESS
    assert run_command("compact", "/appX") == EXIT_NOT_AN_ADDRESS


def test_invalid_names():
    assert run_command("check", "") == EXIT_INVALID
    assert run_command("normalize", "/a") == EXIT_INVALID
    assert run_command("validate", "a b") == EXIT_INVALID


def test_node(capsys):
    assert run_command("node", "alice#News", app_id="appX") == EXIT_OK
    assert lines(capsys) == ["/appX/alice/news"]


def test_scope(capsys):
    assert run_command("scope", "/appX/alice", app_id="appX") == EXIT_OK
    assert lines(capsys) == ["scope: personal", "top-level: True", "app-scoped: True"]


def test_cmdline(capsys):
    with pytest.raises(SystemExit) as exc:
        cmdline(["check", "a/b", "--allow-paths"])
    assert exc.value.code == EXIT_OK
    assert lines(capsys) == ["a/b"]


def test_cmdline_requires_app():
    with pytest.raises(SystemExit) as exc:
        cmdline(["build", "news"])
    assert exc.value.code == 2
