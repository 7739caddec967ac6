"""Tests for CLI commands."""

import json
from types import SimpleNamespace

import pytest

from cli.commands import build_facade, build_parser, cmd_recent, cmd_replay, main
from replay_platform.runtime.musickit import StaticTokenMusicKit


def _args(**overrides):
    values = {"developer_token": "dev", "user_token": None, "max_items": None, "json": False}
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def patched_facade(monkeypatch, make_static_facade, catalog_transport, make_tracks, summary_payload):
    """Route ``build_facade`` to a static facade over the mock catalog."""
    def _patch(transport=None):
        transport = transport or catalog_transport(summary=summary_payload, tracks=make_tracks(23))
        monkeypatch.setattr("cli.commands.build_facade", lambda args: make_static_facade(transport))
        return transport
    return _patch


def test_build_parser_defaults():
    args = build_parser().parse_args(["replay"])

    assert args.command == "replay"
    assert args.log_level == "warning"
    assert args.max_items is None
    assert args.json is False


@pytest.mark.parametrize("raw", ["0", "-2", "many"])
def test_build_parser_rejects_bad_max_items(raw):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["recent", "--max-items", raw])


def test_build_facade_always_uses_static_sdk(monkeypatch):
    monkeypatch.setenv("MUSICKIT_SDK", "bridge")
    monkeypatch.delenv("APPLE_MUSIC_USER_TOKEN", raising=False)

    facade = build_facade(_args(user_token="cli-user"))

    assert isinstance(facade.sdk_adapter.sdk, StaticTokenMusicKit)
    assert facade.settings.music_user_token == "cli-user"


@pytest.mark.asyncio
async def test_cmd_recent_prints_tracks(patched_facade, capsys):
    patched_facade()

    await cmd_recent(_args())
    out = capsys.readouterr().out

    assert "RECENTLY PLAYED (23)" in out
    assert "1. Track 1 — Artist 1 [Album 1] 3:00" in out
    assert "3 request(s)" in out


@pytest.mark.asyncio
async def test_cmd_replay_prints_summary(patched_facade, capsys):
    patched_facade()

    await cmd_replay(_args(max_items=5))
    out = capsys.readouterr().out

    assert "REPLAY 2025" in out
    assert "1. Artist A (Pop)" in out
    assert "Album A by Artist A — 42 plays" in out
    assert "RECENTLY PLAYED (5)" in out
    assert "(stopped at 5 tracks)" in out


@pytest.mark.asyncio
async def test_cmd_replay_json(patched_facade, capsys):
    patched_facade()

    await cmd_replay(_args(json=True))
    payload = json.loads(capsys.readouterr().out)

    assert payload["summary"]["year"] == 2025
    assert len(payload["recent_tracks"]) == 23
    assert payload["meta"]["requests_made"] == 3


@pytest.mark.asyncio
async def test_missing_developer_token_exits_with_category(patched_facade, monkeypatch, capsys):
    patched_facade()
    monkeypatch.delenv("APPLE_MUSIC_DEVELOPER_TOKEN", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        await cmd_recent(_args(developer_token=None))

    assert exc_info.value.code == 1
    assert "Error [missing_credential]" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_fetch_failure_json_reports_operation_result(patched_facade, catalog_transport, capsys):
    patched_facade(catalog_transport(fail_at_offset=10, tracks=[{"id": str(i)} for i in range(30)]))

    with pytest.raises(SystemExit):
        await cmd_recent(_args(json=True))
    payload = json.loads(capsys.readouterr().out)

    assert payload["ok"] is False
    assert payload["error"]["category"] == "fetch"
    assert payload["session"]["authorized"] is True


@pytest.mark.asyncio
async def test_main_dispatches_subcommand(patched_facade, capsys):
    transport = patched_facade()

    await main(["recent", "--developer-token", "dev", "--max-items", "12"])

    assert "RECENTLY PLAYED (12)" in capsys.readouterr().out
    assert len(transport.requests) == 2
