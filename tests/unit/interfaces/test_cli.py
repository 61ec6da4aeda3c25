"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from streamhop.domain.entities import EpisodeLink, Link, Stream
from streamhop.domain.exceptions import ProviderNotFoundError
from streamhop.interfaces.cli import cli


@pytest.fixture()
def runtime(monkeypatch: pytest.MonkeyPatch) -> SimpleNamespace:
    """Replace the composition root with use-case mocks."""
    rt = SimpleNamespace(
        resolve_streams_uc=AsyncMock(),
        list_episodes_uc=AsyncMock(),
    )

    @asynccontextmanager
    async def _open_runtime(config):
        yield rt

    monkeypatch.setattr(cli, "open_runtime", _open_runtime)
    monkeypatch.setattr(cli, "configure_logging", MagicMock())
    return rt


class TestStreamsCommand:
    def test_prints_json(self, runtime: SimpleNamespace, capsys: pytest.CaptureFixture) -> None:
        runtime.resolve_streams_uc.execute = AsyncMock(
            return_value=[Stream(server="SuperVideo 1", link="https://x/master.m3u8", type="m3u8")]
        )

        code = cli.start(["streams", "altadefinizionez", "/film/x/"])

        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out == [{"server": "SuperVideo 1", "link": "https://x/master.m3u8", "type": "m3u8"}]
        runtime.resolve_streams_uc.execute.assert_awaited_once_with(
            "altadefinizionez", "/film/x/", "movie"
        )
        cli.configure_logging.assert_called_once()
        assert cli.configure_logging.call_args.kwargs == {"stderr_only": True}

    def test_series_type(self, runtime: SimpleNamespace) -> None:
        runtime.resolve_streams_uc.execute = AsyncMock(return_value=[])

        assert cli.start(["streams", "streamingunity", "1234::56789", "--type", "series"]) == 0
        runtime.resolve_streams_uc.execute.assert_awaited_once_with(
            "streamingunity", "1234::56789", "series"
        )

    def test_unknown_provider(
        self, runtime: SimpleNamespace, capsys: pytest.CaptureFixture
    ) -> None:
        runtime.resolve_streams_uc.execute = AsyncMock(
            side_effect=ProviderNotFoundError("nope")
        )

        assert cli.start(["streams", "nope", "x"]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "nope" in captured.err


class TestEpisodesCommand:
    def test_prints_json(self, runtime: SimpleNamespace, capsys: pytest.CaptureFixture) -> None:
        runtime.list_episodes_uc.execute = AsyncMock(
            return_value=[Link(title="Episodes", episodes=(EpisodeLink(title="E1", link="101"),))]
        )

        assert cli.start(["episodes", "animeunity", "77"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out == [{"title": "Episodes", "episodes": [{"title": "E1", "link": "101"}]}]


class TestServeCommand:
    def test_runs_uvicorn(self, monkeypatch: pytest.MonkeyPatch) -> None:
        run = MagicMock()
        monkeypatch.setattr(cli.uvicorn, "run", run)
        monkeypatch.setattr(cli, "configure_logging", MagicMock())

        assert cli.start(["serve", "--host", "127.0.0.1", "--port", "9000", "--log-level", "DEBUG"]) == 0

        app = run.call_args.args[0]
        assert app.state.config.log_level == "DEBUG"
        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 9000
