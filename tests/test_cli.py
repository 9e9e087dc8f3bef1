"""Tests for the CDN warm command line entry point."""

import json
from unittest.mock import patch

import httpx

from warmer.cli import warm


def _catalog(tmp_path, count=4):
    path = tmp_path / "catalog.json"
    items = [{"id": i, "url": f"http://10.0.0.5/wiki/{i}"} for i in range(1, count + 1)]
    path.write_text(json.dumps({"items": items}), encoding="utf-8")
    return path


class _MockClient(httpx.AsyncClient):
    requested: list[str] = []

    def __init__(self, **kwargs):
        kwargs.pop("verify", None)

        def handler(request):
            _MockClient.requested.append(str(request.url))
            return httpx.Response(200)

        super().__init__(transport=httpx.MockTransport(handler), **kwargs)


class TestWarmCli:
    def test_warms_catalog_and_prints_report(self, tmp_path, capsys):
        _MockClient.requested = []
        argv = [
            "--catalog",
            str(_catalog(tmp_path)),
            "--canonical-host",
            "example.org",
            "--batch-size",
            "3",
            "--max-concurrent",
            "0",
        ]

        with (
            patch("warmer.cli.warm.setup_json_logging"),
            patch("warmer.adapters.cdn_warmer.httpx.AsyncClient", _MockClient),
        ):
            assert warm.main(argv) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["succeeded"] == 4
        assert report["batches"] == 2
        assert report["exhausted"] is True
        assert report["last_cursor"] == "4"
        assert _MockClient.requested == [f"http://example.org/wiki/{i}" for i in range(1, 5)]

    def test_resume_with_cursor_and_limit(self, tmp_path, capsys):
        _MockClient.requested = []
        argv = ["--catalog", str(_catalog(tmp_path, 6)), "--batch-size", "2"]

        with (
            patch("warmer.cli.warm.setup_json_logging"),
            patch("warmer.adapters.cdn_warmer.httpx.AsyncClient", _MockClient),
        ):
            assert warm.main([*argv, "--cursor", "2", "--max-batches", "1"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["keys"] == 2
        assert report["last_cursor"] == "4"
        assert report["exhausted"] is False

    def test_missing_catalog_argument(self, capsys):
        assert warm.main([]) == 2
        assert "--catalog" in capsys.readouterr().err

    def test_unreadable_catalog(self, tmp_path, capsys):
        with patch("warmer.cli.warm.setup_json_logging"):
            assert warm.main(["--catalog", str(tmp_path / "nope.json")]) == 2
        assert "Catalog error" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        assert warm.main(["--catalog", str(_catalog(tmp_path)), "--batch-size", "0"]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_list_warmers(self, capsys):
        assert warm.main(["--list-warmers"]) == 0
        out = capsys.readouterr().out
        assert "wiki_node_cdn" in out
        assert "wiki_node\t" in out
