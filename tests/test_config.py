"""Tests for warmer configuration models and environment loading."""

import pytest
from pydantic import ValidationError

from warmer.config import CdnWarmerConfig, RenderWarmerConfig, RuntimeConfig, load_config


class TestCdnWarmerConfig:
    def test_defaults(self):
        cfg = CdnWarmerConfig()
        assert cfg.batch_size == 5
        assert cfg.max_concurrent_requests == 10
        assert cfg.sleep_between_batches == 0.0
        assert cfg.verify_tls is True
        assert cfg.canonical_host is None
        assert cfg.request_headers == {}

    @pytest.mark.parametrize("value", [0, -1, "-5", "0"])
    def test_non_positive_concurrency_clamps_to_one(self, value):
        assert CdnWarmerConfig(max_concurrent_requests=value).max_concurrent_requests == 1

    def test_concurrency_upper_bound(self):
        with pytest.raises(ValidationError):
            CdnWarmerConfig(max_concurrent_requests=1000)

    @pytest.mark.parametrize("value", [0, -3, "abc"])
    def test_invalid_batch_size(self, value):
        with pytest.raises(ValidationError):
            CdnWarmerConfig(batch_size=value)

    def test_negative_sleep_rejected(self):
        with pytest.raises(ValidationError):
            CdnWarmerConfig(sleep_between_batches=-1)

    def test_zero_timeout_rejected(self):
        with pytest.raises(ValidationError):
            CdnWarmerConfig(connect_timeout_sec=0)

    def test_canonical_host_normalized(self):
        assert CdnWarmerConfig(canonical_host="  Example.ORG ").canonical_host == "example.org"
        assert CdnWarmerConfig(canonical_host="").canonical_host is None

    @pytest.mark.parametrize("host", ["https://example.org", "example.org/wiki", "exa mple.org"])
    def test_canonical_host_must_be_bare(self, host):
        with pytest.raises(ValidationError):
            CdnWarmerConfig(canonical_host=host)

    def test_headers_from_lines(self):
        cfg = CdnWarmerConfig(request_headers="X-Warm: 1\n\nUser-Agent: warmer/0.1 (+ops)")
        assert cfg.request_headers == {"X-Warm": "1", "User-Agent": "warmer/0.1 (+ops)"}

    def test_headers_reject_bad_line(self):
        with pytest.raises(ValidationError):
            CdnWarmerConfig(request_headers="not a header")

    def test_frozen(self):
        cfg = CdnWarmerConfig()
        with pytest.raises(ValidationError):
            cfg.batch_size = 20


class TestRenderWarmerConfig:
    def test_defaults(self):
        cfg = RenderWarmerConfig()
        assert cfg.batch_size == 10
        assert cfg.sleep_between_batches == 0.0

    def test_invalid_batch_size(self):
        with pytest.raises(ValidationError):
            RenderWarmerConfig(batch_size=0)


class TestRuntimeConfig:
    def test_log_level_upper_cased(self):
        assert RuntimeConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            RuntimeConfig(log_level="loud")


class TestLoadConfig:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CDN_WARMER_BATCH_SIZE", "7")
        monkeypatch.setenv("CDN_WARMER_MAX_CONCURRENT_REQUESTS", "0")
        monkeypatch.setenv("CDN_WARMER_VERIFY_TLS", "false")
        monkeypatch.setenv("CDN_WARMER_CANONICAL_HOST", "example.org")
        monkeypatch.setenv("RENDER_WARMER_BATCH_SIZE", "3")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        cfg = load_config()

        assert cfg.cdn.batch_size == 7
        assert cfg.cdn.max_concurrent_requests == 1
        assert cfg.cdn.verify_tls is False
        assert cfg.cdn.canonical_host == "example.org"
        assert cfg.render.batch_size == 3
        assert cfg.runtime.log_level == "WARNING"

    def test_overrides_win_over_environment(self, monkeypatch):
        monkeypatch.setenv("CDN_WARMER_BATCH_SIZE", "7")
        cfg = load_config(cdn={"batch_size": 2})
        assert cfg.cdn.batch_size == 2

    def test_invalid_environment_raises_runtime_error(self, monkeypatch):
        monkeypatch.setenv("CDN_WARMER_BATCH_SIZE", "zero")
        with pytest.raises(RuntimeError, match="Configuration validation failed"):
            load_config()
