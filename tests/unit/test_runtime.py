"""Unit tests for the runtime entrypoint."""

from __future__ import annotations

import falcon
import falcon.testing
import pytest

from gitpoap_bot import runtime


class TestParsePort:
    """Tests for ``GITPOAP_BOT_PORT`` validation."""

    @pytest.mark.parametrize(
        ("raw", "expected"), [("1", 1), ("3000", 3000), ("65535", 65535)]
    )
    def test_valid_ports(self, raw: str, expected: int) -> None:
        """In-range integers are accepted."""
        assert runtime._parse_port(raw) == expected

    @pytest.mark.parametrize("raw", ["0", "65536", "-5", "http", ""])
    def test_invalid_ports_exit(self, raw: str) -> None:
        """Anything else stops the process."""
        with pytest.raises(SystemExit) as excinfo:
            runtime._parse_port(raw)
        assert excinfo.value.code == 1


def test_create_app_without_configuration_is_health_only(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Missing configuration yields an app that reports itself unconfigured."""
    for name in ("API_URL", "APP_ID", "PRIVATE_KEY", "PRIVATE_KEY_PATH"):
        monkeypatch.delenv(name, raising=False)

    client = falcon.testing.TestClient(runtime.create_app())

    assert client.simulate_get("/health").status == falcon.HTTP_200
    assert client.simulate_get("/ready").status == falcon.HTTP_503
