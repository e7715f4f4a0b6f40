"""Tests for api_gateway.app.core.config: environment-driven settings."""

import pytest

from api_gateway.app.core.config import Settings, parse_gateway_routes, parse_service_targets
from api_gateway.app.core.errors import ConfigurationError


class TestServiceTargets:
    def test_parse(self) -> None:
        parsed = parse_service_targets("users=http://a, http://b;orders=http://x")
        assert parsed == {"users": ["http://a", "http://b"], "orders": ["http://x"]}

    def test_empty_entry_registers_empty_list(self) -> None:
        assert parse_service_targets("billing=") == {"billing": []}

    def test_blank(self) -> None:
        assert parse_service_targets("") == {}
        assert parse_service_targets(" ; ") == {}

    def test_repeated_service_appends(self) -> None:
        assert parse_service_targets("a=http://1;a=http://2") == {"a": ["http://1", "http://2"]}

    @pytest.mark.parametrize("raw", ["users", "=http://a"])
    def test_malformed(self, raw: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_service_targets(raw)


class TestGatewayRoutes:
    def test_parse(self) -> None:
        assert parse_gateway_routes("/api/users=users;/direct=http://host:9000") == [
            ("/api/users", "users"),
            ("/direct", "http://host:9000"),
        ]

    @pytest.mark.parametrize("raw", ["api=users", "/api=", "/api"])
    def test_malformed(self, raw: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_gateway_routes(raw)


class TestSettings:
    def test_explicit_values_override_environment(self) -> None:
        cfg = Settings(service_targets="a=http://a", upstream_timeout=1.5)
        assert cfg.service_targets == "a=http://a"
        assert cfg.upstream_timeout == 1.5
