"""Tests for omniapp.config — AppConfig and its get/set accessor."""

from omniapp.config import AppConfig, coerce_config


class TestDefaults:
    def test_flags_off(self) -> None:
        config = AppConfig()
        assert config.debug is False
        assert config.error is False
        assert config.timezone is None
        assert config.pass_limit == 8

    def test_mutable_defaults_are_not_shared(self) -> None:
        a = AppConfig()
        b = AppConfig()
        a.extra["x"] = 1
        assert "x" not in b.extra


class TestAccessor:
    def test_get_known_field(self) -> None:
        config = AppConfig(debug=True)
        assert config.get("debug") is True

    def test_get_missing_key_is_none(self) -> None:
        assert AppConfig().get("nope") is None

    def test_set_returns_value(self) -> None:
        config = AppConfig()
        assert config.set("debug", True) is True
        assert config.debug is True

    def test_set_unknown_key_goes_to_extra(self) -> None:
        config = AppConfig()
        config.set("site_name", "Demo")
        assert config.extra == {"site_name": "Demo"}
        assert config.get("site_name") == "Demo"

    def test_extra_is_not_addressable_as_a_key(self) -> None:
        config = AppConfig()
        config.set("extra", 5)
        assert config.extra == {"extra": 5}


class TestFromMapping:
    def test_splits_known_and_unknown(self) -> None:
        config = AppConfig.from_mapping({"debug": True, "pass_limit": 2, "theme": "dark"})
        assert config.debug is True
        assert config.pass_limit == 2
        assert config.extra == {"theme": "dark"}

    def test_coerce_accepts_all_shapes(self) -> None:
        existing = AppConfig(error=True)
        assert coerce_config(existing) is existing
        assert coerce_config(None) == AppConfig()
        assert coerce_config({"error": True}).error is True
