"""Tests for omniapp.__init__ — every public name resolves lazily."""

import pytest

import omniapp


@pytest.mark.parametrize("name", omniapp.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(omniapp, name)
    assert obj is not None, f"omniapp.{name} resolved to None"


def test_app_is_the_real_class() -> None:
    from omniapp.app import App

    assert omniapp.App is App


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        omniapp.__getattr__("ThisDoesNotExist")
