from __future__ import annotations

import importlib
import pkgutil

import pytest

import policylens

MODULES = sorted(m.name for m in pkgutil.iter_modules(policylens.__path__))


def test_package_lists_its_modules():
    for name in MODULES:
        assert name in policylens.__doc__, name


@pytest.mark.parametrize("name", MODULES)
def test_modules_are_documented(name):
    module = importlib.import_module(f"policylens.{name}")
    assert module.__doc__ and module.__doc__.strip()
