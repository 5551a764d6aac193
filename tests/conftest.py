# ruff: noqa: E402
from __future__ import annotations

import sys
from pathlib import Path

# Ensure repository root is first on sys.path
_repo_root: Path = Path(__file__).resolve().parent.parent  # tests/ -> repo root
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import os

import pytest

from rapitapir import types as t
from rapitapir.types import Object


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test against default settings.

    ``Settings.model_config['env_file']`` is patched to ``None`` so a developer
    *.env* never leaks in, any ``RAPITAPIR_*`` variables from the calling shell
    are removed, and the settings singleton is rebuilt before and after the
    test so environment changes made via ``monkeypatch`` take effect.
    """

    from rapitapir.core.config import Settings, get_settings

    monkeypatch.setitem(Settings.model_config, "env_file", None)
    for name in list(os.environ):
        if name.startswith("RAPITAPIR_"):
            monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def user_schema() -> Object:
    """The ``{id: integer(minimum=1), email: email}`` object used across suites."""

    return t.hash_({"id": t.integer(minimum=1), "email": t.email()}, title="User")


@pytest.fixture
def profile_schema() -> Object:
    """A nested shape with an optional array of links."""

    profile = (
        t.object_()
        .field("bio", t.string(max_length=10))
        .optional_field("links", t.array(t.string(format="uri")))
        .build()
    )
    return (
        t.object_()
        .field("name", t.string(min_length=1))
        .field("profile", profile)
        .build(title="Account")
    )
