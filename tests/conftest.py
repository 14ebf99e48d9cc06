"""Shared fixtures for seatbelt tests."""

from __future__ import annotations

import pathlib

import pytest

from tests.probes.helpers import make_home, make_project


@pytest.fixture
def project(tmp_path: pathlib.Path) -> pathlib.Path:
    """An empty project directory."""
    return make_project(tmp_path / "project")


@pytest.fixture
def home(tmp_path: pathlib.Path) -> pathlib.Path:
    """An empty home directory."""
    return make_home(tmp_path / "home")


@pytest.fixture
def healthy_project(tmp_path: pathlib.Path) -> pathlib.Path:
    """A project that satisfies every structure and security check."""
    return make_project(
        tmp_path / "healthy",
        gitignore="node_modules\n.env.local\n",
        env_local="VITE_SUPABASE_URL=https://x.supabase.co\nOPENAI_API_KEY=sk-test\n",
        migrations=2,
        assistant_settings=True,
        git=True,
        supabase_ref="abcd1234",
        nvmrc=True,
    )
