"""Tests for the secrets file protection and client exposure probe."""

from __future__ import annotations

from pathlib import Path

import pytest

from seatbelt.config import ProbeSettings
from seatbelt.probes.security import (
    declared_names,
    exposure_violations,
    ignore_patterns,
    is_ignored,
    probe_security,
)
from tests.probes.helpers import make_project

SETTINGS = ProbeSettings()


class TestIgnoreRules:

    def test_comments_and_blanks_skipped_negations_kept(self, tmp_path: Path) -> None:
        path = tmp_path / ".gitignore"
        path.write_text("# comment\n\nnode_modules\n!keep.env\n.env.local\n")
        assert ignore_patterns(path) == ["node_modules", "!keep.env", ".env.local"]

    def test_missing_file_has_no_patterns(self, tmp_path: Path) -> None:
        assert ignore_patterns(tmp_path / ".gitignore") == []

    @pytest.mark.parametrize(
        "pattern",
        [".env.local", "/.env.local", "*.local", ".env*", ".env.*",
         "**/.env.local", "**/*.local"],
    )
    def test_patterns_covering_secrets_file(self, pattern: str) -> None:
        assert is_ignored(".env.local", [pattern])

    @pytest.mark.parametrize("pattern", [".env", "node_modules/", "*.log", "config/.env.local"])
    def test_patterns_not_covering_secrets_file(self, pattern: str) -> None:
        assert not is_ignored(".env.local", [pattern])

    def test_negation_reincludes_file(self) -> None:
        assert not is_ignored(".env.local", [".env*", "!.env.local"])

    def test_last_match_wins(self) -> None:
        assert is_ignored(".env.local", [".env*", "!.env.local", "*.local"])

    def test_negation_of_other_file_keeps_exclusion(self) -> None:
        assert is_ignored(".env.local", [".env*", "!.env.example"])

    def test_double_star_matches_nested_path(self) -> None:
        assert is_ignored("web/.env.local", ["**/.env.local"])
        assert not is_ignored("web/.env.local", ["/.env.local"])

    def test_ignored_directory_cannot_be_reincluded(self) -> None:
        assert is_ignored("config/.env.local", ["config/", "!config/.env.local"])


class TestExposure:

    def test_public_prefixed_server_secret_is_violation(self) -> None:
        names = [
            "VITE_SUPABASE_URL",
            "VITE_SUPABASE_ANON_KEY",
            "VITE_SUPABASE_SERVICE_ROLE_KEY",
            "NEXT_PUBLIC_OPENAI_API_KEY",
            "OPENAI_API_KEY",
        ]
        assert exposure_violations(names, SETTINGS) == [
            "NEXT_PUBLIC_OPENAI_API_KEY",
            "VITE_SUPABASE_SERVICE_ROLE_KEY",
        ]

    def test_server_side_names_are_fine(self) -> None:
        assert exposure_violations(["HIVE_API_KEY", "SUPABASE_SERVICE_ROLE_KEY"], SETTINGS) == []

    def test_declared_names_only(self, tmp_path: Path) -> None:
        path = tmp_path / ".env.local"
        path.write_text("# note\nA=1\nexport B='two'\nC=\n")
        assert declared_names(path) == ["A", "B", "C"]


class TestProbeSecurity:

    def test_protected_secrets_file(self, tmp_path: Path) -> None:
        root = make_project(tmp_path / "p", gitignore=".env.local\n", env_local="A=1\nB=2\n")
        facts = probe_security(root, SETTINGS)
        assert facts.secrets_file_exists
        assert facts.secrets_file_protected
        assert facts.secrets_count == 2
        assert facts.violation_count == 0

    def test_negated_secrets_file_is_unprotected(self, tmp_path: Path) -> None:
        root = make_project(tmp_path / "p", gitignore=".env*\n!.env.local\n", env_local="A=1\n")
        assert not probe_security(root, SETTINGS).secrets_file_protected

    def test_double_star_pattern_protects(self, tmp_path: Path) -> None:
        root = make_project(tmp_path / "p", gitignore="**/.env.local\n", env_local="A=1\n")
        assert probe_security(root, SETTINGS).secrets_file_protected

    def test_unprotected_secrets_file(self, tmp_path: Path) -> None:
        root = make_project(tmp_path / "p", gitignore="node_modules\n", env_local="A=1\n")
        facts = probe_security(root, SETTINGS)
        assert facts.secrets_file_exists
        assert not facts.secrets_file_protected

    def test_missing_secrets_file(self, project: Path) -> None:
        facts = probe_security(project, SETTINGS)
        assert not facts.secrets_file_exists
        assert facts.secrets_count == 0

    def test_violations_recorded_by_name(self, tmp_path: Path) -> None:
        root = make_project(
            tmp_path / "p",
            gitignore="*.local\n",
            env_local="VITE_HIVE_API_KEY=supersecretvalue\n",
        )
        facts = probe_security(root, SETTINGS)
        assert facts.exposure_violations == ("VITE_HIVE_API_KEY",)
        assert "supersecretvalue" not in repr(facts)
