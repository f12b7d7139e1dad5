from __future__ import annotations

import dataclasses
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from git_story.config import AppConfig, RepoWeights, load_config, resolve_token
from git_story.errors import ConfigurationError


class ConfigTests(unittest.TestCase):
    def test_load_default_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = load_config(Path(tmp) / "missing.yaml")
        self.assertIsInstance(config, AppConfig)
        self.assertEqual(config.story.year, 2025)
        self.assertEqual(config.story.timezone, "UTC")
        self.assertEqual(config.providers["github"].api_root, "https://api.github.com")
        self.assertEqual(config.providers["gitlab"].max_event_pages, 10)
        self.assertEqual(config.scoring.repo.original_work, 15)

    def test_load_custom_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text(
                """
                story:
                  year: 2024
                  timezone: Europe/Berlin
                  demo_delay_seconds: 0
                providers:
                  gitlab:
                    api_root: https://gitlab.example.com/api/v4/
                    token_env: ALT_GITLAB_TOKEN
                    max_event_pages: 3
                scoring:
                  language:
                    diversity_bonus: 1.5
                  repo:
                    archived_penalty: -30
                logging:
                  level: debug
                output:
                  directory: custom_reports
                  format: json
                """,
                encoding="utf-8",
            )

            config = load_config(config_file)

        self.assertEqual(config.story.year, 2024)
        self.assertEqual(config.story.timezone, "Europe/Berlin")
        self.assertEqual(config.story.demo_delay_seconds, 0)
        self.assertEqual(config.providers["gitlab"].api_root, "https://gitlab.example.com/api/v4")
        self.assertEqual(config.providers["gitlab"].token_env, "ALT_GITLAB_TOKEN")
        self.assertEqual(config.providers["gitlab"].max_event_pages, 3)
        self.assertEqual(config.providers["github"].token_env, "GITHUB_TOKEN")
        self.assertEqual(config.scoring.language.diversity_bonus, 1.5)
        self.assertEqual(config.scoring.repo.archived_penalty, -30)
        self.assertEqual(config.scoring.repo.stars_max_points, 30)
        self.assertEqual(config.logging.level, "DEBUG")
        self.assertEqual(config.output.directory, Path("custom_reports"))
        self.assertEqual(config.output.format, "json")

    def test_unknown_scoring_key_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text("scoring:\n  repo:\n    stars_bonus: 4\n", encoding="utf-8")
            with self.assertRaises(ConfigurationError):
                load_config(config_file)

    def test_fractional_value_for_whole_number_weight_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text("scoring:\n  language:\n    diversity_threshold: 3.5\n", encoding="utf-8")
            with self.assertRaises(ConfigurationError):
                load_config(config_file)

    def test_non_numeric_weight_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text("scoring:\n  repo:\n    original_work: lots\n", encoding="utf-8")
            with self.assertRaises(ConfigurationError):
                load_config(config_file)

    def test_whole_float_weights_are_accepted(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_file = Path(tmp) / "settings.yaml"
            config_file.write_text(
                "scoring:\n  language:\n    top_n: 5.0\n  repo:\n    original_work: 20\n", encoding="utf-8"
            )
            config = load_config(config_file)
        self.assertEqual(config.scoring.language.top_n, 5)
        self.assertIsInstance(config.scoring.language.top_n, int)
        self.assertIsInstance(config.scoring.repo.original_work, float)

    def test_scoring_weights_are_immutable(self) -> None:
        weights = RepoWeights()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            weights.original_work = 99  # type: ignore[misc]

    def test_unknown_provider(self) -> None:
        with self.assertRaises(ConfigurationError):
            AppConfig().provider("bitbucket")


class ResolveTokenTests(unittest.TestCase):
    def setUp(self) -> None:
        self.config = AppConfig()
        self.config.providers["github"].token_env = "GIT_STORY_TEST_TOKEN"

    def test_anonymous_without_token(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GIT_STORY_TEST_TOKEN", None)
            self.assertIsNone(resolve_token(self.config, "github"))

    def test_explicit_token_wins(self) -> None:
        self.assertEqual(resolve_token(self.config, "github", token=" abc ", authenticated=True), "abc")

    def test_blank_token_is_misconfiguration(self) -> None:
        with self.assertRaises(ConfigurationError):
            resolve_token(self.config, "github", token="   ")

    def test_authenticated_reads_environment(self) -> None:
        with mock.patch.dict(os.environ, {"GIT_STORY_TEST_TOKEN": "from-env"}):
            self.assertEqual(resolve_token(self.config, "github", authenticated=True), "from-env")

    def test_authenticated_without_credential_fails(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GIT_STORY_TEST_TOKEN", None)
            with self.assertRaises(ConfigurationError):
                resolve_token(self.config, "github", authenticated=True)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
