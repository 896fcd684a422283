"""Unit tests for the install CLI command."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from gpmctl.cli.commands.install import _resolve_symlink_preference
from gpmctl.cli.main import app
from gpmctl.core.config import LocalConfig
from typer.testing import CliRunner, Result

runner = CliRunner()


def _output(result: Result) -> str:
    """Command output with Rich line wrapping collapsed."""
    return " ".join(result.output.split())


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    """Local package index with a single plugin."""
    path = tmp_path / "index.json"
    path.write_text(
        json.dumps(
            {
                "plugins": {
                    "foo": {
                        "name": "Foo",
                        "version": "1.0.0",
                        "zipball_url": "https://example.test/foo.zip",
                    }
                }
            }
        )
    )
    return path


@pytest.fixture
def no_user_config():
    """Use default settings regardless of the user's config file."""
    with patch(
        "gpmctl.cli.commands.install.load_local_config_or_default",
        return_value=LocalConfig(),
    ):
        yield


@pytest.fixture
def served_transfer(fake_transfer: Any, zip_bytes: Callable[..., bytes]):
    """Replace the HTTP transfer with a fake serving foo.zip."""
    fake_transfer.bodies["https://example.test/foo.zip"] = zip_bytes({"foo.php": "<?php"})
    with patch("gpmctl.cli.commands.install.HttpTransfer", return_value=fake_transfer):
        yield fake_transfer


class TestInstallCommand:
    """Tests for gpmctl install."""

    def test_installs_package(
        self,
        site_root: Path,
        index_file: Path,
        no_user_config: None,
        served_transfer: Any,
    ) -> None:
        """A package is installed into the destination."""
        result = runner.invoke(
            app,
            ["install", "foo", "-y", "-d", str(site_root), "--index", str(index_file)],
        )

        assert result.exit_code == 0, result.output
        assert (site_root / "user" / "plugins" / "foo" / "foo.php").exists()
        assert "1 package(s) installed" in _output(result)

    def test_overwrite_prompt_answered_no(
        self,
        site_root: Path,
        index_file: Path,
        no_user_config: None,
        served_transfer: Any,
    ) -> None:
        """Answering no at the overwrite prompt keeps the installed package."""
        existing = site_root / "user" / "plugins" / "foo"
        existing.mkdir()

        result = runner.invoke(
            app,
            ["install", "foo", "-d", str(site_root), "--index", str(index_file)],
            input="n\n",
        )

        assert result.exit_code == 0, result.output
        assert "overwrite" in _output(result)
        assert not (existing / "foo.php").exists()

    def test_unknown_package_fails(
        self,
        site_root: Path,
        index_file: Path,
        no_user_config: None,
        served_transfer: Any,
    ) -> None:
        """Unknown packages make the command fail."""
        result = runner.invoke(
            app,
            ["install", "ghost", "-y", "-d", str(site_root), "--index", str(index_file)],
        )

        assert result.exit_code == 1
        assert "These packages were not found" in _output(result)

    def test_not_a_site_root(self, tmp_path: Path, no_user_config: None) -> None:
        """A destination without user/ is rejected."""
        result = runner.invoke(app, ["install", "foo", "-d", str(tmp_path)])

        assert result.exit_code == 1
        assert "not a valid site root" in _output(result)

    def test_undetected_platform_version(
        self, site_root: Path, index_file: Path, no_user_config: None
    ) -> None:
        """Without defines.php the platform version must be given."""
        (site_root / "system" / "defines.php").unlink()

        result = runner.invoke(
            app,
            ["install", "foo", "-d", str(site_root), "--index", str(index_file)],
        )

        assert result.exit_code == 1
        assert "--platform-version" in _output(result)

    def test_platform_version_option(
        self,
        site_root: Path,
        tmp_path: Path,
        no_user_config: None,
        served_transfer: Any,
    ) -> None:
        """--platform-version overrides detection for requirement checks."""
        index = tmp_path / "strict.json"
        index.write_text(
            json.dumps(
                {
                    "plugins": {
                        "foo": {
                            "version": "1.0.0",
                            "zipball_url": "https://example.test/foo.zip",
                            "dependencies": [{"name": "grav", "version": ">=1.7.5"}],
                        }
                    }
                }
            )
        )

        result = runner.invoke(
            app,
            [
                "install",
                "foo",
                "-y",
                "-d",
                str(site_root),
                "--index",
                str(index),
                "--platform-version",
                "1.7.2",
            ],
        )

        assert result.exit_code == 1
        assert "requires grav >=1.7.5" in _output(result)
        assert not (site_root / "user" / "plugins" / "foo").exists()

    def test_missing_index(self, site_root: Path, tmp_path: Path, no_user_config: None) -> None:
        """An unreadable index is reported as an error."""
        result = runner.invoke(
            app,
            ["install", "foo", "-d", str(site_root), "--index", str(tmp_path / "missing.json")],
        )

        assert result.exit_code == 1
        assert "Failed to read package index" in _output(result)


class TestSymlinkPreference:
    """Tests for _resolve_symlink_preference."""

    def test_explicit_flag_wins(self) -> None:
        """--symlinks/--no-symlinks bypasses the prompt."""
        local = LocalConfig(dev_roots=["/dev"])
        with patch("gpmctl.cli.commands.install.console_confirm") as mock_confirm:
            assert _resolve_symlink_preference(local, True, False) is True
            assert _resolve_symlink_preference(local, False, False) is False
        mock_confirm.assert_not_called()

    def test_no_dev_roots(self) -> None:
        """Without development roots symlinks are off and nothing is asked."""
        with patch("gpmctl.cli.commands.install.console_confirm") as mock_confirm:
            assert _resolve_symlink_preference(LocalConfig(), None, False) is False
        mock_confirm.assert_not_called()

    def test_all_yes_disables(self) -> None:
        """With -y the safe choice (no symlinks) is taken without asking."""
        local = LocalConfig(dev_roots=["/dev"])
        with patch("gpmctl.cli.commands.install.console_confirm") as mock_confirm:
            assert _resolve_symlink_preference(local, None, True) is False
        mock_confirm.assert_not_called()

    def test_prompts_with_dev_roots(self) -> None:
        """With development roots the user is asked."""
        local = LocalConfig(dev_roots=["/dev"])
        with patch("gpmctl.cli.commands.install.console_confirm", return_value=True) as mock_confirm:
            assert _resolve_symlink_preference(local, None, False) is True
        mock_confirm.assert_called_once()
