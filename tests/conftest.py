"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules: a scratch
site root, package and config factories, and in-memory stand-ins for the
prompt, reporter, transfer and installer collaborators.
"""

import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
from gpmctl.core.config import InstallConfig
from gpmctl.core.download import TransportError
from gpmctl.models.package import DependencySpec, Package, PackageType, default_install_path


class RecordingReporter:
    """Reporter that keeps every line and progress value."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.percents: list[int] = []

    def report(self, line: str) -> None:
        self.lines.append(line)

    def progress(self, percent: int) -> None:
        self.percents.append(percent)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class ScriptedConfirm:
    """Confirm function answering from a script.

    Answers are consumed in order; once exhausted, ``default`` is returned.
    Every question asked is recorded.
    """

    def __init__(self, *answers: bool, default: bool = False) -> None:
        self._answers = list(answers)
        self._default = default
        self.questions: list[str] = []

    def __call__(self, question: str) -> bool:
        self.questions.append(question)
        if self._answers:
            return self._answers.pop(0)
        return self._default


class FakeTransfer:
    """Transfer serving fixed bodies by URL."""

    def __init__(self, bodies: dict[str, bytes] | None = None) -> None:
        self.bodies = bodies or {}
        self.requested: list[str] = []

    def get(self, url: str, on_progress: Callable[[int], None] | None = None) -> bytes:
        self.requested.append(url)
        if url not in self.bodies:
            raise TransportError(f"404 for {url}")
        if on_progress is not None:
            for percent in (0, 50, 100):
                on_progress(percent)
        return self.bodies[url]


def build_zip(files: dict[str, str], top_level: str | None = "package-1.0.0") -> bytes:
    """Build an in-memory zip archive, optionally wrapped in a top-level folder."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            arcname = f"{top_level}/{name}" if top_level else name
            zf.writestr(arcname, content)
    return buffer.getvalue()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Create a minimal site root with user/ and system/defines.php."""
    root = tmp_path / "site"
    (root / "user" / "plugins").mkdir(parents=True)
    (root / "user" / "themes").mkdir(parents=True)
    (root / "user" / "pages").mkdir(parents=True)
    (root / "user" / "pages" / "home.md").write_text("live home")
    (root / "system").mkdir()
    (root / "system" / "defines.php").write_text(
        "<?php\ndefine('GRAV_VERSION', '1.7.0');\n"
    )
    return root


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    """Directory that receives temporary download directories."""
    return tmp_path / "downloads"


@pytest.fixture
def make_config(site_root: Path, download_dir: Path) -> Callable[..., InstallConfig]:
    """Factory for InstallConfig pointing at the scratch site."""

    def _make(**overrides: object) -> InstallConfig:
        values: dict[str, object] = {
            "destination": site_root,
            "platform_version": "1.7.0",
            "download_dir": download_dir,
        }
        values.update(overrides)
        return InstallConfig(**values)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def make_package() -> Callable[..., Package]:
    """Factory for Package instances with sensible defaults."""

    def _make(
        slug: str = "foo",
        package_type: PackageType = PackageType.PLUGIN,
        version: str | None = "1.0.0",
        repository: str | None = None,
        dependencies: tuple[DependencySpec, ...] = (),
        **kwargs: object,
    ) -> Package:
        return Package(
            slug=slug,
            name=kwargs.pop("name", slug.title()),  # type: ignore[arg-type]
            package_type=package_type,
            install_path=kwargs.pop(  # type: ignore[arg-type]
                "install_path", default_install_path(slug, package_type)
            ),
            version=version,
            repository=repository,
            zipball_url=kwargs.pop(  # type: ignore[arg-type]
                "zipball_url", f"https://example.test/{slug}.zip"
            ),
            dependencies=dependencies,
            **kwargs,  # type: ignore[arg-type]
        )

    return _make


@pytest.fixture
def reporter() -> RecordingReporter:
    """Reporter that records all status lines."""
    return RecordingReporter()


@pytest.fixture
def zip_bytes() -> Callable[..., bytes]:
    """Factory building zip archive bytes."""
    return build_zip


@pytest.fixture
def scripted_confirm() -> type[ScriptedConfirm]:
    """The ScriptedConfirm class, for building prompt scripts."""
    return ScriptedConfirm


@pytest.fixture
def fake_transfer() -> FakeTransfer:
    """Transfer with no bodies; tests register URLs on ``bodies``."""
    return FakeTransfer()
