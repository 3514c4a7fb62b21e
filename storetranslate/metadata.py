"""
Fastlane metadata discovery and the per-locale translation run.

Layouts:
    ios:      fastlane/metadata/<locale>/<input_file>
    android:  fastlane/metadata/android/<locale>/changelogs/<input_file>

A locale is translated only when its file is missing or older than the
master file, so re-running after a partial failure picks up where the
previous run stopped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from storetranslate import ui

if TYPE_CHECKING:
    from storetranslate.config import TranslateConfig
    from storetranslate.translator import Translator

logger = logging.getLogger(__name__)

# Folders inside the metadata tree that are not locales
ADMIN_ENTRIES = frozenset({"review_information", "default"})

# Input file name that selects the newest numbered Android changelog
LATEST_CHANGELOG = "latest"

_NUMBERED_FILE_RE = re.compile(r"^(\d+)\.txt$")


class Platform(str, Enum):
    """Supported store metadata layouts."""

    IOS = "ios"
    ANDROID = "android"

    @classmethod
    def parse(cls, value: Platform | str) -> Platform:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unsupported platform: {value}. Supported: {', '.join(p.value for p in cls)}"
            ) from None

    def base_directory(self, root: Path) -> Path:
        if self is Platform.IOS:
            return root / "fastlane" / "metadata"
        return root / "fastlane" / "metadata" / "android"

    def locale_directory(self, base_directory: Path, locale: str) -> Path:
        if self is Platform.IOS:
            return base_directory / locale
        return base_directory / locale / "changelogs"

    @property
    def reserved_entries(self) -> frozenset[str]:
        """Folders in this platform's base directory that belong to another layout."""
        if self is Platform.IOS:
            # the android base directory is nested inside the ios one
            return frozenset({Platform.ANDROID.base_directory(Path()).name})
        return frozenset()


@dataclass
class RunSummary:
    """Outcome of one translation run."""

    master_locale: str
    master_file: Path
    translated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


def list_locales(base_directory: Path, exclude: Iterable[str] = ()) -> list[str]:
    """
    List the locale folders in a metadata directory.

    Args:
        base_directory: Platform metadata directory
        exclude: Extra folder names to skip

    Returns:
        Sorted locale names, excluding administrative folders. Empty if
        the directory does not exist.
    """
    base_directory = Path(base_directory)
    if not base_directory.is_dir():
        return []

    skipped = ADMIN_ENTRIES | frozenset(exclude)
    return sorted(
        entry.name
        for entry in base_directory.iterdir()
        if entry.is_dir() and entry.name not in skipped
    )


def latest_changelog_file(directory: Path) -> str | None:
    """Name of the highest-numbered <n>.txt file in a directory, if any."""
    directory = Path(directory)
    if not directory.is_dir():
        return None

    numbered = []
    for entry in directory.iterdir():
        match = _NUMBERED_FILE_RE.match(entry.name)
        if match and entry.is_file():
            numbered.append((int(match.group(1)), entry.name))

    if not numbered:
        return None
    return max(numbered)[1]


def fetch_master_text(
    base_directory: Path, master_locale: str, platform: Platform, input_file: str
) -> tuple[str, Path] | tuple[None, None]:
    """
    Read the master locale's source text.

    Returns:
        (text, path), or (None, None) after reporting an error if the master
        locale directory or the input file does not exist
    """
    master_path = platform.locale_directory(Path(base_directory), master_locale)

    if not master_path.is_dir():
        ui.error(f"Master path does not exist: {escape(str(master_path))}")
        return None, None

    file_path = master_path / input_file
    if not file_path.is_file():
        ui.error(f"File does not exist: {escape(str(file_path))}")
        return None, None

    return file_path.read_text(encoding="utf-8"), file_path


def is_up_to_date(target_path: Path, master_path: Path) -> bool:
    """True if the target exists and was modified at or after the master file."""
    target_path = Path(target_path)
    if not target_path.is_file():
        return False
    return target_path.stat().st_mtime >= Path(master_path).stat().st_mtime


def write_translation(
    base_directory: Path, locale: str, platform: Platform, input_file: str, text: str
) -> Path:
    """Write a translation, creating the locale directory if needed."""
    target_dir = platform.locale_directory(Path(base_directory), locale)
    target_dir.mkdir(parents=True, exist_ok=True)

    target_path = target_dir / input_file
    target_path.write_text(text, encoding="utf-8")
    logger.debug(f"Wrote {len(text)} characters to {target_path}")
    return target_path


class MetadataTranslator:
    """Translates the master file into every other locale of a metadata tree."""

    def __init__(self, config: TranslateConfig, translator: Translator | None = None):
        self.config = config
        if translator is None:
            from storetranslate.translator import Translator

            translator = Translator(config)
        self.translator = translator

    @property
    def base_directory(self) -> Path:
        return self.config.platform.base_directory(self.config.root)

    def resolve_input_file(self) -> str | None:
        """
        Resolve the configured input file name.

        "latest" selects the highest-numbered changelog in the master
        locale directory (Android version codes).
        """
        input_file = self.config.input_file
        if input_file != LATEST_CHANGELOG:
            return input_file

        master_dir = self.config.platform.locale_directory(
            self.base_directory, self.config.master_locale
        )
        latest = latest_changelog_file(master_dir)
        if latest is None:
            ui.error(f"No numbered changelog files found in {escape(str(master_dir))}")
            return None

        logger.debug(f"Resolved latest changelog to {latest}")
        return latest

    def target_path(self, locale: str, input_file: str) -> Path:
        return self.config.platform.locale_directory(self.base_directory, locale) / input_file

    def locales(self) -> list[str]:
        return list_locales(self.base_directory, exclude=self.config.platform.reserved_entries)

    def locale_states(self, input_file: str) -> list[tuple[str, str]]:
        """
        Describe every locale's copy of the input file.

        Returns:
            (locale, state) pairs. State is one of "master", "master (missing)",
            "up to date", "stale", "missing", or "-" when there is no master
            file to compare against.
        """
        master_path = self.target_path(self.config.master_locale, input_file)
        states = []
        for locale in self.locales():
            path = self.target_path(locale, input_file)
            if locale == self.config.master_locale:
                state = "master" if path.is_file() else "master (missing)"
            elif not master_path.is_file():
                state = "-"
            elif is_up_to_date(path, master_path):
                state = "up to date"
            elif path.is_file():
                state = "stale"
            else:
                state = "missing"
            states.append((locale, state))
        return states

    def run(self) -> RunSummary | None:
        """
        Translate the master file into every stale locale.

        Returns:
            A RunSummary, or None if the metadata directory, the master
            locale or the master file is missing
        """
        config = self.config
        base_directory = self.base_directory

        if not base_directory.is_dir():
            ui.error(f"Directory does not exist: {escape(str(base_directory))}")
            return None

        input_file = self.resolve_input_file()
        if input_file is None:
            return None

        master_text, master_path = fetch_master_text(
            base_directory, config.master_locale, config.platform, input_file
        )
        if master_text is None or master_path is None:
            ui.info("Master file not found, skipping translation.")
            return None

        summary = RunSummary(master_locale=config.master_locale, master_file=master_path)
        targets = [locale for locale in self.locales() if locale != config.master_locale]
        logger.debug(f"Found {len(targets)} target locales in {base_directory}")

        pending = []
        for locale in targets:
            if not config.force and is_up_to_date(self.target_path(locale, input_file), master_path):
                ui.info(f"[dim]{escape(locale)}: already up to date, skipped[/dim]")
                summary.skipped.append(locale)
            else:
                pending.append(locale)

        for index, locale in enumerate(pending):
            if config.dry_run:
                ui.info(f"{escape(locale)}: would translate {escape(master_path.name)}")
                summary.translated.append(locale)
                continue

            translated = self.translator.translate(master_text, locale)
            if translated is None:
                summary.failed.append(locale)
            else:
                path = write_translation(base_directory, locale, config.platform, input_file, translated)
                ui.success(f"{escape(locale)}: translation written", details=escape(str(path)))
                summary.translated.append(locale)

            if config.request_delay and index < len(pending) - 1:
                ui.wait(config.request_delay, description="Waiting before next request")

        return summary
