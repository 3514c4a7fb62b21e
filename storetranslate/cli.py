import argparse
import logging
import sys
from typing import Any

from dotenv import find_dotenv, load_dotenv
from rich.markup import escape

from storetranslate import VERSION
from storetranslate.config import ConfigError, TranslateConfig
from storetranslate.content import ContentType
from storetranslate.metadata import MetadataTranslator, Platform
from storetranslate.ui import (
    console,
    error,
    info,
    locale_table,
    run_summary,
    section,
    status_box,
    success,
    warning,
)

logger = logging.getLogger(__name__)

# Options shared by every subcommand, mapped to TranslateConfig fields
CONFIG_OPTIONS = (
    "api_token",
    "model_name",
    "request_timeout",
    "temperature",
    "master_locale",
    "platform",
    "context",
    "input_file",
    "max_chars",
    "content_type",
    "app_name",
    "request_delay",
)


class StoreTranslateCLI:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def _debug(self, message: str):
        """Print debug info only in verbose mode"""
        if self.verbose:
            info(f"[dim]DEBUG[/dim] {message}", badge=True)

    def _load_config(self, args: argparse.Namespace) -> TranslateConfig:
        overrides: dict[str, Any] = {name: getattr(args, name, None) for name in CONFIG_OPTIONS}
        overrides["force"] = getattr(args, "force", False) or None
        overrides["dry_run"] = getattr(args, "dry_run", False) or None
        return TranslateConfig.load(overrides=overrides, root=getattr(args, "root", None))

    def translate(self, args: argparse.Namespace) -> int:
        """Translate the master file into every stale locale.

        Returns:
            int: 0 when the run completed (even if some locales failed),
                1 on configuration or setup errors.
        """
        try:
            config = self._load_config(args)
            config.validate()
        except ConfigError as e:
            error(f"Invalid configuration: {escape(str(e))}")
            return 1

        section("TRANSLATE METADATA")
        self._debug(f"Metadata directory: {escape(str(config.platform.base_directory(config.root)))}")
        info(
            f"Translating [bold]{escape(config.input_file)}[/bold] ({config.content_type.value}) "
            f"from [bold]{escape(config.master_locale)}[/bold] for {config.platform.value}",
            badge=True,
        )
        if config.dry_run:
            warning("Dry run: no requests are sent and no files are written")

        try:
            summary = MetadataTranslator(config).run()
        except OSError as e:
            error(f"Could not write translations: {escape(str(e))}")
            return 1

        if summary is None:
            return 1

        run_summary(summary)
        return 0

    def locales(self, args: argparse.Namespace) -> int:
        """List locales in the metadata tree and whether each one is current."""
        try:
            config = self._load_config(args)
        except ConfigError as e:
            error(f"Invalid configuration: {escape(str(e))}")
            return 1

        translator = MetadataTranslator(config)
        base_directory = translator.base_directory
        if not base_directory.is_dir():
            error(f"Directory does not exist: {escape(str(base_directory))}")
            return 1

        input_file = translator.resolve_input_file()
        if input_file is None:
            return 1

        states = translator.locale_states(input_file)
        if not states:
            warning(f"No locales found in {escape(str(base_directory))}")
            return 0

        locale_table(f"Locales ({config.platform.value})", input_file, states)
        return 0

    def config(self, args: argparse.Namespace) -> int:
        """Show the effective configuration."""
        try:
            config = self._load_config(args)
        except ConfigError as e:
            error(f"Invalid configuration: {escape(str(e))}")
            return 1

        status_box("CONFIGURATION", config.as_display_dict())
        if not config.api_token:
            warning("No API token configured", "Set GPT_API_KEY or OPENAI_API_KEY")
        else:
            success("Configuration is valid")
        return 0


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--root", help="Project root containing fastlane/ (default: cwd)")
    parser.add_argument("--api-token", help="OpenAI API token (env: GPT_API_KEY)")
    parser.add_argument("--model-name", help="Model to use (env: GPT_MODEL_NAME)")
    parser.add_argument("--request-timeout", type=int, help="Request timeout in seconds")
    parser.add_argument("--temperature", type=float, help="Sampling temperature, 0 to 2")
    parser.add_argument("--master-locale", help="Locale of the source text (default: en-US)")
    parser.add_argument(
        "--platform", choices=[p.value for p in Platform], help="Metadata layout (default: ios)"
    )
    parser.add_argument("--context", help="Extra context to improve the translation")
    parser.add_argument(
        "--input-file",
        help="File to translate, e.g. release_notes.txt, or 'latest' for the newest changelog",
    )
    parser.add_argument("--max-chars", type=int, help="Maximum characters per translation")
    parser.add_argument(
        "--content-type",
        choices=[c.value for c in ContentType],
        help="Kind of text being translated (default: release_notes)",
    )
    parser.add_argument("--app-name", help="App display name, used for name and subtitle")
    parser.add_argument("--request-delay", type=int, help="Seconds to wait between requests")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storetranslate",
        description="Translate app store release notes and metadata with OpenAI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", "-V", action="version", version=f"storetranslate {VERSION}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    translate_parser = subparsers.add_parser("translate", help="Translate the master file")
    _add_config_arguments(translate_parser)
    translate_parser.add_argument(
        "--force", action="store_true", help="Translate locales that are already up to date"
    )
    translate_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be translated"
    )

    locales_parser = subparsers.add_parser("locales", help="List locales and their state")
    _add_config_arguments(locales_parser)

    config_parser = subparsers.add_parser("config", help="Show the effective configuration")
    _add_config_arguments(config_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    # .env must be loaded before the configuration reads the environment
    load_dotenv(find_dotenv(usecwd=True))

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # Suppress noisy HTTP client logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    if not args.command:
        parser.print_help()
        return 0

    cli = StoreTranslateCLI(verbose=args.verbose)

    try:
        if args.command == "translate":
            return cli.translate(args)
        elif args.command == "locales":
            return cli.locales(args)
        elif args.command == "config":
            return cli.config(args)
        parser.print_help()
        return 1
    except KeyboardInterrupt:
        console.print()
        info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
