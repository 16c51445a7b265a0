#!/usr/bin/env python3
"""
deepl - Command line front end for the DeepL Pro REST API
==========================================================

Usage:
    deepl usage-information
    deepl languages
    deepl translate -t EN-US < input.txt
    deepl translate -s DE -t EN-US --input-file in.txt --output-file out.txt

The API key is read from the DEEPL_API_KEY environment variable.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from deepl_api import (
    DeepL, DeepLError, Formality, LanguageList, SplitSentences,
    TranslatableTextList, TranslationOptions, user_message,
)
from infra.config import ClientConfig, ConfigError, load_client_config
from infra.logging import configure_logging, get_logger


# Setup rich console
console = Console()
error_console = Console(stderr=True)

SPLIT_SENTENCES_CHOICES = {
    "none": SplitSentences.NONE,
    "punctuation": SplitSentences.PUNCTUATION,
    "punctuation-and-newlines": SplitSentences.PUNCTUATION_AND_NEWLINES,
}


def create_client(config: ClientConfig) -> DeepL:
    """Create the API client for this invocation."""
    return DeepL.from_config(config)


def print_usage_information(character_count: int, character_limit: int) -> None:
    """Print the characters used in this billing period."""
    console.print(
        f"Available characters per billing period: [bold]{character_limit}[/bold]"
    )
    console.print(
        f"Characters already translated in the current billing period: [bold]{character_count}[/bold]"
    )


def print_languages(title: str, languages: LanguageList) -> None:
    """Print a language list as a table."""
    table = Table(title=title)
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    for language in languages:
        table.add_row(language.language, language.name)
    console.print(table)


def read_input(input_file: Optional[str]) -> str:
    """Read the text to translate from a file or stdin."""
    if input_file:
        return Path(input_file).read_text(encoding="utf-8")
    return sys.stdin.read()


def write_output(text: str, output_file: Optional[str]) -> None:
    """Write the translation to a file or stdout."""
    if output_file:
        Path(output_file).write_text(text, encoding="utf-8")
        return
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def build_options(args: argparse.Namespace) -> Optional[TranslationOptions]:
    """Translate command line flags to options; None when no flag was given."""
    split_sentences = (
        SPLIT_SENTENCES_CHOICES[args.split_sentences] if args.split_sentences else None
    )
    preserve_formatting = True if args.preserve_formatting else None
    formality = Formality(args.formality) if args.formality else None

    if split_sentences is None and preserve_formatting is None and formality is None:
        return None

    return TranslationOptions(
        split_sentences=split_sentences,
        preserve_formatting=preserve_formatting,
        formality=formality,
    )


async def run_usage_information(deepl: DeepL, args: argparse.Namespace) -> int:
    usage = await deepl.usage_information()
    print_usage_information(usage.character_count, usage.character_limit)
    return 0


async def run_languages(deepl: DeepL, args: argparse.Namespace) -> int:
    source = await deepl.source_languages()
    target = await deepl.target_languages()
    print_languages("DeepL source languages", source)
    print_languages("DeepL target languages", target)
    return 0


async def run_translate(deepl: DeepL, args: argparse.Namespace) -> int:
    text = read_input(args.input_file)
    if not text.strip():
        error_console.print("[bold red]Error:[/bold red] No input text to translate.")
        return 1

    text_list = TranslatableTextList(
        target_language=args.target_language,
        texts=[text],
        source_language=args.source_language,
    )
    translations = await deepl.translate(text_list, build_options(args))

    write_output("".join(t.text for t in translations), args.output_file)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per API operation."""
    parser = argparse.ArgumentParser(
        prog="deepl",
        description="Command line client for the DeepL Pro REST API",
    )
    parser.add_argument(
        "--config", "-c",
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level", "-l",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write JSON logs to this file"
    )
    tier = parser.add_mutually_exclusive_group()
    tier.add_argument(
        "--free-tier",
        dest="free_tier",
        action="store_const",
        const=True,
        default=None,
        help="Use the free API host (api-free.deepl.com)"
    )
    tier.add_argument(
        "--pro-tier",
        dest="free_tier",
        action="store_const",
        const=False,
        help="Use the paid API host (api.deepl.com)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    usage = subparsers.add_parser(
        "usage-information",
        help="Show characters used and available in this billing period"
    )
    usage.set_defaults(handler=run_usage_information)

    languages = subparsers.add_parser(
        "languages",
        help="List the available source and target languages"
    )
    languages.set_defaults(handler=run_languages)

    translate = subparsers.add_parser(
        "translate",
        help="Translate text from a file or stdin"
    )
    translate.add_argument(
        "--target-language", "-t",
        required=True,
        help="Target language code, e.g. EN-US"
    )
    translate.add_argument(
        "--source-language", "-s",
        default=None,
        help="Source language code (auto-detected if omitted)"
    )
    translate.add_argument(
        "--input-file", "-i",
        default=None,
        help="Read the text from this file instead of stdin"
    )
    translate.add_argument(
        "--output-file", "-o",
        default=None,
        help="Write the translation to this file instead of stdout"
    )
    translate.add_argument(
        "--preserve-formatting",
        action="store_true",
        help="Respect the original formatting"
    )
    translate.add_argument(
        "--formality",
        choices=[f.value for f in Formality],
        default=None,
        help="Lean towards formal or informal language"
    )
    translate.add_argument(
        "--split-sentences",
        choices=list(SPLIT_SENTENCES_CHOICES),
        default=None,
        help="How to split the input into sentences"
    )
    translate.set_defaults(handler=run_translate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger("main")

    try:
        configure_logging(getattr(logging, args.log_level), log_file=args.log_file)

        config = load_client_config(args.config)
        if args.free_tier is not None:
            config.free_tier = args.free_tier

        deepl = create_client(config)
        logger.debug(f"Using {deepl.base_url}")

        return asyncio.run(args.handler(deepl, args))

    except ConfigError as e:
        error_console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        return 1
    except DeepLError as e:
        error_console.print(f"[bold red]Error:[/bold red] {escape(user_message(e))}")
        return 1
    except OSError as e:
        error_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
