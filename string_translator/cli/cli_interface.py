#!/usr/bin/env python3
"""
String Translator - Command Line Interface
"""
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from string_translator import __version__
from string_translator.core.exceptions import TranslationSystemError
from string_translator.core.factory import get_translator_factory
from string_translator.core.interfaces import TranslatorDelegate
from string_translator.core.models import CapitalizationStyle, TranslationSet
from string_translator.core.translator import Translator
from string_translator.parsers.strings_parser import StringsFileSource
from string_translator.utils.config_manager import AppConfig, ConfigManager
from string_translator.utils.logger import setup_logging


console = Console()

CAPITALIZATION_CHOICES = [style.value for style in CapitalizationStyle]


class ConsoleDelegate(TranslatorDelegate):
    """Delegate that prints translator events with Rich."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def on_log_event(self, translator: Translator, message: str) -> None:
        if self.verbose:
            console.print(f"[dim]{message}[/dim]")

    def on_translation_error(self, translator: Translator, error: TranslationSystemError) -> None:
        console.print(f"[red]Error: {error}[/red]")


def _load_config(ctx: click.Context) -> AppConfig:
    return ctx.obj['config_manager'].config


def _build_translator(
    config: AppConfig,
    strings_file: Optional[Path],
    delegate: TranslatorDelegate
) -> Translator:
    if strings_file is None and not config.strings_file:
        console.print("[red]Error: no strings file given and none configured[/red]")
        sys.exit(1)

    input_source = StringsFileSource(strings_file) if strings_file else None
    try:
        return get_translator_factory().create_translator(
            config, input_source=input_source, delegate=delegate
        )
    except TranslationSystemError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def _apply_overrides(config: AppConfig, source, target, api_key) -> None:
    if source:
        config.source_language = source
    if target:
        config.target_language = target
    if api_key:
        config.engine.api_key = api_key


def _print_translation_set(translation_set: TranslationSet, capitalization: CapitalizationStyle) -> None:
    table = Table(title=f"Translations ({translation_set.language}, ID {translation_set.id})")
    table.add_column("Key", style="cyan")
    table.add_column("Translation", style="green")

    for key in sorted(translation_set.translations):
        table.add_row(key, capitalization.apply(translation_set.translations[key]))

    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option('--config', 'config_path', type=click.Path(path_type=Path), default=Path("config.yaml"),
              show_default=True, help='Configuration file (YAML or JSON)')
@click.option('--verbose', '-v', is_flag=True, help='Show cache decisions')
@click.pass_context
def cli(ctx, config_path, verbose):
    """String Translator - Translate keyed UI strings with caching."""
    try:
        config_manager = ConfigManager(config_path, create_if_missing=False)
    except TranslationSystemError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    log_config = config_manager.config.logging
    setup_logging(
        log_dir=Path(log_config.log_dir),
        log_level=log_config.log_level,
        console_level="DEBUG" if verbose else log_config.console_level,
        use_colors=log_config.use_colors,
        max_bytes=log_config.max_bytes,
        backup_count=log_config.backup_count
    )

    ctx.obj = {'config_manager': config_manager, 'verbose': verbose}


@cli.command()
@click.argument('strings_file', required=False, type=click.Path(path_type=Path))
@click.option('--source', '-s', help='Source language code (e.g., en)')
@click.option('--target', '-t', help='Target language code (e.g., it)')
@click.option('--translation-id', '-i', type=int, default=None,
              help='Minimum ID a cached translation set must have')
@click.option('--api-key', envvar='RAPIDAPI_KEY', help='RapidAPI key (or set RAPIDAPI_KEY env var)')
@click.option('--capitalization', '-c', type=click.Choice(CAPITALIZATION_CHOICES), default='none',
              show_default=True, help='Capitalization applied to displayed translations')
@click.pass_context
def translate(ctx, strings_file, source, target, translation_id, api_key, capitalization):
    """
    Translate a strings file and show the result.

    Examples:

        # Translate English strings to Italian
        string-translator translate Localizable.strings -s en -t it

        # Force a new translation after editing the strings file
        string-translator translate Localizable.strings -t it --translation-id 2
    """
    config = _load_config(ctx)
    _apply_overrides(config, source, target, api_key)

    delegate = ConsoleDelegate(verbose=ctx.obj['verbose'])
    translator = _build_translator(config, strings_file, delegate)

    console.print(f"\n[cyan]Translating: {config.source_language.upper()} → {config.target_language.upper()}[/cyan]")

    try:
        with translator:
            translation_set = translator.update_translations(translation_id)
    except TranslationSystemError:
        sys.exit(1)
    finally:
        translator.service.close()
        translator.cache.close()

    _print_translation_set(translation_set, CapitalizationStyle(capitalization))


@cli.command()
@click.argument('strings_file', type=click.Path(path_type=Path))
@click.argument('key')
@click.option('--source', '-s', help='Source language code')
@click.option('--target', '-t', help='Target language code')
@click.option('--api-key', envvar='RAPIDAPI_KEY', help='RapidAPI key')
@click.option('--capitalization', '-c', type=click.Choice(CAPITALIZATION_CHOICES), default='first',
              show_default=True, help='Capitalization style')
@click.pass_context
def lookup(ctx, strings_file, key, source, target, api_key, capitalization):
    """
    Print the translation of a single key.

    Unknown keys are printed as-is.

    Example:
        string-translator lookup Localizable.strings apple -t it -c all
    """
    config = _load_config(ctx)
    _apply_overrides(config, source, target, api_key)

    delegate = ConsoleDelegate(verbose=ctx.obj['verbose'])
    translator = _build_translator(config, strings_file, delegate)

    try:
        translator.update_translations()
    except TranslationSystemError:
        sys.exit(1)
    finally:
        translator.service.close()
        translator.cache.close()

    click.echo(translator.lookup(key, CapitalizationStyle(capitalization)))


@cli.group()
def cache():
    """Inspect or clear cached translation sets."""
    pass


@cache.command('show')
@click.argument('language')
@click.pass_context
def cache_show(ctx, language):
    """
    Show the cached translation set for LANGUAGE.

    Example:
        string-translator cache show it
    """
    config = _load_config(ctx)
    try:
        store = get_translator_factory().create_cache(config.cache)
    except TranslationSystemError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    try:
        translation_set = store.get(language)
    finally:
        store.close()

    if translation_set is None:
        console.print(f"[yellow]No cached translation set for '{language}'[/yellow]")
        sys.exit(1)

    _print_translation_set(translation_set, CapitalizationStyle.NONE)


@cache.command('clear')
@click.confirmation_option(prompt='Delete all cached translation sets?')
@click.pass_context
def cache_clear(ctx):
    """Delete every cached translation set."""
    config = _load_config(ctx)
    try:
        store = get_translator_factory().create_cache(config.cache)
        try:
            count = store.clear()
        finally:
            store.close()
    except TranslationSystemError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ Cleared {count} cached translation sets[/green]")


@cli.command('init-config')
@click.argument('output', type=click.Path(path_type=Path), default=Path("config.yaml"))
@click.option('--force', is_flag=True, help='Overwrite an existing file')
@click.pass_context
def init_config(ctx, output, force):
    """
    Write a commented configuration template.

    Example:
        string-translator init-config config.yaml
    """
    if output.exists() and not force:
        console.print(f"[red]Error: {output} already exists (use --force to overwrite)[/red]")
        sys.exit(1)

    ctx.obj['config_manager'].export_template(output)
    console.print(f"[green]✓ Configuration template written to {output}[/green]")


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
