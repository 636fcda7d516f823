import asyncio
import logging

import click

from potranslate.classes import (
    LanguageProgress,
    PoFile,
    ScannedFile,
    TranslationResult,
)
from potranslate.concurrency import run_bounded
from potranslate.config import Config
from potranslate.languages import get_language_name
from potranslate.parser import get_untranslated_entries, read_catalog
from potranslate.providers import Provider, resolve_provider
from potranslate.scanner import scan_directory
from potranslate.translator import translate_catalog

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    "pending": "white",
    "translating": "yellow",
    "done": "green",
    "error": "red",
}


def scan_phase(config: Config) -> tuple[list[ScannedFile], list[str]]:
    logger.info(f"Scanning {config.scan_root}...")
    found = scan_directory(config.scan_root, config.file_extensions, config.scan_exclude)

    valid_files: list[ScannedFile] = []
    skipped: list[str] = []
    for file in found:
        if get_language_name(file.folder_name) is None:
            # Source language or unknown code
            skipped.append(file.file_path)
        else:
            valid_files.append(file)

    click.echo(f"Found {len(valid_files)} catalog(s) to translate in {config.scan_root}")
    for file in valid_files:
        click.echo(f"  {get_language_name(file.folder_name)} ({file.folder_name}): {file.file_path}")
    if skipped:
        click.echo(f"Skipped {len(skipped)} file(s):")
        for file_path in skipped:
            click.echo(f"  {file_path}")
    return valid_files, skipped


def print_progress(progress: LanguageProgress) -> None:
    status = click.style(progress.status, fg=STATUS_COLORS[progress.status])
    line = (
        f"  {progress.lang_name} ({progress.lang_code}): {status} "
        f"{progress.done}/{progress.total} translated, {progress.failed} failed"
    )
    if progress.error_message:
        line += f" - {progress.error_message}"
    click.echo(line)


async def _load_catalogs(
    files: list[ScannedFile],
) -> tuple[list[PoFile], list[TranslationResult]]:
    async def load(file: ScannedFile) -> PoFile | TranslationResult:
        lang_name = get_language_name(file.folder_name) or file.folder_name
        try:
            return await read_catalog(file.file_path, file.folder_name, lang_name)
        except (OSError, UnicodeDecodeError) as ex:
            logger.error(f"Error reading {file.file_path}: {ex}")
            return TranslationResult(
                file.folder_name, lang_name, error=f"Failed to read file: {ex}"
            )

    loaded = await asyncio.gather(*(load(file) for file in files))
    po_files = [item for item in loaded if isinstance(item, PoFile)]
    failures = [item for item in loaded if isinstance(item, TranslationResult)]
    return po_files, failures


async def translate_phase(
    config: Config, provider: Provider, files: list[ScannedFile]
) -> list[TranslationResult]:
    po_files, results = await _load_catalogs(files)

    progress = {
        po_file.file_path: LanguageProgress(
            po_file.lang_code,
            po_file.lang_name,
            total=len(get_untranslated_entries(po_file)),
        )
        for po_file in po_files
    }
    for item in progress.values():
        print_progress(item)

    async def translate_one(po_file: PoFile) -> None:
        lang_progress = progress[po_file.file_path]
        lang_progress.status = "translating"
        print_progress(lang_progress)

        def on_progress(translated: int, failed: int) -> None:
            lang_progress.done = translated
            lang_progress.failed = failed
            print_progress(lang_progress)

        result = await translate_catalog(
            po_file,
            provider,
            config.chunk_size,
            config.batch_size,
            on_progress,
            config.custom_prompt,
        )
        results.append(result)

        lang_progress.done = result.translated
        lang_progress.failed = result.failed
        lang_progress.status = "error" if result.error is not None else "done"
        lang_progress.error_message = result.error
        print_progress(lang_progress)

    await run_bounded(po_files, config.batch_size, translate_one)
    return results


def summary_phase(results: list[TranslationResult]) -> None:
    click.echo("Summary:")
    for result in sorted(results, key=lambda r: r.lang_code):
        line = (
            f"  {result.lang_name} ({result.lang_code}): "
            f"{result.translated} translated, {result.failed} failed"
        )
        if result.error is not None:
            click.echo(click.style(f"{line} - {result.error}", fg="red"))
        else:
            click.echo(line)

    translated = sum(r.translated for r in results)
    failed = sum(r.failed for r in results)
    errors = sum(1 for r in results if r.error is not None)
    click.echo(
        f"Total: {translated} translated, {failed} failed, "
        f"{errors} of {len(results)} language(s) with errors"
    )


def run(*, config: Config, provider: Provider | None = None) -> list[TranslationResult]:
    # Resolving first surfaces provider errors before any catalog is touched
    if provider is None:
        provider = resolve_provider(config)

    files, _ = scan_phase(config)
    if not files:
        logger.info("No catalogs to translate.")
        return []

    results = asyncio.run(translate_phase(config, provider, files))
    summary_phase(results)
    return results
