import logging
from typing import Callable

from pydantic import BaseModel, Field

from potranslate.classes import PoEntry, PoFile, TranslationResult
from potranslate.concurrency import chunk, run_bounded
from potranslate.parser import get_untranslated_entries, write_catalog
from potranslate.providers import Provider

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class TranslationItem(BaseModel):
    index: int = Field(ge=0)
    msgstr: str


class TranslationResponse(BaseModel):
    translations: list[TranslationItem]


def build_system_prompt(lang_name: str, custom_prompt: str = "") -> str:
    lines = [
        "You are a professional translator specializing in software UI localization.",
        f"Translate the provided English strings into {lang_name}.",
        "",
        "Rules:",
        "- Preserve ALL placeholders exactly as they appear (e.g., {0}, {1}, {name}).",
        "- Match the tone and brevity of the original (UI labels should stay concise).",
        "- Return translations in the exact same order as the input.",
        "- Respond only with the JSON object containing the translations array.",
    ]
    if custom_prompt.strip():
        lines += ["", custom_prompt.strip()]
    return "\n".join(lines)


def build_user_prompt(entries: list[PoEntry], start_index: int, lang_name: str) -> str:
    escaped = [entry.msgid.replace('"', '\\"') for entry in entries]
    return "\n".join(
        [
            f"Translate the following {len(entries)} strings from English to {lang_name}:",
            "",
            *(f'{start_index + i}. "{msgid}"' for i, msgid in enumerate(escaped)),
            "",
            'Return a JSON object with a "translations" array where each element has:',
            '- "index": the number from the list above (0-based)',
            '- "msgstr": the translated string',
        ]
    )


async def translate_chunk(
    entries: list[PoEntry],
    start_index: int,
    lang_name: str,
    provider: Provider,
    custom_prompt: str = "",
) -> list[TranslationItem]:
    model = provider.get_model()
    response = await model.generate_object(
        system=build_system_prompt(lang_name, custom_prompt),
        prompt=build_user_prompt(entries, start_index, lang_name),
        schema=TranslationResponse,
    )
    return response.translations


async def translate_catalog(
    po_file: PoFile,
    provider: Provider,
    chunk_size: int,
    concurrency: int,
    on_progress: ProgressCallback,
    custom_prompt: str = "",
) -> TranslationResult:
    result = TranslationResult(po_file.lang_code, po_file.lang_name)
    untranslated = get_untranslated_entries(po_file)
    if not untranslated:
        logger.info(f"Nothing to translate for {po_file.lang_name} ({po_file.lang_code})")
        return result

    chunks = chunk(untranslated, chunk_size)
    translations: dict[str, str] = {}

    async def process(job: tuple[int, list[PoEntry]]) -> None:
        chunk_idx, entries = job
        start_index = chunk_idx * chunk_size
        logger.debug(
            f"{po_file.lang_code}: chunk {chunk_idx + 1}/{len(chunks)} "
            f"({len(entries)} strings)"
        )
        try:
            items = await translate_chunk(
                entries, start_index, po_file.lang_name, provider, custom_prompt
            )
        except Exception as ex:
            logger.warning(
                f"{po_file.lang_code}: chunk {chunk_idx + 1} failed, "
                f"{len(entries)} strings not translated: {ex}"
            )
            result.failed += len(entries)
        else:
            answered: set[int] = set()
            for item in items:
                local_index = item.index - start_index
                if 0 <= local_index < len(entries):
                    answered.add(local_index)
                if 0 <= local_index < len(entries) and item.msgstr.strip() != "":
                    translations[entries[local_index].msgid] = item.msgstr
                    result.translated += 1
                else:
                    logger.debug(f"{po_file.lang_code}: unusable result {item!r}")
                    result.failed += 1
            # Entries the model never mentioned
            result.failed += len(entries) - len(answered)
        on_progress(result.translated, result.failed)

    await run_bounded(list(enumerate(chunks)), concurrency, process)

    try:
        await write_catalog(po_file, translations)
    except OSError as ex:
        logger.error(f"Failed to write {po_file.file_path}: {ex}")
        result.error = f"Failed to write file: {ex}"

    return result
