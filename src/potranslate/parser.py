import asyncio
import dataclasses
import enum
import logging
import re

from potranslate.classes import PoComments, PoEntry, PoFile

logger = logging.getLogger(__name__)

# Checked in this order; "# " needs the space, so "#." never lands in translator
COMMENT_PATTERNS = (
    ("translator", re.compile(r"# (.*)")),
    ("extracted", re.compile(r"#\. (.*)")),
    ("references", re.compile(r"#: (.*)")),
    ("flags", re.compile(r"#, (.*)")),
)
MSGID_RE = re.compile(r'msgid "(.*)"')
MSGSTR_RE = re.compile(r'msgstr "(.*)"')
CONTINUATION_RE = re.compile(r'"(.*)"')
PLACEHOLDER_RE = re.compile(r"\{[^}]+\}")
ESCAPE_RE = re.compile(r"\\(.)")
# Only \n and \r\n end a line; other Unicode separators are string content
LINE_SPLIT_RE = re.compile(r"\r?\n")

UNESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}


class State(enum.Enum):
    IDLE = "idle"
    MSGID = "msgid"
    MSGSTR = "msgstr"


@dataclasses.dataclass
class _Accumulator:
    comments: PoComments = dataclasses.field(default_factory=PoComments)
    msgid: str = ""
    msgstr: str = ""
    state: State = State.IDLE
    open: bool = False


def unescape_po(value: str) -> str:
    return ESCAPE_RE.sub(lambda m: UNESCAPES.get(m.group(1), m.group(0)), value)


def escape_po(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


def is_placeholder_only(msgid: str) -> bool:
    """True when msgid has no text left once "{...}" tokens are removed."""
    if msgid == "":
        return True
    return PLACEHOLDER_RE.sub("", msgid).strip() == ""


def parse_po(content: str) -> list[PoEntry]:
    entries: list[PoEntry] = []
    acc = _Accumulator()

    def flush() -> None:
        nonlocal acc
        if not acc.open:
            return
        entries.append(
            PoEntry(
                comments=acc.comments,
                msgid=unescape_po(acc.msgid),
                msgstr=unescape_po(acc.msgstr),
                is_header=acc.msgid == "",
            )
        )
        acc = _Accumulator()

    for line in LINE_SPLIT_RE.split(content):
        if line.strip() == "":
            if acc.open:
                flush()
            continue

        comment = _match_comment(line)
        if comment is not None:
            if acc.open:
                flush()
            kind, text = comment
            getattr(acc.comments, kind).append(text)
            continue

        match = MSGID_RE.fullmatch(line)
        if match:
            if acc.open and acc.state is State.MSGSTR:
                flush()
            acc.open = True
            acc.state = State.MSGID
            acc.msgid = match.group(1)
            continue

        match = MSGSTR_RE.fullmatch(line)
        if match:
            acc.state = State.MSGSTR
            acc.msgstr = match.group(1)
            continue

        match = CONTINUATION_RE.fullmatch(line)
        if match:
            if acc.state is State.MSGID:
                acc.msgid += match.group(1)
            elif acc.state is State.MSGSTR:
                acc.msgstr += match.group(1)
            continue

        # msgctxt, plurals, obsolete entries and anything else unknown
        logger.debug(f"Ignoring unrecognized line: {line!r}")

    flush()
    return entries


def _match_comment(line: str) -> tuple[str, str] | None:
    for kind, pattern in COMMENT_PATTERNS:
        match = pattern.fullmatch(line)
        if match:
            return kind, match.group(1)
    return None


def serialize_po(entries: list[PoEntry]) -> str:
    parts = []
    for entry in entries:
        lines = [f"# {c}" for c in entry.comments.translator]
        lines += [f"#. {c}" for c in entry.comments.extracted]
        lines += [f"#: {c}" for c in entry.comments.references]
        lines += [f"#, {c}" for c in entry.comments.flags]
        lines.append(f'msgid "{escape_po(entry.msgid)}"')
        lines.append(f'msgstr "{escape_po(entry.msgstr)}"')
        parts.append("\n".join(lines))
    return "\n\n".join(parts) + "\n"


def get_untranslated_entries(po_file: PoFile) -> list[PoEntry]:
    return [
        entry
        for entry in po_file.entries
        if not entry.is_header
        and entry.msgstr == ""
        and not is_placeholder_only(entry.msgid)
    ]


def apply_translations(
    entries: list[PoEntry], translations: dict[str, str]
) -> list[PoEntry]:
    updated = []
    for entry in entries:
        translated = translations.get(entry.msgid)
        if translated is not None and translated.strip() != "":
            entry = dataclasses.replace(entry, msgstr=translated)
        updated.append(entry)
    return updated


def _read_text(file_path: str) -> str:
    # newline="" keeps a stray "\r" inside a string from becoming a line break
    with open(file_path, "r", encoding="utf-8", newline="") as file:
        return file.read()


def _write_text(file_path: str, content: str) -> None:
    with open(file_path, "w", encoding="utf-8", newline="") as file:
        file.write(content)


async def read_catalog(file_path: str, lang_code: str, lang_name: str) -> PoFile:
    logger.debug(f"Parsing {file_path}")
    content = await asyncio.to_thread(_read_text, file_path)
    return PoFile(file_path, lang_code, lang_name, parse_po(content))


async def write_catalog(po_file: PoFile, translations: dict[str, str]) -> None:
    serialized = serialize_po(apply_translations(po_file.entries, translations))
    await asyncio.to_thread(_write_text, po_file.file_path, serialized)
