from dataclasses import dataclass, field


@dataclass
class PoComments:
    translator: list[str] = field(default_factory=list)
    extracted: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)


@dataclass
class PoEntry:
    comments: PoComments
    msgid: str
    msgstr: str
    is_header: bool = False


@dataclass
class PoFile:
    file_path: str
    lang_code: str
    lang_name: str
    entries: list[PoEntry]


@dataclass
class ScannedFile:
    file_path: str
    # Language folder: the parent directory, or the grandparent for LC_MESSAGES
    folder_name: str


@dataclass
class TranslationResult:
    lang_code: str
    lang_name: str
    translated: int = 0
    failed: int = 0
    error: str | None = None


@dataclass
class LanguageProgress:
    lang_code: str
    lang_name: str
    total: int
    done: int = 0
    failed: int = 0
    status: str = "pending"
    error_message: str | None = None
