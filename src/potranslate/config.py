import logging
import os
from dataclasses import dataclass, field
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_LOGGING = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    "datefmt": "%Y-%m-%d %H:%M:%S",
}


class ConfigError(Exception):
    pass


@dataclass
class Config:
    ai_provider: str
    ai_api_key: str
    ai_model: str
    ai_base_url: str = ""
    scan_root: str = "."
    scan_exclude: list[str] = field(default_factory=list)
    file_extensions: list[str] = field(default_factory=list)
    batch_size: int = 5
    chunk_size: int = 30
    custom_prompt: str = ""
    logging: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOGGING))


def read_config_file(config_file_path: str) -> dict[str, Any]:
    try:
        with open(config_file_path, "r") as file:
            data = yaml.safe_load(file)
    except FileNotFoundError:
        logger.warning(f"Config file {config_file_path} not found, using defaults.")
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_file_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file_path} must contain a mapping at top level")
    return data


def parse_comma_separated(value: str | list[str]) -> list[str]:
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return [item.strip() for item in value.split(",") if item.strip()]


def _lookup(env_key: str, section: dict[str, Any], key: str, default: Any) -> Any:
    value = os.environ.get(env_key)
    if value is not None and value != "":
        return value
    value = section.get(key)
    if value is not None and value != "":
        return value
    return default


def _positive_int(name: str, raw: Any) -> int:
    try:
        parsed = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a positive integer, got: {raw}") from None
    if parsed <= 0:
        raise ConfigError(f"{name} must be a positive integer, got: {raw}")
    return parsed


def _required(name: str, value: Any) -> str:
    if value is None or str(value) == "":
        raise ConfigError(f"Missing required setting: {name}")
    return str(value)


def load_config(
    config_file_path: str,
    env_file: str | None = None,
    scan_root: str | None = None,
    require_credentials: bool = True,
) -> Config:
    load_dotenv(env_file or find_dotenv(usecwd=True))
    data = read_config_file(config_file_path)

    ai = data.get("ai") or {}
    scan = data.get("scan") or {}
    translation = data.get("translation") or {}

    root = scan_root or _lookup("SCAN_ROOT", scan, "root", os.getcwd())
    root = os.path.abspath(str(root))

    api_key = os.environ.get("AI_API_KEY") or ai.get("api_key") or ""
    model = _lookup("AI_MODEL", ai, "model", "")
    if require_credentials:
        api_key = _required("AI_API_KEY", api_key)
        model = _required("AI_MODEL", model)

    return Config(
        ai_provider=str(_lookup("AI_PROVIDER", ai, "provider", "openai-compat")),
        ai_api_key=str(api_key),
        ai_model=str(model),
        ai_base_url=str(_lookup("AI_BASE_URL", ai, "base_url", "")),
        scan_root=root,
        scan_exclude=parse_comma_separated(
            _lookup("SCAN_EXCLUDE", scan, "exclude", "node_modules,.git,dist")
        ),
        file_extensions=parse_comma_separated(
            _lookup("FILE_EXTENSIONS", scan, "extensions", ".po")
        ),
        batch_size=_positive_int(
            "BATCH_SIZE", _lookup("BATCH_SIZE", translation, "batch_size", 5)
        ),
        chunk_size=_positive_int(
            "CHUNK_SIZE", _lookup("CHUNK_SIZE", translation, "chunk_size", 30)
        ),
        custom_prompt=str(_lookup("CUSTOM_PROMPT", ai, "custom_prompt", "")),
        logging={**DEFAULT_LOGGING, **(data.get("logging") or {})},
    )
