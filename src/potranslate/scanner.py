import logging
import os

from potranslate.classes import ScannedFile

logger = logging.getLogger(__name__)


def scan_directory(
    root_dir: str, extensions: list[str], exclude_folders: list[str]
) -> list[ScannedFile]:
    excluded = set(exclude_folders)
    results: list[ScannedFile] = []

    def on_error(error: OSError) -> None:
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    for current_dir, dirnames, filenames in os.walk(root_dir, onerror=on_error):
        # Prune in place so os.walk never descends into excluded folders
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            if filename in excluded:
                continue
            if os.path.splitext(filename)[1] in extensions:
                file_path = os.path.join(current_dir, filename)
                results.append(ScannedFile(file_path, _language_folder(current_dir)))

    logger.debug(f"Found {len(results)} files under {root_dir}")
    return results


def _language_folder(directory: str) -> str:
    # gettext trees keep catalogs in <lang>/LC_MESSAGES/
    name = os.path.basename(directory)
    if name == "LC_MESSAGES":
        return os.path.basename(os.path.dirname(directory))
    return name
