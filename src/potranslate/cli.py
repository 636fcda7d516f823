import logging
import os
import sys

import click

from potranslate import app
from potranslate.config import Config, ConfigError, load_config

logger = logging.getLogger(__name__)


def _setup(
    config_folder: str,
    env_file: str | None,
    scan_root: str | None,
    require_credentials: bool = True,
) -> Config:
    config_file_path = os.path.abspath(f"{config_folder}/config.yml")
    try:
        config = load_config(
            config_file_path,
            env_file=env_file,
            scan_root=scan_root,
            require_credentials=require_credentials,
        )
    except ConfigError as exc:
        logging.basicConfig()
        logger.error(f"Configuration error: {exc}")
        sys.exit(1)

    logging.basicConfig(
        level=logging.getLevelName(config.logging["level"]),
        format=config.logging["format"],
        datefmt=config.logging["datefmt"],
    )
    return config


config_folder_option = click.option(
    "--config-folder", default="config", help="Configuration folder path."
)
scan_root_option = click.option(
    "--scan-root", default=None, help="Directory to search for catalogs."
)
env_file_option = click.option(
    "--env-file", default=None, help="Path to a .env file with AI_* settings."
)


@click.group()
@click.version_option(package_name="po-translate")
def cli() -> None:
    pass


@cli.command("translate")
@config_folder_option
@scan_root_option
@env_file_option
def translate(config_folder: str, scan_root: str | None, env_file: str | None) -> None:
    config = _setup(config_folder, env_file, scan_root)
    try:
        results = app.run(config=config)
    except ConfigError as exc:
        logger.error(f"Configuration error: {exc}")
        sys.exit(1)

    if any(result.error is not None for result in results):
        sys.exit(1)


@cli.command("scan")
@config_folder_option
@scan_root_option
@env_file_option
def scan(config_folder: str, scan_root: str | None, env_file: str | None) -> None:
    # Listing files never talks to the model, so no API key is needed
    config = _setup(config_folder, env_file, scan_root, require_credentials=False)
    app.scan_phase(config)
