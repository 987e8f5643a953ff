import logging
import os

import click
from rich.logging import RichHandler

from .constants import (
    CACTI_REPO_URL,
    DEFAULT_CACTI_DIR,
    DEFAULT_DB_HOST,
    DEFAULT_DB_NAME,
    DEFAULT_DB_USER,
    DEFAULT_LOG_FILE,
    DEFAULT_WEB_GROUP,
    DEFAULT_WEB_ROOT,
    DEFAULT_WEB_USER,
    SPINE_REPO_URL,
)
from .core import CactiInstaller, InstallerError, console
from .services.config_loader import ConfigLoader
from .services.prompts import ConsolePrompter, ScriptedPrompter


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .cactiinstaller.yml if present.",
)
@click.option("--db-name", required=False, help=f"Cacti database name (default: {DEFAULT_DB_NAME})")
@click.option("--db-user", required=False, help=f"Cacti database user (default: {DEFAULT_DB_USER})")
@click.option("--db-host", required=False, help=f"Database host (default: {DEFAULT_DB_HOST})")
@click.option("--web-root", required=False, help=f"Web server root (default: {DEFAULT_WEB_ROOT})")
@click.option("--cacti-dir", required=False, help=f"Cacti install directory (default: {DEFAULT_CACTI_DIR})")
@click.option("--web-user", required=False, help=f"Web server user (default: {DEFAULT_WEB_USER})")
@click.option("--web-group", required=False, help=f"Web server group (default: {DEFAULT_WEB_GROUP})")
@click.option("--cacti-repo", required=False, help="Git URL of the Cacti repository.")
@click.option("--spine-repo", required=False, help="Git URL of the Spine repository.")
@click.option("--log-file", type=click.Path(), help=f"Install log file (default: {DEFAULT_LOG_FILE})")
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option(
    "--schema",
    required=False,
    help="Pre-answer the schema prompt: 'default', a listed number, a path or 'exit'.",
)
@click.option(
    "--recreate-db/--keep-db",
    "recreate_database",
    default=None,
    help="Pre-answer whether an existing Cacti database is dropped and recreated.",
)
@click.option(
    "--poller",
    required=False,
    help="Pre-answer the poller prompt: 1 for cron, 2 for Cactid and Spine.",
)
@click.option(
    "--allow-insecure-http",
    is_flag=True,
    default=None,
    help="Allow HTTP repository URLs (insecure). By default only HTTPS URLs are accepted.",
)
@click.option(
    "--skip-repository-check",
    is_flag=True,
    default=None,
    help="Do not probe repository URLs for reachability before cloning.",
)
@click.option(
    "--command-timeout",
    required=False,
    type=float,
    default=None,
    help="Timeout in seconds for each external command (default: no timeout).",
)
def main(
    config,
    db_name,
    db_user,
    db_host,
    web_root,
    cacti_dir,
    web_user,
    web_group,
    cacti_repo,
    spine_repo,
    log_file,
    verbose,
    schema,
    recreate_database,
    poller,
    allow_insecure_http,
    skip_repository_check,
    command_timeout,
):
    """Install and configure Cacti with Apache, MariaDB and PHP."""
    logger = logging.getLogger("cactiinstaller")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".cactiinstaller.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except InstallerError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    command_timeout = _resolve_option(command_timeout, config_values, "command_timeout")
    answers = {
        "schema": _resolve_option(schema, config_values, "schema"),
        "recreate_database": _resolve_option(recreate_database, config_values, "recreate_database"),
        "poller": _resolve_option(poller, config_values, "poller"),
    }

    try:
        installer = CactiInstaller(
            db_name=_resolve_option(db_name, config_values, "db_name", default=DEFAULT_DB_NAME),
            db_user=_resolve_option(db_user, config_values, "db_user", default=DEFAULT_DB_USER),
            db_host=_resolve_option(db_host, config_values, "db_host", default=DEFAULT_DB_HOST),
            web_root=_resolve_option(web_root, config_values, "web_root", default=DEFAULT_WEB_ROOT),
            cacti_dir=_resolve_option(cacti_dir, config_values, "cacti_dir", default=DEFAULT_CACTI_DIR),
            web_user=_resolve_option(web_user, config_values, "web_user", default=DEFAULT_WEB_USER),
            web_group=_resolve_option(web_group, config_values, "web_group", default=DEFAULT_WEB_GROUP),
            cacti_repo=_resolve_option(cacti_repo, config_values, "cacti_repo", default=CACTI_REPO_URL),
            spine_repo=_resolve_option(spine_repo, config_values, "spine_repo", default=SPINE_REPO_URL),
            log_file=_resolve_option(log_file, config_values, "log_file", default=DEFAULT_LOG_FILE),
            php_settings=config_values.get("php_settings"),
            prompter=ScriptedPrompter(answers, fallback=ConsolePrompter(console)),
            allow_insecure_http=bool(
                _resolve_option(allow_insecure_http, config_values, "allow_insecure_http", default=False)
            ),
            skip_repository_check=bool(
                _resolve_option(skip_repository_check, config_values, "skip_repository_check", default=False)
            ),
            command_timeout=float(command_timeout) if command_timeout is not None else None,
            verbose=verbose,
        )
    except InstallerError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(installer.run())


if __name__ == "__main__":
    main()
