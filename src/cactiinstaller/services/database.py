"""MariaDB tuning, database creation, schema import and grants."""

from typing import Callable

from cactiinstaller.constants import ZONEINFO_DIR
from cactiinstaller.models import InstallContext

TUNING_TEMPLATE = """[mysqld]
collation_server = utf8mb4_unicode_ci
character_set_server = utf8mb4
max_heap_table_size = 512M
tmp_table_size = 512M
innodb_buffer_pool_size = {buffer_pool_mb}M
innodb_doublewrite = OFF
innodb_log_file_size = 512M
innodb_flush_log_at_trx_commit = 1
query_cache_size = 64M
query_cache_limit = 16M
join_buffer_size = 256M
sort_buffer_size = 256M
read_buffer_size = 4M
read_rnd_buffer_size = 8M
"""


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


class DatabaseService:
    """Runs the MariaDB side of the install through the mysql client."""

    RECREATE_PROMPT_KEY = "recreate_database"

    def __init__(self, logger, console, filesystem_service):
        self.logger = logger
        self.console = console
        self.filesystem_service = filesystem_service

    @staticmethod
    def render_tuning_config(buffer_pool_mb: int) -> str:
        return TUNING_TEMPLATE.format(buffer_pool_mb=buffer_pool_mb)

    def write_tuning_config(self, path: str, buffer_pool_mb: int):
        self.console.print("[blue]Optimizing MariaDB settings...[/blue]")
        self.filesystem_service.write_text(path, self.render_tuning_config(buffer_pool_mb))
        self.logger.info("Wrote MariaDB tuning file %s (buffer pool %sM)", path, buffer_pool_mb)

    def _mysql(self, sql: str, run_cmd: Callable):
        return run_cmd(["mysql", "-u", "root"], check=True, capture_output=True, input_text=sql)

    def database_exists(self, context: InstallContext, run_cmd: Callable) -> bool:
        result = run_cmd(
            ["mysql", "-u", "root", "-N", "-e", f"SHOW DATABASES LIKE {_quote(context.db_name)};"],
            check=True,
            capture_output=True,
        )
        return any(line.strip() == context.db_name for line in (result.stdout or "").splitlines())

    def create_database(self, context: InstallContext, run_cmd: Callable):
        self._mysql(f"CREATE DATABASE `{context.db_name}`;\n", run_cmd)
        self.console.print("[green]Database created.[/green]")

    def recreate_database(self, context: InstallContext, run_cmd: Callable):
        self._mysql(
            f"DROP DATABASE `{context.db_name}`;\nCREATE DATABASE `{context.db_name}`;\n",
            run_cmd,
        )
        self.console.print("[green]Database recreated.[/green]")

    def import_schema(self, context: InstallContext, schema_path: str, run_cmd: Callable):
        self.logger.info("Importing schema %s into %s", schema_path, context.db_name)
        run_cmd(
            ["mysql", "-u", "root", context.db_name],
            check=True,
            capture_output=True,
            input_file=schema_path,
        )
        self.console.print("[green]Database schema imported.[/green]")

    def ensure_user(self, context: InstallContext, run_cmd: Callable):
        account = f"{_quote(context.db_user)}@{_quote(context.db_host)}"
        self._mysql(
            f"CREATE USER IF NOT EXISTS {account} IDENTIFIED BY {_quote(context.db_password)};\n"
            f"ALTER USER {account} IDENTIFIED BY {_quote(context.db_password)};\n"
            f"GRANT ALL PRIVILEGES ON `{context.db_name}`.* TO {account};\n"
            "FLUSH PRIVILEGES;\n",
            run_cmd,
        )
        self.logger.info("Granted privileges on %s to %s", context.db_name, context.db_user)

    def provision(self, context: InstallContext, schema_path: str, prompter, run_cmd: Callable) -> str:
        """Creates or reuses the database, then (re)asserts the user and grants.

        Returns "created", "recreated" or "kept".
        """
        self.console.print("[blue]Creating Cacti database and user...[/blue]")

        if not self.database_exists(context, run_cmd):
            self.create_database(context, run_cmd)
            self.import_schema(context, schema_path, run_cmd)
            outcome = "created"
        elif prompter.confirm(
            self.RECREATE_PROMPT_KEY,
            f"The database '{context.db_name}' already exists. "
            "Do you want to drop it and recreate a fresh one?",
            default=False,
        ):
            self.recreate_database(context, run_cmd)
            self.import_schema(context, schema_path, run_cmd)
            outcome = "recreated"
        else:
            self.console.print("[yellow]Skipping database recreation.[/yellow]")
            outcome = "kept"

        self.ensure_user(context, run_cmd)
        return outcome

    def populate_timezones(
        self, context: InstallContext, run_cmd: Callable, zoneinfo_dir: str = ZONEINFO_DIR
    ):
        self.console.print("[blue]Populating MySQL TimeZone database...[/blue]")
        tz_sql = run_cmd(["mysql_tzinfo_to_sql", zoneinfo_dir], check=True, capture_output=True)
        run_cmd(
            ["mysql", "-u", "root", "-D", "mysql"],
            check=True,
            capture_output=True,
            input_text=tz_sql.stdout,
        )

        account = f"{_quote(context.db_user)}@{_quote(context.db_host)}"
        self._mysql(
            f"GRANT SELECT ON mysql.time_zone_name TO {account};\nFLUSH PRIVILEGES;\n",
            run_cmd,
        )
        self.console.print(f"[green]Granted SELECT on time_zone_name to {context.db_user}.[/green]")
