"""Database schema file selection."""

import os
from pathlib import Path
from typing import List, Tuple

from cactiinstaller.errors import OperatorExit
from cactiinstaller.models import SchemaChoice


class SchemaSelector:
    """Asks the operator for a schema file until an existing one is chosen."""

    PROMPT_KEY = "schema"

    def __init__(self, logger, console, prompter):
        self.logger = logger
        self.console = console
        self.prompter = prompter

    def discover(self, home_dir: str) -> List[str]:
        if not os.path.isdir(home_dir):
            return []
        return sorted(str(path) for path in Path(home_dir).glob("*.sql") if path.is_file())

    def resolve(self, answer: str, candidates: List[str], default_path: str) -> Tuple[str, str]:
        """Maps a raw answer to (path, origin). Raises OperatorExit on `exit`."""
        answer = answer.strip()
        if answer in ("", "default"):
            return default_path, "default"
        if answer == "exit":
            raise OperatorExit("Exiting the installer as requested.")
        if answer.isdigit() and 1 <= int(answer) <= len(candidates):
            return candidates[int(answer) - 1], "discovered"
        return os.path.expanduser(answer), "custom"

    def _print_candidates(self, home_dir: str, candidates: List[str]):
        self.console.print("Select the database schema to import:")
        self.console.print(f"Listing available .sql files in {home_dir}")
        if not candidates:
            self.console.print("[yellow]No .sql files found in the home directory.[/yellow]")
            return
        for index, candidate in enumerate(candidates, start=1):
            self.console.print(f"{index}. {candidate}")

    def select(self, home_dir: str, default_path: str) -> SchemaChoice:
        candidates = self.discover(home_dir)
        self._print_candidates(home_dir, candidates)

        while True:
            self.console.print()
            self.console.print("Please choose one of the following options:")
            self.console.print(f"- Enter 'default' to use the default schema ({default_path}).")
            self.console.print("- Enter the number corresponding to a file listed above.")
            self.console.print("- Specify the path to a custom schema file.")
            self.console.print("- Type 'exit' to quit.")

            answer = self.prompter.ask(self.PROMPT_KEY, "Your choice", default="default")
            path, origin = self.resolve(answer, candidates, default_path)

            if os.path.isfile(path):
                self.console.print(f"[green]Using schema file: {path}[/green]")
                self.logger.info("Selected %s schema file: %s", origin, path)
                return SchemaChoice(path=path, origin=origin)

            self.console.print(
                f"[red]Error:[/red] The schema file '{path}' does not exist. Please try again."
            )
