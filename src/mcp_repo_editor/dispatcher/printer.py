"""
Execution sinks: terminal display of executed calls and a logging audit trail.

Display conventions:
- normal text is bold white
- numbers are yellow
- paths are cyan
- deleted lines are red, inserted lines green
"""

import logging
from typing import Iterable, Optional

from rich.console import Console
from rich.text import Text

from ..filesystem.change_report import compute_line_changes
from ..filesystem.line_edit import split_lines
from ..filesystem.models import ChangeKind, LineChange
from .models import (
    CreateFileCall,
    DeleteFileCall,
    FunctionCall,
    FunctionResult,
    GetAllFilesCall,
    ModifyFileCall,
    MoveFileCall,
    ReadFileCall,
    WriteFileCall,
)

logger = logging.getLogger(__name__)

TEXT = "bold white"
NUMBER = "bold yellow"
PATH = "bold cyan"


def _summarize(call: FunctionCall) -> dict:
    """Call arguments without file content, for log lines."""
    return call.args.model_dump(exclude={"content"})


class ConsoleExecutionPrinter:
    """
    IExecutionSink that renders each executed call to the terminal with rich.
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console(highlight=False)

    def _print_line_content(self, line_number: int, content: str, is_deletion: bool) -> None:
        line_mod = f"{'-' if is_deletion else '+'} {line_number}. {content.rstrip()}"
        self._console.print(Text(line_mod, style="red" if is_deletion else "green"))

    def _print_changes(self, changes: Iterable[LineChange]) -> None:
        for change in changes:
            self._print_line_content(change.line, change.content, change.kind == ChangeKind.DELETION)

    def record(self, call: FunctionCall, result: FunctionResult) -> None:
        if not result.is_success:
            self._console.print(Text("ERROR", style="bold red"))
            self._console.print(Text(repr(call)))
            self._console.print(Text(str(result.data), style="red"))
            self._console.print()
            return

        if isinstance(call, GetAllFilesCall):
            self._console.print(
                Text.assemble(
                    ("Listing all (", TEXT),
                    (str(len(result.data)), NUMBER),
                    (") files in repository.", TEXT),
                )
            )
        elif isinstance(call, CreateFileCall):
            lines = split_lines(call.args.content)
            self._console.print(
                Text.assemble(
                    ("Created new file at ", TEXT),
                    (call.args.path, PATH),
                    (" with ", TEXT),
                    (str(len(lines)), NUMBER),
                    (" lines", TEXT),
                )
            )
            for i, line in enumerate(lines):
                self._print_line_content(i + 1, line, False)
        elif isinstance(call, WriteFileCall):
            previous = result.data
            self._console.print(
                Text.assemble(
                    ("Wrote new file at " if previous is None else "Overwrote file at ", TEXT),
                    (call.args.path, PATH),
                )
            )
            self._print_changes(compute_line_changes(previous or "", call.args.content))
        elif isinstance(call, ReadFileCall):
            if result.data is None:
                self._console.print(
                    Text.assemble(("Reading ", TEXT), (call.args.path, PATH), (" (absent)", TEXT))
                )
            else:
                self._console.print(
                    Text.assemble(
                        ("Reading ", TEXT),
                        (call.args.path, PATH),
                        (" (", TEXT),
                        (str(len(split_lines(result.data))), NUMBER),
                        (" lines)", TEXT),
                    )
                )
        elif isinstance(call, DeleteFileCall):
            self._console.print(Text.assemble(("Deleted file at ", TEXT), (call.args.path, PATH)))
        elif isinstance(call, MoveFileCall):
            self._console.print(
                Text.assemble(
                    ("Moved file from ", TEXT),
                    (call.args.source_path, PATH),
                    (" to ", TEXT),
                    (call.args.destination_path, PATH),
                )
            )
        elif isinstance(call, ModifyFileCall):
            self._console.print(Text.assemble(("Modified file at ", TEXT), (call.args.path, PATH)))
            self._print_changes(
                compute_line_changes(result.data["old_contents"], result.data["new_contents"])
            )
        else:
            raise TypeError(f"Unrecognised function call {call!r}")

        self._console.print()  # Just to space things out a little.

    def show_message(self, message: str) -> None:
        self._console.print(Text("Received message", style=TEXT))
        self._console.print(Text(message))


class LoggingExecutionSink:
    """
    IExecutionSink that writes an audit trail through the logging module.
    Used where stdout belongs to a protocol stream.
    """

    def __init__(self, audit_logger: Optional[logging.Logger] = None):
        self._logger = audit_logger or logger

    def record(self, call: FunctionCall, result: FunctionResult) -> None:
        if not result.is_success:
            self._logger.warning("%s failed: %s (args: %s)", call.function, result.data, _summarize(call))
            return
        if isinstance(call, ModifyFileCall):
            changes = compute_line_changes(result.data["old_contents"], result.data["new_contents"])
            deletions = sum(1 for change in changes if change.kind == ChangeKind.DELETION)
            self._logger.info(
                "%s %s: -%s +%s lines",
                call.function,
                call.args.path,
                deletions,
                len(changes) - deletions,
            )
        else:
            self._logger.info("%s succeeded (args: %s)", call.function, _summarize(call))

    def show_message(self, message: str) -> None:
        self._logger.info("Received message: %s", message)
