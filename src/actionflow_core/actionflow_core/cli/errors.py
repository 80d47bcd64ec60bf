# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Smart error extraction and actionable error messages."""

import re
from typing import Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)

ERROR_PATTERNS = {
    "missing": {
        "pattern": r"(no such file or directory|file not found|does not exist)",
        "message": "Workflow file not found",
        "action": "Check the path, or pass a directory to validate every workflow in it",
    },
    "permission": {
        "pattern": r"(permission denied|access denied)",
        "message": "Permission denied",
        "action": "Check file permissions or run with appropriate privileges",
    },
    "directory": {
        "pattern": r"(is a directory)",
        "message": "Expected a file, got a directory",
        "action": "Pass a single workflow file to this command",
    },
    "encoding": {
        "pattern": r"(codec can't decode|invalid start byte|unicodedecodeerror)",
        "message": "File is not valid UTF-8",
        "action": "Re-save the workflow file with UTF-8 encoding",
    },
    "yaml": {
        "pattern": r"(yaml parse error|mapping values are not allowed|could not find expected)",
        "message": "Invalid YAML syntax",
        "action": "Fix the syntax at the reported line; check indentation and quoting",
    },
}


def detect_error_pattern(output: str) -> Optional[Tuple[str, str]]:
    output_lower = output.lower()
    for pattern_info in ERROR_PATTERNS.values():
        if re.search(pattern_info["pattern"], output_lower, re.IGNORECASE):
            return (pattern_info["message"], pattern_info["action"])
    return None


def show_error(title: str, output: str, log_file: Optional[str] = None):
    """Display a formatted error with smart extraction."""
    console.print()
    detected = detect_error_pattern(output)
    if detected:
        message, action = detected
        error_text = Text()
        error_text.append(f"✗ {title}\n\n", style="bold red")
        error_text.append(f"{message}\n\n", style="red")
        error_text.append("→ Fix: ", style="bold yellow")
        error_text.append(f"{action}\n", style="yellow")
        console.print(Panel(error_text, border_style="red", expand=False))
    else:
        console.print(Panel(Text(f"✗ {title}", style="bold red"), border_style="red", expand=False))

    lines = output.strip().split("\n")
    context = lines[-10:] if len(lines) > 10 else lines
    if context and context != [""]:
        console.print("\n[dim]Details:[/dim]")
        for line in context:
            console.print(f"  [dim]│[/dim] {line}", markup=False, highlight=False)

    if log_file:
        console.print(f"\n[dim]Full logs: {log_file}[/dim]")
    console.print()


def show_success(message: str):
    console.print(f"[green]✓[/green] {message}", style="green")
