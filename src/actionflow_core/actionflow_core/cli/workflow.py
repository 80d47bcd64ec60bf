# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""CLI commands for workflow operations."""

import argparse
import json
import os
import re
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from actionflow_common.validation import extract_line_map, find_workflow_files, line_for_path
from actionflow_core.cli.config import ActionFlowConfig, load_and_validate_config
from actionflow_core.cli.errors import show_error, show_success
from actionflow_core.cli.logging import log
from actionflow_core.logconfig import WorkflowContext, configure_logging
from actionflow_core.workflow import (
    LintError,
    Severity,
    format_trigger,
    layout_workflow,
    lint_workflow,
    parse_workflow,
    serialize_workflow,
)

console = Console()

DEFAULT_WORKFLOWS_DIR = os.path.join(".github", "workflows")

_YAML_LINE_RE = re.compile(r"\(line (\d+), column \d+\)")


@dataclass
class FileIssue:
    """A parse error or lint issue tied to a file and, where known, a line."""

    file: str
    message: str
    severity: Severity = Severity.ERROR
    line: Optional[int] = None
    path: Optional[str] = None
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        location = f"{self.file}:{self.line}" if self.line else self.file
        msg = f"{location}: {self.severity.value}: {self.message}"
        if self.path:
            msg += f" (at {self.path})"
        if self.suggestion:
            msg += f". Did you mean {self.suggestion}?"
        return msg


@dataclass
class ValidationReport:
    files: List[str] = field(default_factory=list)
    issues: List[FileIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[FileIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[FileIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def build_workflow_parser() -> argparse.ArgumentParser:
    """Build the argument parser for workflow commands."""
    parser = argparse.ArgumentParser(
        description="Validate, format and inspect GitHub Actions workflow files",
        prog="actionflow",
    )

    subparsers = parser.add_subparsers(
        dest="workflow_action",
        help="Workflow action to perform",
        required=True,
    )

    # validate subcommand
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate workflow YAML files",
        description=(
            "Parse and lint workflow files for invalid triggers, unknown runners, "
            "missing or circular job dependencies, malformed steps and other issues."
        ),
    )
    validate_parser.add_argument(
        "paths",
        nargs="*",
        help=(
            "Workflow files or directories to validate. "
            f"If not specified, validates all workflows in {DEFAULT_WORKFLOWS_DIR}."
        ),
    )
    validate_parser.add_argument(
        "--format",
        choices=["text", "table"],
        default=None,
        help="Output format (default: text, or ACTIONFLOW_OUTPUT_FORMAT)",
    )
    validate_parser.add_argument(
        "--warnings-as-errors",
        "-W",
        action="store_true",
        default=None,
        help="Treat warnings as errors (affects exit code)",
    )
    validate_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only output errors and summary",
    )

    # format subcommand
    format_parser = subparsers.add_parser(
        "format",
        help="Print a workflow file in canonical form",
        description="Re-serialize a workflow file with canonical key order and layout.",
    )
    format_parser.add_argument("path", help="Workflow file to format")
    mode = format_parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with 1 if the file is not already in canonical form",
    )
    mode.add_argument(
        "--write",
        action="store_true",
        help="Rewrite the file in place",
    )

    # graph subcommand
    graph_parser = subparsers.add_parser(
        "graph",
        help="Show the job dependency graph layout",
        description="Compute trigger, job and add-job node positions and the edges between them.",
    )
    graph_parser.add_argument("path", help="Workflow file to lay out")
    graph_parser.add_argument(
        "--format",
        choices=["json", "table"],
        default="table",
        help="Output format (default: table)",
    )

    return parser


def read_workflow_file(path: str) -> Optional[str]:
    """Return the file's text, or show an error panel and return None."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        show_error(f"Cannot read {path}", str(e))
        return None


def _parse_error_issue(file: str, message: str) -> FileIssue:
    match = _YAML_LINE_RE.search(message)
    return FileIssue(file, message, line=int(match.group(1)) if match else None)


def _lint_issue(file: str, issue: LintError, line_map) -> FileIssue:
    return FileIssue(
        file,
        issue.message,
        severity=issue.severity,
        line=line_for_path(line_map, issue.path),
        path=issue.path,
        suggestion=issue.suggestion,
    )


def validate_text(file: str, text: str) -> List[FileIssue]:
    """Parse and lint one document, mapping each issue back to a source line."""
    WorkflowContext.set(file)
    try:
        result = parse_workflow(text)
        issues = [_parse_error_issue(file, e) for e in result.errors]
        line_map = extract_line_map(text)
        issues.extend(_lint_issue(file, i, line_map) for i in lint_workflow(result.workflow))
        log(f"{file}: {len(issues)} issue(s)", level="debug")
        return issues
    finally:
        WorkflowContext.clear()


def validate_paths(paths: List[str], extensions) -> ValidationReport:
    report = ValidationReport()
    for path in paths:
        files = find_workflow_files(path, extensions)
        if not files:
            if os.path.isdir(path):
                log(f"No workflow files found in {path}", level="warning")
                continue
            report.issues.append(FileIssue(path, "No such file or directory"))
            continue
        for file in files:
            report.files.append(file)
            text = read_workflow_file(file)
            if text is None:
                report.issues.append(FileIssue(file, "File could not be read"))
                continue
            report.issues.extend(validate_text(file, text))
    return report


def print_result_text(report: ValidationReport, quiet: bool = False):
    """Print validation result in text format."""
    for issue in report.issues:
        if quiet and issue.severity == Severity.WARNING:
            continue
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(str(issue), style=style, markup=False, highlight=False, soft_wrap=True)


def print_result_table(report: ValidationReport, quiet: bool = False):
    """Print validation result in table format."""
    if not report.issues:
        return

    table = Table(title="Validation Results")
    table.add_column("File", style="cyan")
    table.add_column("Line", style="magenta")
    table.add_column("Severity", style="bold")
    table.add_column("Message")
    table.add_column("Suggestion", style="green")

    for issue in report.issues:
        if quiet and issue.severity == Severity.WARNING:
            continue
        severity_style = "red" if issue.severity == Severity.ERROR else "yellow"
        table.add_row(
            issue.file,
            str(issue.line) if issue.line else "-",
            f"[{severity_style}]{issue.severity.value}[/{severity_style}]",
            issue.message + (f" (at {issue.path})" if issue.path else ""),
            issue.suggestion or "-",
        )

    console.print(table)


def cmd_validate(args: argparse.Namespace, config: ActionFlowConfig) -> int:
    """Execute the validate command."""
    paths = args.paths or [DEFAULT_WORKFLOWS_DIR]
    output_format = args.format or config.output_format
    warnings_as_errors = (
        config.warnings_as_errors if args.warnings_as_errors is None else args.warnings_as_errors
    )

    if not args.quiet:
        console.print(f"Validating: {', '.join(paths)}", markup=False, highlight=False, soft_wrap=True)

    report = validate_paths(paths, config.extensions)

    if output_format == "table":
        print_result_table(report, args.quiet)
    else:
        print_result_text(report, args.quiet)

    error_count = len(report.errors)
    warning_count = len(report.warnings)

    if not report.files and error_count == 0:
        console.print("[yellow]No workflow files found.[/yellow]")
        return 1

    if error_count == 0 and warning_count == 0:
        if not args.quiet:
            console.print("[green]All workflows valid.[/green]")
        return 0

    summary_parts = []
    if error_count > 0:
        summary_parts.append(f"[red]{error_count} error{'s' if error_count != 1 else ''}[/red]")
    if warning_count > 0:
        summary_parts.append(
            f"[yellow]{warning_count} warning{'s' if warning_count != 1 else ''}[/yellow]"
        )

    console.print(f"\nValidation complete: {', '.join(summary_parts)}")

    if report.has_errors:
        return 1
    if warnings_as_errors and report.has_warnings:
        return 1
    return 0


def cmd_format(args: argparse.Namespace) -> int:
    """Execute the format command."""
    text = read_workflow_file(args.path)
    if text is None:
        return 1

    WorkflowContext.set(args.path)
    try:
        result = parse_workflow(text)
    finally:
        WorkflowContext.clear()
    if result.errors:
        show_error(f"Cannot format {args.path}", "\n".join(result.errors))
        return 1

    formatted = serialize_workflow(result.workflow)
    if args.check:
        if formatted != text:
            console.print(f"[yellow]Would reformat {args.path}[/yellow]")
            return 1
        show_success(f"{args.path} is already formatted")
        return 0

    if args.write:
        if formatted == text:
            show_success(f"{args.path} is already formatted")
            return 0
        with open(args.path, "w", encoding="utf-8") as f:
            f.write(formatted)
        log(f"Rewrote {args.path}")
        show_success(f"Reformatted {args.path}")
        return 0

    sys.stdout.write(formatted)
    return 0


def _node_details(node) -> str:
    if node.type == "job":
        data = node.data
        steps = f"{data.step_count} step{'s' if data.step_count != 1 else ''}"
        details = f"{data.label} on {data.runs_on}, {steps}"
        if data.needs:
            details += f", needs {', '.join(data.needs)}"
        return details
    if node.type == "trigger":
        triggers = node.data.triggers
        return ", ".join(format_trigger(t) for t in triggers) if triggers else "(no trigger)"
    needs = node.data.needs
    return f"needs {', '.join(needs)}" if needs else "first job"


def cmd_graph(args: argparse.Namespace) -> int:
    """Execute the graph command."""
    text = read_workflow_file(args.path)
    if text is None:
        return 1

    result = parse_workflow(text)
    for error in result.errors:
        console.print(f"[yellow]{args.path}: {error}[/yellow]", highlight=False)
    layout = layout_workflow(result.workflow)

    if args.format == "json":
        sys.stdout.write(json.dumps(layout.to_dict(), indent=2, default=str) + "\n")
        return 0

    nodes = Table(title="Nodes")
    nodes.add_column("Id", style="cyan")
    nodes.add_column("Type", style="bold")
    nodes.add_column("X", justify="right", style="magenta")
    nodes.add_column("Y", justify="right", style="magenta")
    nodes.add_column("Details")
    for node in layout.nodes:
        nodes.add_row(
            node.id,
            node.type,
            str(node.position.x),
            str(node.position.y),
            _node_details(node),
        )
    console.print(nodes)

    edges = Table(title="Edges")
    edges.add_column("Source", style="cyan")
    edges.add_column("Target", style="cyan")
    for edge in layout.edges:
        edges.add_row(edge.source, edge.target)
    console.print(edges)
    return 0


def dispatch(args: argparse.Namespace, config: ActionFlowConfig) -> int:
    """Dispatch to the appropriate workflow command handler."""
    if args.workflow_action == "validate":
        return cmd_validate(args, config)
    elif args.workflow_action == "format":
        return cmd_format(args)
    elif args.workflow_action == "graph":
        return cmd_graph(args)
    else:
        console.print(f"[red]Unknown workflow action: {args.workflow_action}[/red]")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for workflow commands."""
    parser = build_workflow_parser()
    args = parser.parse_args(argv)

    try:
        config = load_and_validate_config()
    except ValidationError as e:
        show_error("Invalid ActionFlow configuration", str(e))
        return 2

    configure_logging(
        config.log_level,
        log_file=config.log_file,
        max_bytes=config.max_log_file_bytes,
        backup_count=config.log_backup_count,
    )
    return dispatch(args, config)


if __name__ == "__main__":
    sys.exit(main())
