"""Display and formatting service for worktree information"""
from rich.console import Console
from rich.table import Table

from worktree_tools.constants import CLI_COLORS, COLUMNS, SYMBOL_MAIN, SYMBOL_UNKNOWN
from worktree_tools.formatters import format_sync
from worktree_tools.models.lifecycle import CleanupResult, CreationResult
from worktree_tools.models.pull_request import PullRequestResult
from worktree_tools.models.worktree import ListResult, StatusReport, WorktreeListItem

console = Console()


def _row_style(item: WorktreeListItem):
    if item.record.is_main:
        return CLI_COLORS["main"]
    if item.status is None:
        return CLI_COLORS["unknown"]
    if not item.status.clean:
        return CLI_COLORS["dirty"]
    return CLI_COLORS["clean"]


class DisplayService:
    """Renders operation results for the terminal."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def display_worktree_table(self, result: ListResult) -> None:
        """Display a table of worktrees with their status."""
        table = Table(title=f"Worktrees of {result.main_repo_path}")
        for col in COLUMNS:
            table.add_column(col.label, max_width=col.width or None)

        for item in result.worktrees:
            record = item.record
            branch = record.branch_name or "(detached)"
            if record.is_main:
                branch = f"{branch} {SYMBOL_MAIN}"

            if record.is_main:
                changes, sync = "", ""
            elif item.status is None:
                changes, sync = SYMBOL_UNKNOWN, "unknown"
            else:
                changes = "clean" if item.status.clean else "modified"
                sync = format_sync(item.status)

            table.add_row(
                branch,
                record.path,
                changes,
                sync,
                record.head_commit[:8],
                style=_row_style(item),
            )

        console.print(table)
        console.print(f"\n{SYMBOL_MAIN} = main checkout     {SYMBOL_UNKNOWN} = status unknown")

        if self.verbose:
            for item in result.worktrees:
                if item.error:
                    console.print(f"[red]{item.record.path}: {item.error}[/red]")

    def display_status(self, report: StatusReport) -> None:
        status = report.status
        console.print(f"[bold]{report.worktree_path}[/bold]")
        console.print(f"  Clean:    {'yes' if status.clean else 'no'}")
        console.print(f"  Upstream: {status.upstream or '(none)'}")
        console.print(f"  Ahead:    {status.ahead}")
        console.print(f"  Behind:   {status.behind}")
        colour = "green" if report.ready_for_pr else "yellow"
        console.print(f"[{colour}]{report.message}[/{colour}]")

    def display_creation(self, result: CreationResult) -> None:
        console.print(f"[green]Created worktree[/green] {result.worktree_path}")
        console.print(f"  Branch:       {result.branch_full_name} (from {result.base_branch})")
        console.print(f"  Username:     {result.username} ({result.username_source})")
        console.print(f"  Repository:   {result.repo_name}")
        if result.package_manager:
            state = "installed" if result.dependencies_installed else "[yellow]failed[/yellow]"
            console.print(f"  Dependencies: {result.package_manager} {state}")
        else:
            console.print("  Dependencies: [dim]no lock file found[/dim]")
        console.print(f"  Env files:    {result.env_files_copied} copied")
        if result.ide_opened:
            console.print(f"  Opened in:    {result.ide_opened}")
        self._display_warnings(result.warnings)

    def display_cleanup(self, result: CleanupResult) -> None:
        console.print(f"[green]Removed worktree[/green] {result.worktree_path}")
        if result.branch_name:
            state = "deleted" if result.branch_deleted else "kept"
            console.print(f"  Branch {result.branch_name} {state}")
        for directory in result.directories_removed:
            console.print(f"  [dim]Removed empty directory {directory}[/dim]")
        self._display_warnings(result.warnings)

    def display_pull_request(self, result: PullRequestResult) -> None:
        kind = "draft PR" if result.draft else "PR"
        console.print(f"[green]Opened {kind} #{result.number}[/green] {result.title}")
        console.print(f"  {result.head} -> {result.base}")
        console.print(f"  {result.url}")

    @staticmethod
    def _display_warnings(warnings) -> None:
        for warning in warnings:
            console.print(f"[yellow]⚠ {warning}[/yellow]")
