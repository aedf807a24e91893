"""Command-line entry point for worktree-tools"""

import json
import sys

from rich.console import Console

from worktree_tools.cli.args import parse_args
from worktree_tools.config import Config
from worktree_tools.core import WorktreeTools
from worktree_tools.exceptions import WorktreeToolsError
from worktree_tools.logging_config import setup_logging
from worktree_tools.services.display_service import DisplayService

console = Console()


def _print_json(data: dict) -> None:
    print(json.dumps(data, indent=2))


def run(parsed_args) -> int:
    """Execute the parsed sub-command."""
    config = Config(
        verbose=parsed_args.verbose,
        debug=parsed_args.debug,
        workers=getattr(parsed_args, "workers", None),
        install_dependencies=not getattr(parsed_args, "no_install", False),
        copy_env_files=not getattr(parsed_args, "no_env", False),
    )
    tools = WorktreeTools(config)
    display = DisplayService(verbose=parsed_args.verbose)

    if parsed_args.command == "create":
        result = tools.create(
            parsed_args.ticket,
            parsed_args.description,
            base_directory=parsed_args.base_dir,
            ide_hint=parsed_args.ide,
            base_branch=parsed_args.base_branch,
        )
        render = display.display_creation
    elif parsed_args.command == "list":
        result = tools.list_worktrees(parsed_args.base_dir)
        render = display.display_worktree_table
    elif parsed_args.command == "status":
        result = tools.status(parsed_args.worktree_path)
        render = display.display_status
    elif parsed_args.command == "cleanup":
        result = tools.cleanup(
            parsed_args.worktree_path,
            delete_branch=parsed_args.delete_branch,
            base_directory=parsed_args.base_dir,
        )
        render = display.display_cleanup
    elif parsed_args.command == "create-pr":
        result = tools.create_pr(
            parsed_args.worktree_path,
            title=parsed_args.title,
            body=parsed_args.body,
            draft=parsed_args.draft,
        )
        render = display.display_pull_request
    else:
        raise ValueError(f"Unknown command: {parsed_args.command}")

    if parsed_args.json:
        _print_json(result.to_dict())
    else:
        render(result)
    return 0


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        return run(parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except WorktreeToolsError as e:
        if parsed_args.json:
            _print_json({"error": str(e), "type": type(e).__name__})
        else:
            console.print(f"[red]Error: {e}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
