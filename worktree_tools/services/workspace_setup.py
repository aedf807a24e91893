"""Post-checkout setup of a new worktree: dependencies, env files, IDE."""

import fnmatch
import os
import shutil
from typing import List, Optional, Tuple, Union, TYPE_CHECKING

from worktree_tools.constants import ENV_FILE_PATTERN, ENV_WALK_SKIP_DIRS, IDE_COMMANDS, PACKAGE_MANAGERS
from worktree_tools.exceptions import CommandError
from worktree_tools.utils.process import run_command
from worktree_tools.logging_config import get_logger

if TYPE_CHECKING:
    from worktree_tools.config import Config

logger = get_logger(__name__)


def detect_package_manager(worktree_path: str) -> Optional[str]:
    """Package manager whose lock file is present, first match in priority order."""
    for lock_file, manager in PACKAGE_MANAGERS:
        if os.path.isfile(os.path.join(worktree_path, lock_file)):
            return manager
    return None


def find_env_files(root: str, max_depth: int, skip_dirs: Tuple[str, ...] = ()) -> List[str]:
    """Relative paths of ``.env*`` files under ``root``.

    A file qualifies when its relative path has at most ``max_depth``
    components. Directories named in ``ENV_WALK_SKIP_DIRS`` or passed as
    absolute paths in ``skip_dirs`` are not walked.
    """
    root = os.path.normpath(root)
    skip_abs = {os.path.normpath(d) for d in skip_dirs}
    found: List[str] = []

    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)
        depth = 0 if rel_dir == os.curdir else len(rel_dir.split(os.sep))

        if depth + 1 >= max_depth:
            # Files one level down would exceed the limit
            dirnames[:] = []
        else:
            dirnames[:] = sorted(
                d for d in dirnames
                if d not in ENV_WALK_SKIP_DIRS and os.path.join(dirpath, d) not in skip_abs
            )

        for name in sorted(filenames):
            if not fnmatch.fnmatchcase(name, ENV_FILE_PATTERN):
                continue
            full_path = os.path.join(dirpath, name)
            if os.path.isfile(full_path) and not os.path.islink(full_path):
                found.append(os.path.relpath(full_path, root))

    return found


class WorkspaceSetup:
    """Best-effort setup steps run inside a freshly created worktree."""

    def __init__(self, config: Union["Config", dict]):
        self.config = config
        self.install_timeout = config.get("install_timeout", 300)
        self.env_file_max_depth = config.get("env_file_max_depth", 3)

    def install_dependencies(self, worktree_path: str, manager: str) -> None:
        """Run ``<manager> install`` inside the worktree.

        Raises:
            CommandError: the install failed, timed out, or the manager is not installed
        """
        logger.info(f"Installing dependencies with {manager}...")
        run_command([manager, "install"], cwd=worktree_path, timeout=self.install_timeout)

    def copy_env_files(self, source_root: str, target_root: str,
                       skip_dirs: Tuple[str, ...] = ()) -> Tuple[int, List[str]]:
        """Copy every ``.env*`` file from ``source_root`` to the same place under ``target_root``.

        Returns:
            Tuple of (copied_count, errors); one file failing does not stop the rest
        """
        copied = 0
        errors: List[str] = []

        for rel_path in find_env_files(source_root, self.env_file_max_depth, skip_dirs):
            source = os.path.join(source_root, rel_path)
            target = os.path.join(target_root, rel_path)
            try:
                os.makedirs(os.path.dirname(target), exist_ok=True)
                shutil.copy2(source, target)
            except OSError as e:
                errors.append(f"Failed to copy {rel_path}: {e}")
                logger.warning(f"Failed to copy {rel_path} to {target_root}: {e}")
                continue
            copied += 1
            logger.debug(f"Copied {rel_path}")

        return copied, errors

    def open_ide(self, worktree_path: str, ide_hint: str) -> str:
        """Open the worktree in an editor; ``auto`` picks the first one on PATH.

        Returns:
            The IDE that was launched

        Raises:
            CommandError: no matching editor, or the launcher failed
        """
        if ide_hint == "auto":
            candidates = list(IDE_COMMANDS)
        elif ide_hint in IDE_COMMANDS:
            candidates = [ide_hint]
        else:
            raise CommandError([ide_hint], f"unknown IDE, expected one of: auto, {', '.join(IDE_COMMANDS)}")

        for ide in candidates:
            executable = IDE_COMMANDS[ide]
            if ide_hint == "auto" and shutil.which(executable) is None:
                continue
            run_command([executable, worktree_path], timeout=self.config.get("git_timeout", 30))
            return ide

        raise CommandError(["auto"], f"none of {', '.join(IDE_COMMANDS.values())} found on PATH")
