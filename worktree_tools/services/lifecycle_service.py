"""Worktree lifecycle: the creation pipeline and removal with directory pruning."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union, TYPE_CHECKING

from worktree_tools.constants import IDE_CHOICES
from worktree_tools.exceptions import GitOperationError, InvalidArgument, WorktreeToolsError
from worktree_tools.models.identity import Identity
from worktree_tools.models.lifecycle import CreationPlan, CreationResult, CleanupResult
from worktree_tools.services.git import GitOperations, WorktreeService
from worktree_tools.services.identity_service import IdentityService
from worktree_tools.services.workspace_setup import WorkspaceSetup, detect_package_manager
from worktree_tools.utils.naming import plan_worktree, validate_description, validate_ticket
from worktree_tools.logging_config import get_logger

if TYPE_CHECKING:
    from worktree_tools.config import Config

logger = get_logger(__name__)


class StageKind(Enum):
    """How a pipeline stage's failure is treated."""
    FATAL = "fatal"  # Abort the operation
    BEST_EFFORT = "best_effort"  # Record a warning and continue


@dataclass
class CreationContext:
    """State threaded through the creation stages."""

    ticket: str
    description: str
    start_dir: Optional[str] = None
    base_branch: Optional[str] = None
    ide_hint: Optional[str] = None
    main_root: str = ""
    repo_name: str = ""
    identity: Optional[Identity] = None
    plan: Optional[CreationPlan] = None
    result: Optional[CreationResult] = None
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Stage:
    name: str
    kind: StageKind
    run: Callable[[CreationContext], None]


class LifecycleService:
    """Creates and removes worktrees.

    Creation runs VALIDATE, RESOLVE_IDENTITY, RESOLVE_PATHS, SYNC_TRUNK and
    CREATE_WORKTREE as fatal stages, then INSTALL_DEPS, COPY_ENV and OPEN_IDE
    as best-effort stages. Nothing is rolled back: once the worktree exists,
    later failures only show up as warnings on the result.
    """

    def __init__(
        self,
        config: Union["Config", dict],
        git_operations: Optional[GitOperations] = None,
        worktree_service: Optional[WorktreeService] = None,
        identity_service: Optional[IdentityService] = None,
        workspace_setup: Optional[WorkspaceSetup] = None,
    ):
        self.config = config
        self.git_operations = git_operations or GitOperations(config)
        self.worktree_service = worktree_service or WorktreeService(config)
        self.identity_service = identity_service or IdentityService(config)
        self.workspace_setup = workspace_setup or WorkspaceSetup(config)
        self.override_file_name = config.get("override_file_name", ".worktree-config")
        self.worktrees_suffix = config.get("worktrees_suffix", "-worktrees")

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def stages(self) -> List[Stage]:
        """The creation pipeline, in execution order."""
        stages = [
            Stage("validate", StageKind.FATAL, self._validate),
            Stage("resolve_identity", StageKind.FATAL, self._resolve_identity),
            Stage("resolve_paths", StageKind.FATAL, self._resolve_paths),
            Stage("sync_trunk", StageKind.FATAL, self._sync_trunk),
            Stage("create_worktree", StageKind.FATAL, self._create_worktree),
        ]
        if self.config.get("install_dependencies", True):
            stages.append(Stage("install_deps", StageKind.BEST_EFFORT, self._install_deps))
        if self.config.get("copy_env_files", True):
            stages.append(Stage("copy_env", StageKind.BEST_EFFORT, self._copy_env))
        stages.append(Stage("open_ide", StageKind.BEST_EFFORT, self._open_ide))
        return stages

    def create(
        self,
        ticket: str,
        description: str,
        start_dir: Optional[str] = None,
        base_branch: Optional[str] = None,
        ide_hint: Optional[str] = None,
    ) -> CreationResult:
        """Create ``<handle>/<ticket>/<description>`` in its own worktree.

        Args:
            ticket: Ticket identifier, used verbatim as a branch/path segment
            description: Free-text branch description, normalized
            start_dir: Any directory inside the repository (defaults to cwd)
            base_branch: Ref to branch from instead of the detected trunk
            ide_hint: ``cursor``, ``vscode`` or ``auto`` to open the result

        Raises:
            WorktreeToolsError: a fatal stage failed
        """
        ctx = CreationContext(
            ticket=ticket,
            description=description,
            start_dir=start_dir,
            base_branch=base_branch,
            ide_hint=ide_hint,
        )

        for stage in self.stages():
            logger.debug(f"Stage {stage.name} ({stage.kind.value})")
            if stage.kind is StageKind.FATAL:
                stage.run(ctx)
                continue
            try:
                stage.run(ctx)
            except Exception as e:
                warning = f"{stage.name} failed: {e}"
                logger.warning(warning)
                ctx.warnings.append(warning)

        assert ctx.result is not None
        ctx.result.warnings.extend(ctx.warnings)
        logger.info(f"Created worktree {ctx.result.worktree_path}")
        return ctx.result

    def _validate(self, ctx: CreationContext) -> None:
        ctx.ticket = validate_ticket(ctx.ticket)
        ctx.description = validate_description(ctx.description)
        if ctx.ide_hint and ctx.ide_hint not in IDE_CHOICES:
            raise InvalidArgument(
                "ide_hint", f"'{ctx.ide_hint}' is not one of: {', '.join(IDE_CHOICES)}"
            )

    def _resolve_identity(self, ctx: CreationContext) -> None:
        ctx.main_root = self.git_operations.locate_main_root(ctx.start_dir)
        override_path = os.path.join(ctx.main_root, self.override_file_name)
        ctx.identity = self.identity_service.resolve(override_path, repo_path=ctx.main_root)

    def _resolve_paths(self, ctx: CreationContext) -> None:
        assert ctx.identity is not None
        ctx.repo_name = self.git_operations.repository_name(ctx.main_root)
        ctx.plan = plan_worktree(
            ctx.identity,
            ctx.repo_name,
            ctx.main_root,
            ctx.ticket,
            ctx.description,
            self.worktrees_suffix,
        )
        logger.debug(f"Planned {ctx.plan.full_branch_name} at {ctx.plan.worktree_path}")

    def _sync_trunk(self, ctx: CreationContext) -> None:
        self.git_operations.fetch(ctx.main_root)
        if not ctx.base_branch:
            ctx.base_branch = self.git_operations.default_trunk(ctx.main_root)

    def _create_worktree(self, ctx: CreationContext) -> None:
        assert ctx.plan is not None and ctx.identity is not None and ctx.base_branch
        self.worktree_service.add_worktree(
            ctx.main_root, ctx.plan.worktree_path, ctx.plan.full_branch_name, ctx.base_branch
        )
        ctx.result = CreationResult(
            worktree_path=ctx.plan.worktree_path,
            branch_full_name=ctx.plan.full_branch_name,
            username=ctx.identity.handle,
            username_source=ctx.identity.source.value,
            repo_name=ctx.repo_name,
            base_branch=ctx.base_branch,
        )

    def _install_deps(self, ctx: CreationContext) -> None:
        assert ctx.result is not None
        manager = detect_package_manager(ctx.result.worktree_path)
        if manager is None:
            logger.info("No lock file found, skipping dependency install")
            return
        ctx.result.package_manager = manager
        self.workspace_setup.install_dependencies(ctx.result.worktree_path, manager)
        ctx.result.dependencies_installed = True

    def _copy_env(self, ctx: CreationContext) -> None:
        assert ctx.result is not None
        copied, errors = self.workspace_setup.copy_env_files(ctx.main_root, ctx.result.worktree_path)
        ctx.result.env_files_copied = copied
        ctx.warnings.extend(errors)

    def _open_ide(self, ctx: CreationContext) -> None:
        assert ctx.result is not None
        if ctx.ide_hint:
            ctx.result.ide_opened = self.workspace_setup.open_ide(ctx.result.worktree_path, ctx.ide_hint)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def cleanup(
        self,
        worktree_path: str,
        delete_branch: bool = False,
        start_dir: Optional[str] = None,
    ) -> CleanupResult:
        """Remove a worktree, optionally its branch, then prune empty parent directories.

        Raises:
            WorktreeRemovalFailed: git refused to remove the worktree
        """
        worktree_path = os.path.abspath(worktree_path)
        main_root = self.git_operations.locate_main_root(start_dir or self._start_dir_for(worktree_path))
        result = CleanupResult(removed=False, worktree_path=worktree_path)

        # Branch name before removal; afterwards the worktree is gone
        try:
            result.branch_name = self.git_operations.current_branch(worktree_path)
        except WorktreeToolsError as e:
            logger.debug(f"Could not read branch of {worktree_path}: {e}")

        self.worktree_service.remove_worktree(main_root, worktree_path, force=True)
        result.removed = True

        if delete_branch:
            if result.branch_name:
                try:
                    self.git_operations.delete_branch(main_root, result.branch_name)
                    result.branch_deleted = True
                except GitOperationError as e:
                    warning = f"Failed to delete branch {result.branch_name}: {e}"
                    logger.warning(warning)
                    result.warnings.append(warning)
            else:
                result.warnings.append("Branch not deleted: branch name of the worktree is unknown")

        removed_dirs, prune_warning = self.prune_empty_parents(worktree_path)
        result.directories_removed = removed_dirs
        if prune_warning:
            result.warnings.append(prune_warning)
        return result

    @staticmethod
    def _start_dir_for(worktree_path: str) -> Optional[str]:
        """Run git from the worktree itself when it still exists."""
        return worktree_path if os.path.isdir(worktree_path) else None

    def _within_container(self, path: str) -> bool:
        """True while some component of ``path`` ends with the container suffix.

        A textual heuristic: it keeps pruning inside directories named like
        ``<repo>-worktrees``, which this tool creates.
        """
        return any(part.endswith(self.worktrees_suffix) for part in path.split(os.sep) if part)

    def prune_empty_parents(self, worktree_path: str) -> Tuple[List[str], Optional[str]]:
        """Remove now-empty directories above a removed worktree.

        Walks upward from the worktree's parent and stops at the first
        directory that is non-empty, is the filesystem root or the home
        directory, or lies outside a ``*-worktrees`` container.

        Returns:
            Tuple of (removed_directories, warning). warning is set only when a
            directory could not be read or removed.
        """
        removed: List[str] = []
        home = os.path.realpath(self.config.get("home_directory") or os.path.expanduser("~"))
        current = os.path.dirname(os.path.normpath(worktree_path))

        while True:
            parent = os.path.dirname(current)
            if current == parent:  # filesystem root
                break
            if os.path.realpath(current) == home:
                break
            if not self._within_container(current):
                break
            try:
                if os.listdir(current):
                    break
                os.rmdir(current)
            except FileNotFoundError:
                # Already gone; keep walking
                current = parent
                continue
            except OSError as e:
                warning = f"Stopped pruning at {current}: {e}"
                logger.warning(warning)
                return removed, warning
            removed.append(current)
            logger.info(f"Removed empty directory {current}")
            current = parent

        return removed, None
