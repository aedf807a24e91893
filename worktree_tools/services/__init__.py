"""Services that implement the worktree operations."""
