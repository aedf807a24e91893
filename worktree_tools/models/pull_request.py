"""Pull request models."""

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class PullRequestDraft:
    """Title and body synthesized from the commits since trunk."""

    title: str
    body: str


@dataclass
class PullRequestResult:
    """A pull request that was opened on GitHub."""

    url: str
    number: int
    title: str
    head: str
    base: str
    draft: bool
    worktree_path: str

    def to_dict(self) -> dict:
        return asdict(self)
