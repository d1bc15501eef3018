"""Contains results of the synchronization workflow."""

from dataclasses import dataclass, field

from github_linear_sync.synchronize.exceptions import SkippedClosedIssueError
from github_linear_sync.synchronize.models import MirrorRecord, SourceIssue


@dataclass(frozen=True)
class SyncSucceeded:
    """A GitHub issue was mirrored into Linear."""

    source_issue: SourceIssue
    mirror_record: MirrorRecord
    created: bool


@dataclass(frozen=True)
class SyncFailed:
    """A GitHub issue could not be mirrored into Linear.

    The original exception is kept in `cause` for diagnostics.
    """

    source_issue: SourceIssue
    reason: str
    cause: BaseException

    @property
    def skipped(self) -> bool:
        """Whether the failure is the expected refusal to mirror a closed issue."""
        return isinstance(self.cause, SkippedClosedIssueError)


SyncOutcome = SyncSucceeded | SyncFailed


@dataclass
class SyncResults:
    """Contains one outcome for every GitHub issue in a synchronization batch."""

    outcomes: list[SyncOutcome] = field(default_factory=list)

    @property
    def successes(self) -> list[SyncSucceeded]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, SyncSucceeded)]

    @property
    def succeeded(self) -> list[MirrorRecord]:
        """Linear issues created or updated by the batch."""
        return [outcome.mirror_record for outcome in self.successes]

    @property
    def failed(self) -> list[SyncFailed]:
        """Every failure, including policy skips."""
        return [outcome for outcome in self.outcomes if isinstance(outcome, SyncFailed)]

    @property
    def skipped(self) -> list[SyncFailed]:
        return [failure for failure in self.failed if failure.skipped]

    @property
    def errors(self) -> list[SyncFailed]:
        """Failures that are not policy skips."""
        return [failure for failure in self.failed if not failure.skipped]

    @property
    def created_count(self) -> int:
        return sum(1 for outcome in self.successes if outcome.created)

    @property
    def updated_count(self) -> int:
        return sum(1 for outcome in self.successes if not outcome.created)
