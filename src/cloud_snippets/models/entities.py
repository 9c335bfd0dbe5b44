"""Plain data models shared by the snippets and the API."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class JobState(Enum):
    """Lifecycle of an asynchronous DLP job, as seen by the caller."""

    SUBMITTED = "submitted"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


# DlpJob.JobState names mapped onto the caller-facing lifecycle.
DLP_JOB_STATES: Dict[str, JobState] = {
    "JOB_STATE_UNSPECIFIED": JobState.SUBMITTED,
    "PENDING": JobState.SUBMITTED,
    "RUNNING": JobState.RUNNING,
    "ACTIVE": JobState.RUNNING,
    "DONE": JobState.DONE,
    "CANCELED": JobState.FAILED,
    "FAILED": JobState.FAILED,
}


# Info types searched for when the caller omits them.
DEFAULT_INFO_TYPES = ["EMAIL_ADDRESS", "PERSON_NAME", "PHONE_NUMBER", "US_SOCIAL_SECURITY_NUMBER"]

# Sample table used by the tabular snippets when the caller passes none.
DEFAULT_TABLE_HEADERS = ["AGE", "PATIENT", "HAPPINESS SCORE", "FACTOID"]
DEFAULT_TABLE_ROWS = [
    [22, "Jane Austen", 21, "There are 14 kisses in Jane Austen's novels."],
    [55, "Mark Twain", 75, "Mark Twain loved cats."],
    [101, "Charles Dickens", 95, "Charles Dickens name was a curse invented by Shakespeare."],
]


@dataclass(frozen=True)
class Finding:
    """One detected occurrence of an info type."""

    quote: str
    info_type: str
    likelihood: str  # Likelihood enum name, e.g. "VERY_LIKELY"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "quote": self.quote,
            "info_type": self.info_type,
            "likelihood": self.likelihood,
        }


@dataclass
class JobSummary:
    """Snapshot of a DLP job taken from a single GetDlpJob call."""

    name: str
    state: JobState
    raw_state: str
    errors: List[str]

    @property
    def finished(self) -> bool:
        return self.state in (JobState.DONE, JobState.FAILED)
