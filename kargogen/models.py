"""Core data models shared across kargogen components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class ServiceDescriptor:
    """A deployable service discovered from the services directory."""

    name: str
    image_repository: str
    git_repo_url: str
    region: str


class GenerationStatus(str, Enum):
    """What the generator did with a service's output directory."""

    CREATED = "created"
    SKIPPED_EXISTING = "skipped"
    OVERWRITTEN = "overwritten"
    FAILED = "failed"


@dataclass
class ServiceGenerationOutcome:
    """Result of generating one service's resource set."""

    service: str
    status: GenerationStatus
    files: List[str] = field(default_factory=list)
    error: Optional[str] = None
    unresolved_tokens: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status in {GenerationStatus.CREATED, GenerationStatus.OVERWRITTEN}


@dataclass
class GenerationReport:
    """Aggregated results of a generate run."""

    outcomes: List[ServiceGenerationOutcome] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def fail_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is GenerationStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return sum(
            1 for outcome in self.outcomes if outcome.status is GenerationStatus.SKIPPED_EXISTING
        )

    @property
    def ok(self) -> bool:
        return self.fail_count == 0


@dataclass
class DeploymentOutcome:
    """Result of applying one service's resource set."""

    service: str
    success: bool
    applied: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class DeploymentReport:
    """Aggregated results of a deploy run."""

    outcomes: List[DeploymentOutcome] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def fail_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.success)

    @property
    def ok(self) -> bool:
        return self.fail_count == 0
