"""
Data models for the verification layer.

Defines the target references, comparator modes, poll policy, observation
and result models shared across all uiverify components.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


# ------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------


class ComparatorMode(str, Enum):
    EXACT = "exact"
    CONTAINS = "contains"
    REGEX = "regex"
    MEMBER = "member"
    ATTRIBUTE_EQUALS = "attribute_equals"
    ATTRIBUTE_EXISTS = "attribute_exists"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    SUBSET = "subset"


class PollState(str, Enum):
    SATISFIED = "satisfied"
    TIMED_OUT = "timed_out"


class TargetScope(str, Enum):
    ELEMENT = "element"
    PAGE = "page"


# ------------------------------------------------------------------
# Target references (read-only, never mutated by the assertion layer)
# ------------------------------------------------------------------


@dataclass(frozen=True)
class SelectorRef:
    """Lazy reference: re-resolved against the page on every observation."""

    selector: str
    parent: Optional["TargetRef"] = None


@dataclass(frozen=True)
class HandleRef:
    """Already-resolved driver handle (Locator, Page or response)."""

    handle: Any


TargetRef = Union[SelectorRef, HandleRef]


# ------------------------------------------------------------------
# Config
# ------------------------------------------------------------------


class VerifierConfig(BaseModel):
    default_timeout_ms: int = 30_000
    poll_interval_ms: int = Field(default=100, gt=0)
    # Per-read driver timeout once the element is known to exist
    read_timeout_ms: int = Field(default=1_000, gt=0)
    screenshot_dir: str = "screenshots"
    headless: bool = True
    verbose: bool = False


class PollPolicy(BaseModel):
    # May be <= 0: the engine still performs exactly one evaluation.
    timeout_ms: int = 30_000
    poll_interval_ms: int = Field(default=100, gt=0)
    default_timeout_ms: int = 30_000

    @classmethod
    def from_config(
        cls, config: VerifierConfig, timeout_ms: Optional[int] = None
    ) -> PollPolicy:
        return cls(
            timeout_ms=config.default_timeout_ms if timeout_ms is None else timeout_ms,
            poll_interval_ms=config.poll_interval_ms,
            default_timeout_ms=config.default_timeout_ms,
        )


# ------------------------------------------------------------------
# Observation / outcome (produced during polling)
# ------------------------------------------------------------------


class Observation(BaseModel):
    satisfied: bool = False
    found: bool = True
    observed_value: Any = None


class PollOutcome(BaseModel):
    state: PollState = PollState.TIMED_OUT
    observation: Observation = Field(default_factory=Observation)
    attempts: int = 0
    elapsed_ms: float = 0.0

    @property
    def satisfied(self) -> bool:
        return self.state == PollState.SATISFIED


# ------------------------------------------------------------------
# Result model (created per assertion call, never persisted)
# ------------------------------------------------------------------


class AssertionResult(BaseModel):
    passed: bool = True
    message: str = ""
    observed_value: Any = None
    expected_value: Any = None
    condition: str = ""
    attempts: int = 0
    elapsed_ms: float = 0.0
    diff_artifact: Any = None


class ScreenshotComparison(BaseModel):
    matches: bool = False
    diff_artifact: Any = None
