"""
Tagged stage outcomes.

Stages raise; the orchestrator wraps each stage call into an ``Ok`` or
``Err`` so the fail-open decision is made in one visible place.
"""
from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    reason: str
    error: Exception

    @property
    def is_ok(self) -> bool:
        return False


Outcome = Union[Ok[T], Err]


async def capture(stage: str, awaitable: Awaitable[T]) -> "Outcome[T]":
    """Await a stage call and tag its result."""
    try:
        return Ok(await awaitable)
    except Exception as e:
        return Err(reason=f"{stage} failed: {e}", error=e)
