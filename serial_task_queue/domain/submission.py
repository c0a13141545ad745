"""
Submission value objects shared by the queue and its front ends.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceInvocation(Generic[T]):
    """Argument passed to a task function once its turn arrives."""

    item: Optional[T] = None


@dataclass(frozen=True)
class Submission:
    """
    One call to enqueue, captured at submission time.

    The item is held only in its encoded form, so mutating the original
    object afterwards has no effect on what the task receives.
    """

    task: Callable[[ServiceInvocation], Any]
    encoded_item: Optional[str] = None

    @property
    def has_item(self) -> bool:
        return self.encoded_item is not None
