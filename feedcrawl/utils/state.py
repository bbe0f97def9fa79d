# feedcrawl/utils/state.py
# In-memory novelty tracking across polls of one feed page.
#
# Two memories, selected by the feed's full_compare flag:
#   SimpleMemory  remembers only the newest title seen last poll and stops
#                 scanning at it. Assumes the page lists items newest-first
#                 and only ever prepends; a page that reorders between polls
#                 will be reported as "all new".
#   FullMemory    remembers every title seen last poll; any title not in that
#                 set is new, wherever it sits on the page.
#
# Memories are immutable values. filter_new() returns the next memory instead
# of mutating anything, so the owner decides whether to commit it (only after
# a successful poll). Nothing is persisted; a restart forgets everything.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple

from ..watchers.base import Candidate


class NoveltyMemory:
    """Base for the per-feed memory of what the last successful poll saw."""

    def scan(self, candidates: Sequence[Candidate]) -> Tuple[List[Candidate], "NoveltyMemory"]:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class SimpleMemory(NoveltyMemory):
    last_title: Optional[str] = None

    def scan(self, candidates: Sequence[Candidate]) -> Tuple[List[Candidate], "SimpleMemory"]:
        if not candidates:
            return [], self
        new: List[Candidate] = []
        for c in candidates:
            if c.title == self.last_title:
                break
            new.append(c)
        # Always the page's current head, even when nothing was new.
        return new, SimpleMemory(candidates[0].title)

    def describe(self) -> str:
        return f"last title {self.last_title!r}"


@dataclass(frozen=True)
class FullMemory(NoveltyMemory):
    titles: FrozenSet[str] = field(default_factory=frozenset)

    def scan(self, candidates: Sequence[Candidate]) -> Tuple[List[Candidate], "FullMemory"]:
        if not candidates:
            return [], self
        new = [c for c in candidates if c.title not in self.titles]
        return new, FullMemory(frozenset(c.title for c in candidates))

    def describe(self) -> str:
        return f"{len(self.titles)} remembered title(s)"


def memory_for(full_compare: bool) -> NoveltyMemory:
    """Empty starting memory for the given mode."""
    return FullMemory() if full_compare else SimpleMemory()


@dataclass(frozen=True)
class PollOutcome:
    new_items: List[Candidate]
    memory: NoveltyMemory
    skip_consumed: bool = False
    suppressed: Optional[Candidate] = None

    @property
    def count(self) -> int:
        return len(self.new_items)


def filter_new(candidates: Sequence[Candidate], memory: NoveltyMemory, skip_initial: bool = False) -> PollOutcome:
    """Split this poll's candidates into new items and compute the next memory.

    With ``skip_initial`` the first new item becomes the silent baseline: it is
    dropped from the result and ``skip_consumed`` tells the caller to clear its
    flag. When nothing is new the flag is left armed.
    """
    new, next_memory = memory.scan(candidates)
    if skip_initial and new:
        return PollOutcome(new_items=new[1:], memory=next_memory, skip_consumed=True, suppressed=new[0])
    return PollOutcome(new_items=new, memory=next_memory)
