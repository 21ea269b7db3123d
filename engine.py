"""
Constraint propagation over group orientations.

The engine never copies state: every orientation it sets is recorded in a
change log, so a caller can undo a tentative line of reasoning with revert()
or replay it with apply().
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Set
import logging

from binder import Binding, EquivalenceBinder, Group, Orientation
from board import EdgeState
from topology import DIRECTIONS, Direction

logger = logging.getLogger(__name__)


class Verdict(Enum):
    """Result of examining one cell against its shape."""
    INVALID = 'invalid'            # Too many live or dead stubs
    DETERMINED = 'determined'      # Every stub known and matching
    FORCE_ABSENT = 'force_absent'  # Live count reached: unknown stubs must be dead
    FORCE_LIVE = 'force_live'      # Dead count reached: unknown stubs must be live
    AMBIGUOUS = 'ambiguous'


class Change(NamedTuple):
    group: int
    orientation: Orientation


@dataclass
class AssumeResult:
    valid: bool
    changes: List[Change]
    horizon: Set[int]


@dataclass
class SweepResult:
    valid: bool
    changes: List[Change] = field(default_factory=list)
    horizon: Set[int] = field(default_factory=set)


class ConstraintEngine:
    """
    Local checks, cascading deduction and global tree validation over the
    groups produced by an EquivalenceBinder.
    """

    def __init__(self, binder: EquivalenceBinder):
        self.torus = binder.torus
        self.shapes = binder.board.shapes
        self.bindings: List[List[Binding]] = binder.bindings
        self.groups: List[Group] = binder.groups
        self.ranking: List[int] = binder.ranking

    def edge_state(self, cell: int, direction: Direction) -> EdgeState:
        group, sign = self.bindings[cell][direction]
        return EdgeState.from_sign(self.groups[group].orientation.sign * sign)

    def reset(self) -> None:
        for group in self.groups:
            group.orientation = Orientation.UNSET

    def examine(self, cell: int) -> Verdict:
        positives = negatives = 0
        for d in DIRECTIONS:
            state = self.edge_state(cell, d)
            if state is EdgeState.PRESENT:
                positives += 1
            elif state is EdgeState.ABSENT:
                negatives += 1

        need = self.shapes[cell].wires
        if positives > need or negatives > 4 - need:
            return Verdict.INVALID

        if positives == need and negatives == 4 - need:
            return Verdict.DETERMINED
        if positives == need:
            return Verdict.FORCE_ABSENT
        if negatives == 4 - need:
            return Verdict.FORCE_LIVE
        return Verdict.AMBIGUOUS

    def explore(self, frontier: Set[int], changes: List[Change]) -> bool:
        """
        Propagate forced stubs from the frontier until nothing more follows.

        Cells left ambiguous stay in (or join) the frontier; settled cells
        leave it. Every orientation set here is appended to `changes`.
        Returns False as soon as a cell becomes impossible.
        """
        pending = list(frontier)

        while pending:
            cell = pending.pop()
            verdict = self.examine(cell)

            if verdict is Verdict.INVALID:
                return False
            if verdict is Verdict.AMBIGUOUS:
                frontier.add(cell)
                continue

            frontier.discard(cell)
            if verdict is Verdict.DETERMINED:
                continue

            target = 1 if verdict is Verdict.FORCE_LIVE else -1
            for d in DIRECTIONS:
                binding = self.bindings[cell][d]
                group = self.groups[binding.group]
                if group.orientation is Orientation.UNSET:
                    group.orientation = Orientation.from_sign(target * binding.sign)
                    changes.append(Change(binding.group, group.orientation))
                    pending.extend(group.outer_cells)

        return True

    def validate(self, changes: Iterable[Change]) -> bool:
        """
        Check that the live stubs around every changed group still allow a
        single spanning tree: no cycles, and no closed-off subtree smaller
        than the whole grid.
        """
        verified: Set[int] = set()

        for change in changes:
            group = self.groups[change.group]
            for cell in (*group.inner_cells, *group.outer_cells):
                if cell not in verified and not self._walk_tree(cell, verified):
                    return False
        return True

    def _walk_tree(self, start: int, verified: Set[int]) -> bool:
        visited = {start}
        stack: List[tuple] = [(start, None)]
        has_exit = False

        while stack:
            cell, entry = stack.pop()
            for d in DIRECTIONS:
                if d is entry:
                    continue
                state = self.edge_state(cell, d)
                if state is EdgeState.UNKNOWN:
                    has_exit = True
                elif state is EdgeState.PRESENT:
                    neighbor = self.torus.neighbor(cell, d)
                    if neighbor in visited:
                        return False
                    visited.add(neighbor)
                    stack.append((neighbor, d.opposite))

        if not has_exit and len(visited) != self.torus.size:
            return False

        verified.update(visited)
        return True

    def assume(self, group: int, orientation: Orientation) -> AssumeResult:
        """Tentatively orient a group, propagate, and validate the outcome."""
        self.groups[group].orientation = orientation
        changes = [Change(group, orientation)]
        horizon = set(self.groups[group].outer_cells)

        valid = self.explore(horizon, changes) and self.validate(changes)
        return AssumeResult(valid, changes, horizon)

    def revert(self, changes: Iterable[Change]) -> None:
        for change in changes:
            self.groups[change.group].orientation = Orientation.UNSET

    def apply(self, changes: Iterable[Change]) -> None:
        for change in changes:
            self.groups[change.group].orientation = change.orientation

    def sweep(self, groups: Optional[Iterable[int]] = None) -> SweepResult:
        """
        Commit every group orientation that is forced because the opposite
        choice leads straight to a contradiction, repeating over the groups
        around the new horizon until nothing changes.
        """
        result = SweepResult(valid=True)
        candidates = list(groups) if groups is not None else self.all_unset_groups()

        while candidates:
            progressed = False

            for group in candidates:
                if self.groups[group].orientation is not Orientation.UNSET:
                    continue

                live = self.assume(group, Orientation.LIVE)
                self.revert(live.changes)
                dead = self.assume(group, Orientation.DEAD)
                self.revert(dead.changes)

                if not live.valid and not dead.valid:
                    result.valid = False
                    return result
                if live.valid and dead.valid:
                    continue

                forced = live if live.valid else dead
                self.apply(forced.changes)
                result.changes.extend(forced.changes)
                result.horizon |= forced.horizon
                progressed = True

            if not progressed:
                break
            candidates = self.unset_groups(result.horizon)

        return result

    def all_unset_groups(self) -> List[int]:
        return [g for g in self.ranking if self.groups[g].orientation is Orientation.UNSET]

    def unset_groups(self, horizon: Iterable[int]) -> List[int]:
        """Unset groups touching any horizon cell, in ranked order."""
        touching = set()
        for cell in horizon:
            for binding in self.bindings[cell]:
                if self.groups[binding.group].orientation is Orientation.UNSET:
                    touching.add(binding.group)
        return [g for g in self.ranking if g in touching]

    def next_unset_group(self) -> Optional[int]:
        for g in self.ranking:
            if self.groups[g].orientation is Orientation.UNSET:
                return g
        return None
