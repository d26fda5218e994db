# HexMeet, copyright the HexMeet contributors
#
# This file is part of HexMeet.
#
# HexMeet is free software: you can redistribute it and/or modify it under the
# terms of the GNU Affero General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option) any
# later version.
#
# HexMeet is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU Affero General Public License for more
# details.
#
# You should have received a copy of the GNU Affero General Public License
# along with HexMeet.  If not, see <https://www.gnu.org/licenses/>.

import logging
import os

from puzzle import (PuzzleState, get_colors, get_generators, get_score,
        iter_states, write_state)
from scramble import Scramble

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

################################################################################
## Batches #####################################################################
################################################################################

# A bounded list of states. Batches get filled up during the search, then
# sorted once and written out as a run file, and never touched again.
class Batch:
    def __init__(self, batch_size, states=None):
        self.batch_size = batch_size
        self.states = states if states is not None else []

    def __len__(self):
        return len(self.states)

    def is_full(self):
        return len(self.states) >= self.batch_size

    def add_state(self, state):
        self.states.append(state)

    def sort_states(self):
        self.states.sort()

    def save_to_file(self, path):
        with open(path, 'wb') as f:
            for state in self.states:
                write_state(f, state)

    # The batch size of a loaded run is however many states it has
    @classmethod
    def load_from_file(cls, path, paired=False):
        with open(path, 'rb') as f:
            states = list(iter_states(f, paired=paired))
        return cls(len(states), states)

################################################################################
## Search ######################################################################
################################################################################

# All the states reachable from a root state in exactly <depth> moves, stored
# on disk as a list of sorted run files. Depth 0 is the root alone, and the
# 12 one-move states take depth 1. Each run holds at most batch_size
# states, and after every spill the runs are merged pairwise so that every
# state in one run sorts before every state in the next.
#
# The search is pruned with the score heuristic: once a path is longer than
# <score_window> moves, it's abandoned if the current score is worse than the
# score <score_window> moves back. "Worse" means lower when improving (going
# toward solved, i.e. the forward search from a scramble), and higher when
# weakening (going away from solved, the backward search). This throws away
# plenty of perfectly good paths, so a match is never guaranteed.
#
# The engine creates its store directory but never deletes anything in it;
# cleaning up is the caller's job.
class ReachableStates:
    def __init__(self, depth, puzzle, batch_size, store_directory,
            paired=False, score_window=2, improve=True, progress=None):
        self.depth = depth
        self.batch_size = batch_size
        self.store_directory = store_directory
        self.paired = paired
        self.score_window = score_window
        self.improve = improve
        self.progress = progress
        self.batch_files = []
        self.stats = dict(nodes=0, leaves=0, pruned=0, runs=0, merges=0)

        os.makedirs(store_directory, exist_ok=True)

        self.batch = Batch(batch_size)
        self.compute_reachable(puzzle)
        if self.batch.states:
            self.flush_batch()
        self.batch = None

        logger.info('depth %s %s search: %s leaves in %s runs '
                '(%s nodes, %s pruned)', depth,
                'improving' if improve else 'weakening', self.stats['leaves'],
                len(self.batch_files), self.stats['nodes'],
                self.stats['pruned'])

    def __len__(self):
        return self.stats['leaves']

    def should_prune(self, scores):
        if len(scores) <= self.score_window:
            return False
        current = scores[-1]
        horizon = scores[-1 - self.score_window]
        if self.improve:
            return current < horizon
        return current > horizon

    # Depth-first enumeration with an explicit stack. Each frame has the
    # slots, the move path from the root, and the scores of all the
    # ancestors. A frame's own score is only computed when it gets expanded,
    # since leaves are never pruned.
    def compute_reachable(self, puzzle):
        generators = get_generators(self.paired)
        move_index = {move: i for [i, [move, _]] in enumerate(generators)}
        stack = [(puzzle.slots, (), ())]

        while stack:
            [slots, path, scores] = stack.pop()

            # Starting a new top level branch
            if len(path) == 1:
                self.report_progress(move_index[path[0]], len(generators))

            if len(path) == self.depth:
                self.add_leaf(slots, path)
                continue

            self.stats['nodes'] += 1
            scores = scores + (get_score(get_colors(slots)),)
            if self.should_prune(scores):
                self.stats['pruned'] += 1
                continue

            # Push in reverse so the moves get searched in generator order
            for [move, fn] in reversed(generators):
                stack.append((fn(slots), path + (move,), scores))

        if self.depth > 0:
            self.report_progress(len(generators), len(generators))

    def report_progress(self, i, total):
        logger.info('Progress: %.2f%%', 100 * i / total)
        if self.progress:
            self.progress(i / total)

    def add_leaf(self, slots, path):
        scramble = Scramble(path) if path else None
        self.batch.add_state(PuzzleState(slots, scramble=scramble,
                paired=self.paired))
        self.stats['leaves'] += 1
        if self.batch.is_full():
            self.flush_batch()
            self.batch = Batch(self.batch_size)

    def flush_batch(self):
        self.batch.sort_states()
        path = os.path.join(self.store_directory,
                'batch_%s.bin' % len(self.batch_files))
        self.batch.save_to_file(path)
        self.batch_files.append(path)
        self.stats['runs'] += 1
        logger.debug('spilled %s states to %s', len(self.batch), path)
        self.sort_batches()

    # One bubble pass over the runs, starting with the newest pair. Each pair
    # gets merged, then split so the first run keeps its size worth of the
    # smallest states. Since the runs before the new one are already in
    # order, this is enough to move the new run's states into place.
    def sort_batches(self):
        for i in reversed(range(len(self.batch_files) - 1)):
            path_a = self.batch_files[i]
            path_b = self.batch_files[i + 1]
            batch_a = Batch.load_from_file(path_a, paired=self.paired)
            batch_b = Batch.load_from_file(path_b, paired=self.paired)

            merged = batch_a.states + batch_b.states
            merged.sort()
            size_a = batch_a.batch_size

            Batch(size_a, merged[:size_a]).save_to_file(path_a)
            Batch(len(merged) - size_a, merged[size_a:]).save_to_file(path_b)
            self.stats['merges'] += 1
        logger.debug('merged %s run pairs', max(len(self.batch_files) - 1, 0))

    def iter_runs(self):
        for path in self.batch_files:
            yield Batch.load_from_file(path, paired=self.paired)

    def iter_states(self):
        for batch in self.iter_runs():
            yield from batch.states

    # Find a state that's in both this set and <other>, by walking both
    # sorted run lists in parallel. This set is assumed to be the forward
    # search from the scramble, and <other> the backward search from a solved
    # state, so the solution is this state's path followed by the inverse of
    # the other's path. Returns None if there's no common state.
    def overlaps(self, other):
        i_batch = j_batch = 0
        i = j = 0
        batch_a = batch_b = None
        while (i_batch < len(self.batch_files) and
                j_batch < len(other.batch_files)):
            if batch_a is None:
                batch_a = Batch.load_from_file(self.batch_files[i_batch],
                        paired=self.paired)
            if batch_b is None:
                batch_b = Batch.load_from_file(other.batch_files[j_batch],
                        paired=other.paired)

            states_a = batch_a.states
            states_b = batch_b.states
            while i < len(states_a) and j < len(states_b):
                a = states_a[i]
                b = states_b[j]
                if a == b:
                    first = a.get_scramble()
                    second = b.get_scramble().invert()
                    return first.concat(second)
                elif a < b:
                    i += 1
                else:
                    j += 1

            # Move on to the next run on whichever side ran out
            if i >= len(states_a):
                i_batch += 1
                i = 0
                batch_a = None
            if j >= len(states_b):
                j_batch += 1
                j = 0
                batch_b = None
        return None
