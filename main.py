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

import argparse
import itertools
import logging
import os
import shutil
import sys
import tempfile
import time

import config
import db
from puzzle import PuzzleState, get_solved_states
from reachable import ReachableStates
from scramble import gen_random_move_scramble, parse_scramble
from util import ms_str, progress_str, split_depth, time_execution

# The solved reference states only differ by swapping same-colored pieces,
# and states are matched by color, so only one per distinct coloring needs a
# backward search.
def get_solved_roots(paired=False):
    return [k for [k, _] in itertools.groupby(sorted(get_solved_states(paired)))]

def print_progress(fraction):
    print('\r%s' % progress_str(fraction), end='', flush=True)
    if fraction >= 1:
        print()

# Search for a solution of each total length from min_depth to max_depth,
# meeting in the middle. Run files go in per-depth directories under
# store_dir, which are deleted once that depth is done. Returns the solution
# scramble (or None), the depth it was found at, and the search counters of
# the last depth tried.
def solve(puzzle, store_dir, min_depth=config.MIN_DEPTH,
        max_depth=config.MAX_DEPTH, batch_size=config.BATCH_SIZE,
        score_window=config.SCORE_WINDOW, paired=config.PAIRED_MOVES,
        progress=None):
    roots = get_solved_roots(paired)
    stats = {}
    for depth in range(min_depth, max_depth + 1):
        [forward_depth, backward_depth] = split_depth(depth)
        depth_dir = os.path.join(store_dir, 'depth_%s' % depth)
        try:
            forward = ReachableStates(forward_depth, puzzle, batch_size,
                    os.path.join(depth_dir, 'forward'), paired=paired,
                    score_window=score_window, improve=True, progress=progress)
            stats = {'forward': forward.stats}
            for [i, root] in enumerate(roots):
                backward = ReachableStates(backward_depth, root, batch_size,
                        os.path.join(depth_dir, 'backward_%s' % i),
                        paired=paired, score_window=score_window,
                        improve=False)
                stats['backward'] = backward.stats

                solution = forward.overlaps(backward)
                if solution is not None:
                    check = PuzzleState(puzzle.slots, paired=paired)
                    assert check.apply_scramble(solution).is_solved(), solution
                    return (solution, depth, stats)
        finally:
            shutil.rmtree(depth_dir, ignore_errors=True)
    return (None, None, stats)

def print_history():
    with db.get_session() as session:
        for run in session.query_all(db.SolveRun):
            result = run.solution if run.found else 'no solution'
            print('%s  %s  depth=%s  %s  [%s]' % (run.created_at, run.scramble,
                    run.depth, ms_str(run.time_ms), result))

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('-s', '--scramble', action='store', help='scramble to '
            'solve, e.g. "TL CW; R CCW;". A random one is used otherwise')
    parser.add_argument('-l', '--scramble-length', action='store', type=int,
            default=config.SCRAMBLE_LENGTH, help='length of random scrambles')
    parser.add_argument('--min-depth', action='store', type=int,
            default=config.MIN_DEPTH)
    parser.add_argument('--max-depth', action='store', type=int,
            default=config.MAX_DEPTH)
    parser.add_argument('-b', '--batch-size', action='store', type=int,
            default=config.BATCH_SIZE, help='max states per run file')
    parser.add_argument('-w', '--score-window', action='store', type=int,
            default=config.SCORE_WINDOW, help='moves back to compare scores '
            'against when pruning')
    parser.add_argument('-p', '--paired', action='store_true',
            default=config.PAIRED_MOVES, help='every move also turns the '
            'opposite face')
    parser.add_argument('-d', '--store-dir', action='store', help='directory '
            'for run files. A temporary directory is used otherwise')
    parser.add_argument('--db', action='store', default=config.DB_PATH,
            help='database URL for the solve history')
    parser.add_argument('--no-db', action='store_true', help="don't record "
            'this run in the solve history')
    parser.add_argument('--history', action='store_true', help='print the '
            'solve history and exit')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
            format='%(asctime)s %(name)s: %(message)s')

    if args.history:
        db.init_db(args.db)
        print_history()
        return

    if args.scramble:
        scramble = parse_scramble(args.scramble)
    else:
        scramble = gen_random_move_scramble(args.scramble_length)
    puzzle = PuzzleState.scrambled(scramble, paired=args.paired)
    print('Scramble: %s' % scramble)
    print('Score: %s' % puzzle.calculate_score())

    # Only clean up the store directory if we made it
    if args.store_dir:
        store_dir = args.store_dir
        os.makedirs(store_dir, exist_ok=True)
    else:
        store_dir = tempfile.mkdtemp(prefix=config.STORE_PREFIX)

    start = time.time()
    try:
        with time_execution('Search'):
            [solution, depth, stats] = solve(puzzle, store_dir,
                    min_depth=args.min_depth, max_depth=args.max_depth,
                    batch_size=args.batch_size, score_window=args.score_window,
                    paired=args.paired, progress=print_progress)
    finally:
        if not args.store_dir:
            shutil.rmtree(store_dir, ignore_errors=True)
    time_ms = int((time.time() - start) * 1000)

    if solution is None:
        print('No solution found up to depth %s' % args.max_depth)
    else:
        print('Solution (%s moves): %s' % (len(solution), solution))

    if not args.no_db:
        db.init_db(args.db)
        [forward_depth, backward_depth] = (split_depth(depth)
                if depth is not None else (None, None))
        with db.get_session() as session:
            session.insert(db.SolveRun, scramble=str(scramble),
                    solution=str(solution) if solution is not None else None,
                    found=solution is not None, depth=depth,
                    forward_depth=forward_depth, backward_depth=backward_depth,
                    batch_size=args.batch_size, score_window=args.score_window,
                    paired=args.paired, time_ms=time_ms, stats=stats)

    if solution is None:
        sys.exit(1)

if __name__ == '__main__':
    main()
