import os
import random

import pytest

from moves import ALL_MOVES, Direction, Face, Move
from puzzle import PuzzleState, get_solved_states
from reachable import Batch, ReachableStates
from scramble import Scramble, gen_random_move_scramble

def random_states(n):
    return [PuzzleState.scrambled(gen_random_move_scramble(random.randrange(12)))
            for i in range(n)]

def is_sorted(states):
    return all(not b < a for [a, b] in zip(states, states[1:]))

def test_batch_capacity():
    batch = Batch(3)
    for i in range(2):
        batch.add_state(PuzzleState())
        assert not batch.is_full()
    batch.add_state(PuzzleState())
    assert batch.is_full()
    assert len(batch) == 3

def test_batch_round_trip(tmp_path):
    random.seed(7)
    batch = Batch(100)
    for state in random_states(100):
        batch.add_state(state)
    batch.sort_states()
    assert is_sorted(batch.states)

    path = str(tmp_path / 'run.bin')
    batch.save_to_file(path)
    loaded = Batch.load_from_file(path)
    assert loaded.batch_size == 100
    assert len(loaded.states) == 100
    for [a, b] in zip(batch.states, loaded.states):
        assert a.slots == b.slots
        assert a.get_scramble() == b.get_scramble()

def test_batch_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        Batch.load_from_file(str(tmp_path / 'missing.bin'))

def test_depth_zero_is_root(tmp_path):
    root = PuzzleState.scrambled(gen_random_move_scramble(10))
    engine = ReachableStates(0, root, 10, str(tmp_path / 's'))
    states = list(engine.iter_states())
    assert len(states) == 1
    assert states[0].slots == root.slots
    assert states[0].get_scramble() == Scramble()

def test_one_ply_gives_twelve_states(tmp_path):
    root = PuzzleState.scrambled(gen_random_move_scramble(10))
    engine = ReachableStates(1, root, 100, str(tmp_path / 's'),
            score_window=1)
    states = list(engine.iter_states())
    assert len(engine) == 12
    assert len(states) == 12
    expected = {root.copy().apply_move(m).slots for m in ALL_MOVES}
    assert {s.slots for s in states} == expected
    for state in states:
        [move] = list(state.get_scramble())
        assert root.copy().apply_move(move).slots == state.slots

def test_no_pruning_with_large_window(tmp_path):
    engine = ReachableStates(3, PuzzleState(), 200, str(tmp_path / 's'),
            score_window=5)
    assert len(engine) == 12 ** 3
    assert engine.stats['pruned'] == 0
    assert engine.stats['runs'] == len(engine.batch_files) == 9

def test_store_directory_created(tmp_path):
    store = tmp_path / 'a' / 'b'
    ReachableStates(1, PuzzleState(), 5, str(store))
    assert sorted(os.listdir(str(store))) == ['batch_%s.bin' % i
            for i in range(3)]

def test_runs_are_globally_sorted(tmp_path):
    root = PuzzleState.scrambled(gen_random_move_scramble(20))
    engine = ReachableStates(3, root, 100, str(tmp_path / 's'),
            score_window=5)
    runs = list(engine.iter_runs())
    assert len(runs) == 18
    for run in runs[:-1]:
        assert len(run.states) == 100
    assert len(runs[-1].states) == 12 ** 3 - 1700
    for run in runs:
        assert is_sorted(run.states)
    for [a, b] in zip(runs, runs[1:]):
        assert not b.states[0] < a.states[-1]
    assert is_sorted(list(engine.iter_states()))

def test_leaf_paths_reach_leaves(tmp_path):
    root = PuzzleState.scrambled(gen_random_move_scramble(20))
    engine = ReachableStates(2, root, 50, str(tmp_path / 's'), score_window=2)
    for state in engine.iter_states():
        assert len(state.get_scramble()) == 2
        replay = PuzzleState(root.slots).apply_scramble(state.get_scramble())
        assert replay.slots == state.slots

@pytest.mark.parametrize('improve', [True, False])
def test_pruning(tmp_path, improve):
    root = PuzzleState.scrambled(gen_random_move_scramble(20))
    engine = ReachableStates(3, root, 500, str(tmp_path / 's'),
            score_window=1, improve=improve)
    assert len(engine) < 12 ** 3
    assert engine.stats['pruned'] > 0
    # Every surviving leaf's parent passed the window check
    for state in engine.iter_states():
        path = list(state.get_scramble())
        scores = [PuzzleState(root.slots).calculate_score()]
        for k in range(1, len(path)):
            s = PuzzleState(root.slots).apply_scramble(Scramble(path[:k]))
            scores.append(s.calculate_score())
        for k in range(1, len(scores)):
            if improve:
                assert scores[k] >= scores[k - 1]
            else:
                assert scores[k] <= scores[k - 1]

def test_zero_window_never_prunes(tmp_path):
    # The current score is compared against itself
    for improve in [True, False]:
        engine = ReachableStates(2, PuzzleState(), 500,
                str(tmp_path / str(improve)), score_window=0, improve=improve)
        assert len(engine) == 144
        assert engine.stats['pruned'] == 0

def test_progress_reported(tmp_path):
    reports = []
    ReachableStates(2, PuzzleState(), 500, str(tmp_path / 's'),
            score_window=5, progress=reports.append)
    assert reports == [i / 12 for i in range(13)]

def test_overlaps_single_move(tmp_path):
    tl_cw = Move(Face.TOP_LEFT, Direction.CLOCKWISE)
    solved = PuzzleState()
    scrambled = PuzzleState.scrambled(Scramble([tl_cw]))
    forward = ReachableStates(1, scrambled, 5, str(tmp_path / 'f'),
            score_window=5, improve=True)
    backward = ReachableStates(0, solved, 5, str(tmp_path / 'b'),
            score_window=5, improve=False)
    solution = forward.overlaps(backward)
    assert solution == Scramble([Move(Face.TOP_LEFT,
            Direction.COUNTER_CLOCKWISE)])

def test_overlaps_two_moves(tmp_path):
    random.seed(99)
    for i in range(5):
        m1 = random.choice(ALL_MOVES)
        m2 = random.choice(ALL_MOVES)
        root = PuzzleState.scrambled(gen_random_move_scramble(15))
        target = PuzzleState(root.slots).apply_scramble(Scramble([m1, m2]))
        forward = ReachableStates(1, root, 5, str(tmp_path / ('f%s' % i)),
                score_window=5, improve=True)
        backward = ReachableStates(1, target, 5, str(tmp_path / ('b%s' % i)),
                score_window=5, improve=False)
        solution = forward.overlaps(backward)
        assert solution is not None
        assert len(solution) == 2
        result = PuzzleState(root.slots).apply_scramble(solution)
        assert result.colors == target.colors

def test_overlaps_no_match(tmp_path):
    root = PuzzleState.scrambled(gen_random_move_scramble(30))
    forward = ReachableStates(0, root, 5, str(tmp_path / 'f'))
    backward = ReachableStates(0, PuzzleState(), 5, str(tmp_path / 'b'),
            improve=False)
    assert not root.is_solved()
    assert forward.overlaps(backward) is None

def test_overlaps_solved_reference(tmp_path):
    scramble = Scramble([ALL_MOVES[2], ALL_MOVES[7], ALL_MOVES[11]])
    scrambled = PuzzleState.scrambled(scramble)
    # Any solved reference works, since they all have the same colors
    solved = get_solved_states()[1234]
    forward = ReachableStates(2, scrambled, 50, str(tmp_path / 'f'),
            score_window=5)
    backward = ReachableStates(1, solved, 50, str(tmp_path / 'b'),
            score_window=5, improve=False)
    solution = forward.overlaps(backward)
    assert len(solution) == 3
    assert PuzzleState(scrambled.slots).apply_scramble(solution).is_solved()

def test_paired_search(tmp_path):
    move = Move(Face.RIGHT, Direction.CLOCKWISE)
    scrambled = PuzzleState.scrambled(Scramble([move]), paired=True)
    forward = ReachableStates(1, scrambled, 5, str(tmp_path / 'f'),
            paired=True, score_window=5)
    backward = ReachableStates(0, PuzzleState(paired=True), 5,
            str(tmp_path / 'b'), paired=True, improve=False)
    solution = forward.overlaps(backward)
    assert len(solution) == 1
    check = PuzzleState(scrambled.slots, paired=True)
    assert check.apply_scramble(solution).is_solved()
    for state in forward.iter_states():
        assert state.paired
