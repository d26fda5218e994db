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

import functools
import itertools
import struct

from moves import ALL_MOVES, DIRECTION_STR, Direction, FACE_STR, Face, Move
from scramble import Scramble

################################################################################
## Puzzle logic ################################################################
################################################################################

# Six positions per face, listed in cyclic order. A clockwise turn pulls every
# position's piece from the next position in the cycle.
FACE_CYCLES = {
    Face.TOP_LEFT: (5, 23, 22, 20, 21, 4),
    Face.LEFT: (20, 19, 18, 16, 17, 21),
    Face.BOTTOM_LEFT: (17, 16, 15, 14, 12, 13),
    Face.TOP_RIGHT: (0, 5, 4, 3, 2, 1),
    Face.RIGHT: (2, 3, 9, 8, 7, 6),
    Face.BOTTOM_RIGHT: (9, 13, 12, 11, 10, 8),
}

PIECE_COUNT = 24

[WHITE, RED, BLUE, ORANGE, GREEN, YELLOW] = range(6)
COLOR_STR = ['white', 'red', 'blue', 'orange', 'green', 'yellow']

# Pieces of each color, which are also the positions they occupy when solved
COLOR_GROUPS = (
    (0, 4, 5, 23),
    (1, 2, 3, 6),
    (7, 8, 9, 10),
    (11, 12, 13, 14),
    (15, 16, 17, 18),
    (19, 20, 21, 22),
)

COLOR_TABLE = [None] * PIECE_COUNT
for [color, group] in enumerate(COLOR_GROUPS):
    for piece in group:
        COLOR_TABLE[piece] = color
COLOR_TABLE = tuple(COLOR_TABLE)
assert None not in COLOR_TABLE

# Physical neighbours of each position. This is only used for scoring, and
# isn't symmetric (e.g. 19 lists 21, but 21 doesn't list 19).
NEIGHBOURS = (
    (1, 5), (0, 2), (1, 3, 6), (2, 4), (3, 5, 21), (0, 4, 23),
    (2, 7), (6, 8), (7, 9, 10), (3, 8, 13), (8, 11), (10, 12),
    (11, 13, 14), (9, 12, 17), (12, 15), (14, 16), (15, 17, 18), (13, 16, 21),
    (17, 19), (18, 21), (19, 21, 22), (4, 17, 20), (21, 23), (5, 22),
)
assert len(NEIGHBOURS) == PIECE_COUNT

def get_color(piece):
    assert 0 <= piece < PIECE_COUNT, piece
    return COLOR_TABLE[piece]

def get_neighbours(position):
    return NEIGHBOURS[position]

# Every (position, neighbour) pair that the score checks
ADJACENT_PAIRS = tuple((i, n) for i in range(PIECE_COUNT)
        for n in get_neighbours(i))

def get_colors(slots):
    return tuple(COLOR_TABLE[p] for p in slots)

def get_score(colors):
    return sum(colors[i] == colors[n] for [i, n] in ADJACENT_PAIRS)

SOLVED_SLOTS = tuple(range(PIECE_COUNT))
SOLVED_COLORS = get_colors(SOLVED_SLOTS)
SOLVED_SCORE = get_score(SOLVED_COLORS)

# Metaprogramming. Each generator is a permutation of positions, which gets
# compiled into a function that builds the new slots tuple in one go.
# perm[i] is the position whose piece ends up in position i.
def get_turn_perm(move):
    cycle = FACE_CYCLES[move.face]
    step = 1 if move.direction == Direction.CLOCKWISE else -1
    perm = list(range(PIECE_COUNT))
    for [i, pos] in enumerate(cycle):
        perm[pos] = cycle[(i + step) % len(cycle)]
    return perm

# Permutation for doing <first> and then <second>
def compose_perms(first, second):
    return [first[i] for i in second]

def build_transform_fn(name, perm):
    code = '''
def {name}(s):
    return ({s},)'''.format(name=name, s=', '.join('s[%s]' % i for i in perm))
    ctx = {}
    exec(code, ctx)
    return ctx[name]

# Generator sets, indexed by the paired flag. In the paired variant, every
# move also turns the opposite face the other way (first).
MOVE_PERMS = [{}, {}]
MOVE_FN = [{}, {}]
def gen_moves():
    for move in ALL_MOVES:
        name = 'turn_%s_%s' % (FACE_STR[move.face], DIRECTION_STR[move.direction])
        perm = get_turn_perm(move)
        MOVE_PERMS[False][move] = perm
        MOVE_FN[False][move] = build_transform_fn(name, perm)

    for move in ALL_MOVES:
        name = 'paired_%s_%s' % (FACE_STR[move.face], DIRECTION_STR[move.direction])
        perm = compose_perms(MOVE_PERMS[False][move.opposite()],
                MOVE_PERMS[False][move])
        MOVE_PERMS[True][move] = perm
        MOVE_FN[True][move] = build_transform_fn(name, perm)

gen_moves()

def get_generators(paired):
    return [(move, MOVE_FN[paired][move]) for move in ALL_MOVES]

# PuzzleStates compare by colors only: two states with same-colored pieces
# swapped are the same for matching purposes.
@functools.total_ordering
class PuzzleState:
    def __init__(self, slots=SOLVED_SLOTS, scramble=None, paired=False):
        self.slots = tuple(slots)
        self.scramble = scramble
        self.paired = paired
        self.deduce_colors()

    def deduce_colors(self):
        self.colors = get_colors(self.slots)

    def calculate_score(self):
        return get_score(self.colors)

    def apply_move(self, move):
        self.slots = MOVE_FN[self.paired][move](self.slots)
        self.deduce_colors()
        return self

    def apply_scramble(self, scramble):
        fns = MOVE_FN[self.paired]
        slots = self.slots
        for move in scramble:
            slots = fns[move](slots)
        self.slots = slots
        self.deduce_colors()
        if self.scramble is None:
            self.scramble = scramble
        else:
            self.scramble = self.scramble.concat(scramble)
        return self

    def get_scramble(self):
        if self.scramble is None:
            return Scramble()
        return self.scramble

    def is_solved(self):
        return self.colors == SOLVED_COLORS

    # Slots are an immutable tuple, and scrambles aren't mutated in place, so
    # a shallow copy is enough
    def copy(self):
        return PuzzleState(self.slots, self.scramble, self.paired)

    def __eq__(self, other):
        if not isinstance(other, PuzzleState):
            return NotImplemented
        return self.colors == other.colors

    def __lt__(self, other):
        if not isinstance(other, PuzzleState):
            return NotImplemented
        return self.colors < other.colors

    def __hash__(self):
        return hash(self.colors)

    def __repr__(self):
        return 'PuzzleState(slots=%s, scramble=%r)' % (list(self.slots),
                str(self.scramble) if self.scramble is not None else None)

    @classmethod
    def solved(cls, paired=False):
        return cls(paired=paired)

    @classmethod
    def scrambled(cls, scramble, paired=False):
        return cls(paired=paired).apply_scramble(scramble)

# Solved reference states: every color group is relabeled by one of the four
# cyclic rotations of its pieces, for 4^6 = 4096 states. These all have the
# same colors, but different slots.
def get_group_rotations(group):
    return [group[r:] + group[:r] for r in range(len(group))]

def get_solved_states(paired=False):
    results = []
    rotations = [get_group_rotations(group) for group in COLOR_GROUPS]
    for combo in itertools.product(*rotations):
        slots = list(SOLVED_SLOTS)
        for [group, rotated] in zip(COLOR_GROUPS, combo):
            for [pos, piece] in zip(group, rotated):
                slots[pos] = piece
        results.append(PuzzleState(slots, paired=paired))
    return results

################################################################################
## Binary records ##############################################################
################################################################################

# Each state is stored as:
#   [8b move count n] + [8b face code, 8b direction code] * n +
#   [8b piece id] * 24 + '\n'
# There's no header or count, the records just run until the end of the file.
RECORD_END = b'\n'

FACE_CODES = {f.value: f for f in Face}
DIRECTION_CODES = {d.value: d for d in Direction}

def encode_state(state):
    moves = list(state.get_scramble())
    data = struct.pack('B', len(moves))
    for move in moves:
        data += struct.pack('BB', move.face, move.direction)
    data += bytes(state.slots)
    return data + RECORD_END

def write_state(f, state):
    f.write(encode_state(state))

# Read the next state from a binary stream. Returns None at the end of the
# data, which includes short reads and unknown move codes.
def read_state(f, paired=False):
    header = f.read(1)
    if len(header) < 1:
        return None
    n = header[0]

    data = f.read(2 * n)
    if len(data) < 2 * n:
        return None
    moves = []
    for [face, direction] in struct.iter_unpack('BB', data):
        if face not in FACE_CODES or direction not in DIRECTION_CODES:
            return None
        moves.append(Move(FACE_CODES[face], DIRECTION_CODES[direction]))

    slots = f.read(PIECE_COUNT)
    if len(slots) < PIECE_COUNT:
        return None
    # The terminator is optional for the last record
    f.read(len(RECORD_END))

    scramble = Scramble(moves) if moves else None
    return PuzzleState(tuple(slots), scramble=scramble, paired=paired)

def iter_states(f, paired=False):
    while True:
        state = read_state(f, paired=paired)
        if state is None:
            return
        yield state
