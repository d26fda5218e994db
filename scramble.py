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
import random

from moves import ALL_MOVES, parse_move

# An ordered list of moves. Scrambles are never modified after creation,
# inverting or concatenating makes a new one.
@functools.total_ordering
class Scramble:
    def __init__(self, moves=()):
        self.moves = tuple(moves)

    def invert(self):
        return Scramble(move.invert() for move in reversed(self.moves))

    def concat(self, other):
        return Scramble(self.moves + tuple(other))

    def __len__(self):
        return len(self.moves)

    def __iter__(self):
        return iter(self.moves)

    def __getitem__(self, i):
        return self.moves[i]

    def __eq__(self, other):
        if not isinstance(other, Scramble):
            return NotImplemented
        return self.moves == other.moves

    def __lt__(self, other):
        if not isinstance(other, Scramble):
            return NotImplemented
        return self.moves < other.moves

    def __hash__(self):
        return hash(self.moves)

    def __str__(self):
        return ' '.join('%s;' % (move,) for move in self.moves)

    def __repr__(self):
        return 'Scramble(%r)' % str(self)

# Parse the str() form, e.g. "TL CW; R CCW;". The trailing semicolon is
# optional.
def parse_scramble(text):
    moves = [m.strip() for m in text.split(';')]
    return Scramble(parse_move(m) for m in moves if m)

def gen_random_move_scramble(length):
    return Scramble(random.choice(ALL_MOVES) for i in range(length))
