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

import collections
import enum

# Faces, directions and moves of the puzzle. The enum values are the
# face/direction codes used in the binary records.
Face = enum.IntEnum('Face', [('TOP_LEFT', 0b001), ('LEFT', 0b010),
        ('BOTTOM_LEFT', 0b100), ('TOP_RIGHT', 0b011), ('RIGHT', 0b101),
        ('BOTTOM_RIGHT', 0b110)])
Direction = enum.IntEnum('Direction', [('COUNTER_CLOCKWISE', 0),
        ('CLOCKWISE', 1)])

FACES = [Face.TOP_LEFT, Face.LEFT, Face.BOTTOM_LEFT, Face.TOP_RIGHT,
        Face.RIGHT, Face.BOTTOM_RIGHT]
DIRECTIONS = [Direction.CLOCKWISE, Direction.COUNTER_CLOCKWISE]

FACE_STR = {Face.TOP_LEFT: 'TL', Face.LEFT: 'L', Face.BOTTOM_LEFT: 'BL',
        Face.TOP_RIGHT: 'TR', Face.RIGHT: 'R', Face.BOTTOM_RIGHT: 'BR'}
DIRECTION_STR = {Direction.CLOCKWISE: 'CW', Direction.COUNTER_CLOCKWISE: 'CCW'}
INV_FACE_STR = {v: k for [k, v] in FACE_STR.items()}
INV_DIRECTION_STR = {v: k for [k, v] in DIRECTION_STR.items()}

OPPOSITE_FACE = {
    Face.TOP_LEFT: Face.BOTTOM_RIGHT,
    Face.LEFT: Face.RIGHT,
    Face.BOTTOM_LEFT: Face.TOP_RIGHT,
    Face.TOP_RIGHT: Face.BOTTOM_LEFT,
    Face.RIGHT: Face.LEFT,
    Face.BOTTOM_RIGHT: Face.TOP_LEFT,
}

class Move(collections.namedtuple('Move', 'face direction')):
    __slots__ = ()

    def invert(self):
        return Move(self.face, Direction(1 - self.direction))

    def opposite(self):
        return Move(OPPOSITE_FACE[self.face], Direction(1 - self.direction))

    def __str__(self):
        return '%s %s' % (FACE_STR[self.face], DIRECTION_STR[self.direction])

ALL_MOVES = [Move(f, d) for f in FACES for d in DIRECTIONS]

def parse_move(move):
    [face, direction] = move.split()
    if face not in INV_FACE_STR or direction not in INV_DIRECTION_STR:
        raise ValueError('unknown move: %r' % move)
    return Move(INV_FACE_STR[face], INV_DIRECTION_STR[direction])

