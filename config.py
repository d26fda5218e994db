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

# Default settings for the solver driver. Everything here can be overridden on
# the command line.

DB_PATH = 'sqlite:///hexmeet.db'

# Number of random moves in a generated scramble
SCRAMBLE_LENGTH = 50

# Total solution lengths to try. Each depth is split between the forward and
# backward searches, with the forward search taking the extra move.
MIN_DEPTH = 0
MAX_DEPTH = 8

# Max states per run file. Memory use is a few times this.
BATCH_SIZE = 100000

# How many moves back the pruning heuristic compares scores against
SCORE_WINDOW = 2

# Whether every move also turns the opposite face
PAIRED_MOVES = False

# Prefix for the temporary run file directory
STORE_PREFIX = 'hexmeet-'
