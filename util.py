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

import contextlib
import time

@contextlib.contextmanager
def time_execution(label):
    start = time.time()
    yield
    print('%s: %.3fs' % (label, time.time() - start))

def ms_str(ms, prec=3):
    if ms is None:
        return '-'
    [minutes, ms] = divmod(ms, 60000)
    [seconds, ms] = divmod(ms, 1000)
    if minutes:
        pre = '%d:%02d' % (minutes, seconds)
    else:
        pre = '%d' % seconds
    # Set up a format string since there's no .*f formatting
    fmt = '.%%0%sd' % prec
    return pre + fmt % (ms // (10 ** (3 - prec)))

# Split a total solution length between the forward and backward searches
def split_depth(depth):
    forward = (depth + 1) // 2
    return (forward, depth - forward)

def progress_str(fraction, width=24):
    filled = int(fraction * width)
    return '[%s%s] %5.1f%%' % ('#' * filled, '.' * (width - filled),
            100 * fraction)
