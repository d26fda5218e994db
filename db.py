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
import threading

import sqlalchemy as sa
from sqlalchemy import (text, Column, Index, Boolean, DateTime, Integer, Text)
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import Session as DBSession, declarative_base, sessionmaker

SESSION_MAKER = None

# Set up default naming convention for indices/constraints/etc. so migrations
# can rename them later
SQL_NAMING_CONVENTION = {
    'ix': 'ix_%(column_0_label)s',
    'uq': 'uq_%(table_name)s_%(column_0_name)s',
    'ck': 'ck_%(table_name)s_%(constraint_name)s',
    'fk': 'fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s',
    'pk': 'pk_%(table_name)s',
}
metadata = sa.MetaData(naming_convention=SQL_NAMING_CONVENTION)

# No default constructor, NiceBase checks the column names itself
Base = declarative_base(metadata=metadata, constructor=None)

# Base class of DB tables to add id/created_at/updated_at columns everywhere
now = text("datetime('now', 'localtime')")
class NiceBase:
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=now)
    updated_at = Column(DateTime, default=now, onupdate=now)

    def __init__(self, **kwargs):
        for [k, v] in kwargs.items():
            assert k in self.__table__.columns, k
            setattr(self, k, v)

# One run of the solver on a scramble. Solution is None if no depth in the
# searched range found a match.
class SolveRun(Base, NiceBase):
    __tablename__ = 'solve_runs'
    scramble = Column(Text)
    solution = Column(Text)
    found = Column(Boolean, default=False)
    depth = Column(Integer)
    forward_depth = Column(Integer)
    backward_depth = Column(Integer)
    batch_size = Column(Integer)
    score_window = Column(Integer)
    paired = Column(Boolean, default=False)
    time_ms = Column(Integer)
    # Search counters for the last depth tried
    stats = Column(JSON)

Index('solve_run_created_idx', SolveRun.created_at)

# Subclass of DBSession with some convenience functions
class NiceSession(DBSession):
    def query_first(self, table, *args, **kwargs):
        return self.query(table).filter_by(*args, **kwargs).first()

    def query_all(self, table, *args, **kwargs):
        return self.query(table).filter_by(*args, **kwargs).all()

    # Insert a new row in this table with the given column values
    def insert(self, table, **kwargs):
        row = table(**kwargs)
        self.add(row)
        # Flushing gets the row an ID from the db
        self.flush()
        return row

THREAD_LOCALS = threading.local()

@contextlib.contextmanager
def get_session():
    if getattr(THREAD_LOCALS, 'session', None):
        yield THREAD_LOCALS.session
    else:
        THREAD_LOCALS.session = session = SESSION_MAKER()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            THREAD_LOCALS.session = None

def init_db(db_url):
    global SESSION_MAKER
    engine = sa.create_engine(db_url)
    SESSION_MAKER = sessionmaker(autocommit=False, autoflush=False, bind=engine,
            class_=NiceSession)
    Base.metadata.create_all(bind=engine)
