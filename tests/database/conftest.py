import pytest

from flavordb import Database, Options
from flavordb.adapters import DBAPIAdapter


class ScriptedCursor:
    def __init__(self, connection):
        self.connection = connection
        self.rowcount = -1
        self._rows = []

    def execute(self, sql, params=None):
        self.connection.executed.append((sql, params))
        outcome = self.connection.outcome_for(sql)
        if isinstance(outcome, BaseException):
            raise outcome
        self._rows = list(outcome)
        self.rowcount = len(self._rows)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def close(self):
        self.connection.closed_cursors += 1


class ScriptedConnection:
    """
    DB-API connection stand-in answering by SQL fragment.

    ``responses`` maps a SQL substring to a list of rows, an exception
    instance, or a zero-argument callable returning either.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.executed = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self.closed_cursors = 0

    def outcome_for(self, sql):
        for fragment, outcome in self.responses.items():
            if fragment in sql:
                return outcome() if callable(outcome) else outcome
        return []

    def cursor(self):
        return ScriptedCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@pytest.fixture
def scripted_db():
    def build(flavor, responses=None, *, adapter_cls=DBAPIAdapter, options=None, clock=None):
        connection = ScriptedConnection(responses)
        adapter = adapter_cls(flavor, connection)
        return Database(adapter, options or Options(), clock=clock), connection

    return build


@pytest.fixture
def connection_factory():
    """
    Factory for ``DBAPIAdapter(factory=...)``; ``factory.opened`` lists every connection made.
    """

    opened = []

    def factory(config):
        opened.append(ScriptedConnection())
        return opened[-1]

    factory.opened = opened
    return factory
