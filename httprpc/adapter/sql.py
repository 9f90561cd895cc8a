
#
# httprpc - Copyright (C) HTTP-RPC contributors.
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
#

"""The ``httprpc.adapter.sql`` module presents query results as lazy
sequences of dictionaries.

Rows are fetched one at a time. A column whose label contains a period is
returned as a nested structure, so ``SELECT id, owner_name AS "owner.name",
owner_email AS "owner.email"`` yields rows like::

    {'id': 1, 'owner': {'name': ..., 'email': ...}}

Usage with SQLAlchemy::

    conn = engine.connect()
    result = conn.execute(text("SELECT ..."))

    # closing the adapter closes the result and then the connection
    return ResultSetAdapter(result, conn)
"""

import logging
logger = logging.getLogger(__name__)

from httprpc import const
from httprpc.util import close_all
from httprpc.adapter.iterator import IteratorAdapter
from httprpc.adapter.iterator import adapt_value
from httprpc.adapter.iterator import _END


def get_column_labels(source):
    """Returns the column labels of an SQLAlchemy result or a DB-API
    cursor."""

    keys = getattr(source, 'keys', None)
    if callable(keys):
        return [str(k) for k in keys()]

    description = getattr(source, 'description', None)
    if description is None:
        return []

    return [d[0] for d in description]


class ResultSetAdapter(IteratorAdapter):
    """Presents the rows of an SQLAlchemy :class:`~sqlalchemy.engine.Result`
    or a DB-API cursor as a one-pass sequence of dicts.

    :param source: The result or cursor to read rows from.
    :param owned: Further resources, e.g. the connection the query ran on,
        that are closed after ``source`` when the adapter is closed.
    """

    def __init__(self, source, *owned):
        super(ResultSetAdapter, self).__init__(source)

        self.owned = owned
        self.transforms = {}

        self.labels = get_column_labels(source)
        self.columns = [l.split(const.PATH_SEPARATOR) for l in self.labels]

        logger.debug("%r columns: %r", self, self.labels)

    def transform(self, key, func):
        """Associates a mapping function with a result column. The function
        is called with every non-null value of the column."""

        if key is None or func is None:
            raise ValueError("key and func can't be None")

        self.transforms[key] = func

    def _fetch(self):
        row = self.source.fetchone()
        if row is None:
            return _END

        return row

    def _adapt(self, row):
        retval = {}

        for i, path in enumerate(self.columns):
            value = row[i]

            transform = self.transforms.get(self.labels[i], None)
            if transform is not None and value is not None:
                value = transform(value)

            parent = retval
            for key in path[:-1]:
                child = parent.get(key, None)
                if not isinstance(child, dict):
                    child = parent[key] = {}
                parent = child

            parent[path[-1]] = adapt_value(value)

        return retval

    def close(self):
        """Closes the source and then every owned resource. All of them are
        attempted even if some fail; the first failure is re-raised."""

        close_all(self.source, *self.owned)
