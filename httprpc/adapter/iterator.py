
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

"""The ``httprpc.adapter.iterator`` module presents single-pass sources like
database cursors or generators as lazy sequences of dictionaries."""

import logging
logger = logging.getLogger(__name__)

from collections.abc import Mapping
from collections.abc import Sequence
from datetime import date
from numbers import Number

from httprpc.util import to_millis


_MISSING = type("_MISSING", (object,), {})()
_END = type("_END", (object,), {})()


def adapt_value(value):
    """Adapts a value read from a row source. Strings, numbers and booleans
    are returned as is, dates become milliseconds since the epoch, mappings
    and lists are wrapped in views that adapt their contents on access and
    anything else is converted to a string."""

    if value is None or isinstance(value, (str, Number)):
        return value

    if isinstance(value, date):
        return to_millis(value)

    if isinstance(value, Mapping):
        return ValueMapAdapter(value)

    if isinstance(value, (list, tuple)):
        return ValueListAdapter(value)

    return str(value)


class ValueListAdapter(Sequence):
    def __init__(self, sequence):
        self.sequence = sequence

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ValueListAdapter(self.sequence[index])
        return adapt_value(self.sequence[index])

    def __len__(self):
        return len(self.sequence)


class ValueMapAdapter(Mapping):
    def __init__(self, mapping):
        self.mapping = mapping

    def __getitem__(self, key):
        return adapt_value(self.mapping[key])

    def __iter__(self):
        return iter(self.mapping)

    def __len__(self):
        return len(self.mapping)


class IteratorAdapter(object):
    """Presents the contents of an iterator as a one-pass sequence of
    adapted values. If the source has a ``close()`` method, e.g. a MongoDB
    cursor, it is called when the adapter is closed.

    Random access is not supported: ``len()`` and indexing raise
    :class:`TypeError`.
    """

    def __init__(self, source):
        if source is None:
            raise ValueError("source can't be None")

        self.source = source
        self.iterator = None
        self.__next = _MISSING

    def _fetch(self):
        """Returns the next raw item from the source, or ``_END``."""

        if self.iterator is None:
            self.iterator = iter(self.source)

        return next(self.iterator, _END)

    def _adapt(self, item):
        return adapt_value(item)

    def has_next(self):
        if self.__next is _MISSING:
            self.__next = self._fetch()

        return self.__next is not _END

    def __iter__(self):
        return self

    def __next__(self):
        if not self.has_next():
            raise StopIteration()

        retval = self.__next
        self.__next = _MISSING

        return self._adapt(retval)

    next = __next__

    def __bool__(self):
        return self.has_next()

    def __len__(self):
        raise TypeError("%s does not support len()" % self.__class__.__name__)

    def __getitem__(self, index):
        raise TypeError("%s does not support indexing"
                                                     % self.__class__.__name__)

    def close(self):
        close = getattr(self.source, 'close', None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.source)
