
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

"""The ``httprpc.adapter`` package contains the adapters that present
handler results to the serializers as mappings and sequences.

:func:`adapt` picks the right one for a given value.
"""

import logging
logger = logging.getLogger(__name__)

from collections.abc import Iterator

from lxml import etree
from sqlalchemy.engine import Result

from httprpc.adapter.beans import adapt as adapt_bean
from httprpc.adapter.beans import ADAPTER_HOOKS
from httprpc.adapter.beans import BeanAdapter
from httprpc.adapter.beans import ListAdapter
from httprpc.adapter.beans import MapAdapter
from httprpc.adapter.beans import IterableAdapter
from httprpc.adapter.iterator import IteratorAdapter
from httprpc.adapter.sql import ResultSetAdapter
from httprpc.adapter.xml import ElementAdapter
from httprpc.adapter.resource import ResourceBundleAdapter


def is_cursor(value):
    """Returns True for objects that quack like a DB-API cursor."""

    return hasattr(value, 'fetchone') and hasattr(value, 'description')


def is_result_set(value):
    return isinstance(value, Result) or is_cursor(value)


def _adapt_result_set(value):
    logger.debug("Adapting %r as a result set", type(value))
    return ResultSetAdapter(value)


def _is_adapted(value):
    return isinstance(value, (IteratorAdapter, ElementAdapter))


ADAPTER_HOOKS[:] = [
    (_is_adapted, lambda value: value),
    (is_result_set, _adapt_result_set),
    (etree.iselement, ElementAdapter),
    (lambda value: isinstance(value, Iterator), IteratorAdapter),
]


def adapt(value):
    """Presents a handler result as something the serializers can consume.

    * SQLAlchemy results and DB-API cursors become :class:`ResultSetAdapter`
      instances,
    * lxml elements become :class:`ElementAdapter` instances,
    * iterators, e.g. generators, become :class:`IteratorAdapter` instances,
    * everything else is adapted by :func:`httprpc.adapter.beans.adapt`:
      scalars are returned as they are, mappings and sequences are wrapped in
      lazy views and other objects in :class:`BeanAdapter` instances.

    The same rules apply to values nested in mappings, sequences and beans.
    """

    return adapt_bean(value)
