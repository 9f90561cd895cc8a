
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

"""The ``httprpc.adapter.beans`` module presents arbitrary python objects as
read-only mappings.

The properties of a type are discovered once and kept in a cache that is
shared by every adapter created from the same top-level :func:`adapt` call.
The following are considered properties:

* ``property`` descriptors,
* public methods that can be called without arguments and whose names start
  with ``get_``, ``is_``, ``get`` or ``is`` followed by an upper case letter.
  ``get_first_name`` and ``getFirstName`` become ``first_name`` and
  ``firstName`` respectively,
* dataclass fields and ``__slots__`` entries.

A type can opt out of the discovery by listing its property names in a
``__bean_properties__`` attribute. Public instance attributes are exposed in
any case.
"""

import logging
logger = logging.getLogger(__name__)

import inspect

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from collections.abc import Sized
from dataclasses import fields
from dataclasses import is_dataclass
from datetime import date
from datetime import time
from enum import Enum
from numbers import Number
from uuid import UUID


SCALAR_TYPES = (str, bytes, bytearray, Number, date, time, UUID, Enum)
"""Types whose instances are returned as they are. :class:`datetime.datetime`
is a subclass of :class:`datetime.date`."""

ADAPTER_HOOKS = []
"""List of (predicate, factory) pairs that :func:`adapt` consults, in order,
before wrapping a value in one of the views of this module. Populated by
:mod:`httprpc.adapter`, so that values nested in mappings, sequences and
beans are dispatched the same way top-level values are."""

ACCESSOR_PREFIXES = ('get_', 'is_')
CAMEL_ACCESSOR_PREFIXES = ('get', 'is')


def get_property_name(method_name):
    """Returns the property name for the given accessor method name, or
    ``None`` if it's not an accessor."""

    for prefix in ACCESSOR_PREFIXES:
        if method_name.startswith(prefix) and len(method_name) > len(prefix):
            return method_name[len(prefix):]

    for prefix in CAMEL_ACCESSOR_PREFIXES:
        n = len(prefix)
        if method_name.startswith(prefix) and len(method_name) > n \
                                              and method_name[n].isupper():
            return method_name[n].lower() + method_name[n + 1:]

    return None


def _takes_no_arguments(func):
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return False

    # skip self
    for p in list(sig.parameters.values())[1:]:
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
            continue
        if p.default is p.empty:
            return False

    return True


def get_accessors(cls):
    """Returns an ordered dict of property name -> (attribute name, call)
    pairs for the given type."""

    retval = {}

    names = getattr(cls, '__bean_properties__', None)
    if names is not None:
        for name in names:
            retval[name] = (name, False)
        return retval

    if is_dataclass(cls):
        for f in fields(cls):
            if not f.name.startswith('_'):
                retval[f.name] = (f.name, False)

    for c in reversed(cls.__mro__):
        slots = c.__dict__.get('__slots__', ())
        if isinstance(slots, str):
            slots = (slots,)
        for s in slots:
            if not s.startswith('_'):
                retval.setdefault(s, (s, False))

    methods = []
    for name in dir(cls):
        if name.startswith('_'):
            continue

        attr = inspect.getattr_static(cls, name)
        if isinstance(attr, property):
            retval.setdefault(name, (name, False))

        elif inspect.isfunction(attr):
            key = get_property_name(name)
            if key is not None and _takes_no_arguments(attr):
                methods.append((key, name))

    for key, name in methods:
        retval.setdefault(key, (name, True))

    return retval


def adapt(value, cache=None):
    """Adapts a value for consumption by the serializers.

    Scalars are returned as is, mappings, sequences and other iterables are
    wrapped in adapters that adapt their elements on access, and any other
    object is wrapped in a :class:`BeanAdapter`. Values matched by one of the
    :data:`ADAPTER_HOOKS` are handed to its factory instead.

    :param cache: The accessor cache to share with the created adapters.
        A new one is created when ``None``.
    """

    if value is None or isinstance(value, SCALAR_TYPES):
        return value

    if isinstance(value, (BeanAdapter, ListAdapter, MapAdapter,
                                                             IterableAdapter)):
        return value

    for predicate, factory in ADAPTER_HOOKS:
        if predicate(value):
            return factory(value)

    if cache is None:
        cache = {}

    if isinstance(value, Mapping):
        return MapAdapter(value, cache)

    if isinstance(value, Sequence):
        return ListAdapter(value, cache)

    if isinstance(value, Iterable):
        return IterableAdapter(value, cache)

    return BeanAdapter(value, cache)


class ListAdapter(Sequence):
    """Read-only view of a sequence whose elements are adapted on access."""

    def __init__(self, sequence, cache=None):
        self.sequence = sequence
        self.cache = {} if cache is None else cache

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ListAdapter(self.sequence[index], self.cache)

        return adapt(self.sequence[index], self.cache)

    def __len__(self):
        return len(self.sequence)

    def __iter__(self):
        for e in self.sequence:
            yield adapt(e, self.cache)

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.sequence)


class IterableAdapter(Iterable):
    """View of an iterable whose elements are adapted as they are produced.
    It can be iterated as many times as the wrapped iterable can."""

    def __init__(self, iterable, cache=None):
        self.iterable = iterable
        self.cache = {} if cache is None else cache

    def __iter__(self):
        for e in self.iterable:
            yield adapt(e, self.cache)

    def __bool__(self):
        if isinstance(self.iterable, Sized):
            return len(self.iterable) > 0

        for _ in self.iterable:
            return True

        return False

    def close(self):
        close = getattr(self.iterable, 'close', None)
        if close is not None:
            close()


class MapAdapter(Mapping):
    """Read-only view of a mapping whose values are adapted on access."""

    def __init__(self, mapping, cache=None):
        self.mapping = mapping
        self.cache = {} if cache is None else cache

    def __getitem__(self, key):
        return adapt(self.mapping[key], self.cache)

    def __iter__(self):
        return iter(self.mapping)

    def __len__(self):
        return len(self.mapping)

    def __contains__(self, key):
        return key in self.mapping

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.mapping)


class BeanAdapter(Mapping):
    """Read-only mapping view of an arbitrary object.

    >>> class Point(object):
    ...     def __init__(self, x, y):
    ...         self.x, self.y = x, y
    ...     def get_norm(self):
    ...         return abs(self.x) + abs(self.y)
    >>> dict(BeanAdapter(Point(1, -2)))
    {'norm': 3, 'x': 1, 'y': -2}

    :param bean: The object to adapt.
    :param cache: A dict that maps types to their accessors. Share it among
        adapters of the same logical value to scan each type only once.
    """

    def __init__(self, bean, cache=None):
        if bean is None:
            raise ValueError("bean can't be None")

        self.bean = bean
        self.cache = {} if cache is None else cache

        cls = type(bean)
        accessors = self.cache.get(cls, None)
        if accessors is None:
            logger.debug("Scanning %r for accessors", cls)
            accessors = self.cache[cls] = get_accessors(cls)

        self.accessors = accessors

    def _get_attributes(self):
        try:
            attrs = vars(self.bean)
        except TypeError:
            return {}

        return dict([(k, v) for k, v in attrs.items()
                          if not k.startswith('_') and not k in self.accessors])

    def __getitem__(self, key):
        accessor = self.accessors.get(key, None)

        if accessor is None:
            attrs = self._get_attributes()
            if not key in attrs:
                raise KeyError(key)

            return adapt(attrs[key], self.cache)

        name, call = accessor
        if call:
            value = getattr(self.bean, name)()
        else:
            # unset slots read as None
            value = getattr(self.bean, name, None)

        return adapt(value, self.cache)

    def __iter__(self):
        for k in self.accessors:
            yield k

        for k in self._get_attributes():
            yield k

    def __len__(self):
        return len(self.accessors) + len(self._get_attributes())

    def __contains__(self, key):
        return key in self.accessors or key in self._get_attributes()

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.bean)
