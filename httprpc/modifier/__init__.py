
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

"""The ``httprpc.modifier`` package contains the value transforms that can be
chained to template variables, e.g. ``{{name:^html}}`` or
``{{date:format=shortDate}}``.

The process-wide default registry holds the built-in modifiers and any
modifier other distributions declare under the ``httprpc.modifiers`` entry
point group::

    setup(
        # ...
        entry_points={
            'httprpc.modifiers': [
                'upper = mypackage.modifiers:UpperModifier',
            ],
        },
    )

It is populated on first use and frozen right after.
"""

import logging
logger = logging.getLogger(__name__)

import threading

from importlib.metadata import entry_points

from httprpc import const

from httprpc.modifier._base import Modifier
from httprpc.modifier._base import ModifierRegistry

from httprpc.modifier.format import FormatModifier

from httprpc.modifier.escape import CsvEscapeModifier
from httprpc.modifier.escape import JsonEscapeModifier
from httprpc.modifier.escape import MarkupEscapeModifier
from httprpc.modifier.escape import UrlEscapeModifier


BUILTIN_MODIFIERS = (
    ('format', FormatModifier),
    ('^url', UrlEscapeModifier),
    ('^html', MarkupEscapeModifier),
    ('^xml', MarkupEscapeModifier),
    ('^json', JsonEscapeModifier),
    ('^csv', CsvEscapeModifier),
)


_default_registry = None
_lock = threading.Lock()


def load_entry_point_modifiers(registry, group=None):
    """Registers the modifiers declared under the given entry point group.
    Entry points may refer to :class:`Modifier` subclasses or instances."""

    if group is None:
        group = const.MODIFIER_ENTRY_POINT_GROUP

    for ep in entry_points(group=group):
        modifier = ep.load()

        if isinstance(modifier, type):
            if not issubclass(modifier, Modifier):
                logger.error("Entry point %r does not refer to a Modifier "
                                                      "subclass, ignoring.", ep)
                continue

            modifier = modifier()

        elif not isinstance(modifier, Modifier):
            logger.error("Entry point %r does not refer to a Modifier, "
                                                                 "ignoring.", ep)
            continue

        registry.register(ep.name, modifier)

    return registry


def create_registry():
    """Returns a new, mutable registry with the built-in modifiers only."""

    retval = ModifierRegistry()
    for name, cls in BUILTIN_MODIFIERS:
        retval.register(name, cls())

    return retval


def get_default_registry():
    """Returns the frozen process-wide registry."""

    global _default_registry

    if _default_registry is None:
        with _lock:
            # someone else might have populated it while we were waiting
            if _default_registry is None:
                registry = create_registry()
                load_entry_point_modifiers(registry)

                logger.debug("Default modifier registry: %r", registry)
                _default_registry = registry.freeze()

    return _default_registry
