
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

import logging
logger = logging.getLogger(__name__)


class Modifier(object):
    """Base class for named value transforms applied to template variables.

    Modifiers must be stateless: a single instance is shared by every render
    call in the process, possibly from several threads at once.
    """

    def apply(self, value, argument, locale=None, timezone=None):
        """Applies the modifier.

        :param value: The value to which the modifier is being applied. It is
            never ``None``.
        :param argument: The modifier argument, or ``None`` if no argument
            was provided.
        :param locale: The :class:`babel.Locale` of the current request.
        :param timezone: The ``tzinfo`` of the current request.
        :returns: The modified value.
        """

        raise NotImplementedError()

    def __call__(self, value, argument=None, **kwargs):
        return self.apply(value, argument, **kwargs)


class ModifierRegistry(object):
    """Maps modifier names to :class:`Modifier` instances.

    A registry can be frozen, after which it only serves lookups. Lookups
    don't lock.
    """

    def __init__(self, modifiers=None):
        self.__modifiers = {}
        self.frozen = False

        if modifiers is not None:
            for k, v in modifiers.items():
                self.register(k, v)

    def register(self, name, modifier):
        if self.frozen:
            raise RuntimeError("Can't register %r: %r is frozen."
                                                              % (name, self))

        if not name:
            raise ValueError("Modifier name can't be empty")

        if isinstance(modifier, type):
            modifier = modifier()

        logger.debug("Registering modifier %r: %r", name, modifier)
        self.__modifiers[name] = modifier

    def resolve(self, name):
        """Returns the modifier registered under ``name``, or ``None``."""

        return self.__modifiers.get(name, None)

    def freeze(self):
        self.frozen = True
        return self

    def copy(self):
        """Returns a mutable copy of this registry."""

        return ModifierRegistry(self.__modifiers)

    def __contains__(self, name):
        return name in self.__modifiers

    def __iter__(self):
        return iter(self.__modifiers)

    def __len__(self):
        return len(self.__modifiers)

    def __repr__(self):
        return "%s(%s%s)" % (self.__class__.__name__,
                             ', '.join(sorted(self.__modifiers)),
                             ', frozen' if self.frozen else '')
