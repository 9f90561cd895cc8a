
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

"""The ``httprpc.adapter.xml`` module presents lxml elements as read-only
mappings.

Keys are interpreted as follows:

* ``@name`` is the value of the ``name`` attribute,
* ``name*`` is the list of all descendant elements named ``name``,
* ``name`` is the first descendant element named ``name``,
* ``.`` is the text content of the element.
"""

import logging
logger = logging.getLogger(__name__)

from collections.abc import Mapping
from collections.abc import Sequence

from httprpc import const


ATTRIBUTE_PREFIX = '@'
LIST_SUFFIX = '*'


def get_text_content(element):
    return ''.join(element.itertext())


class NodeListAdapter(Sequence):
    def __init__(self, elements):
        self.elements = elements

    def __getitem__(self, index):
        if isinstance(index, slice):
            return NodeListAdapter(self.elements[index])
        return ElementAdapter(self.elements[index])

    def __len__(self):
        return len(self.elements)


class ElementAdapter(Mapping):
    def __init__(self, element):
        if element is None:
            raise ValueError("element can't be None")

        self.element = element

    def __getitem__(self, key):
        if key == const.SELF_REFERENCE:
            return get_text_content(self.element)

        if key.startswith(ATTRIBUTE_PREFIX):
            return self.element.attrib[key[len(ATTRIBUTE_PREFIX):]]

        if key.endswith(LIST_SUFFIX):
            return NodeListAdapter(
                      list(self.element.iterdescendants(key[:-len(LIST_SUFFIX)])))

        for e in self.element.iterdescendants(key):
            return ElementAdapter(e)

        raise KeyError(key)

    def __contains__(self, key):
        if key == const.SELF_REFERENCE or key.endswith(LIST_SUFFIX):
            return True

        if key.startswith(ATTRIBUTE_PREFIX):
            return key[len(ATTRIBUTE_PREFIX):] in self.element.attrib

        for _ in self.element.iterdescendants(key):
            return True

        return False

    def __iter__(self):
        """Enumerates the attributes of the element. Child elements are only
        reachable by name."""

        for k in self.element.attrib:
            yield ATTRIBUTE_PREFIX + k

    def __len__(self):
        return len(self.element.attrib)

    def __str__(self):
        return get_text_content(self.element)

    def __repr__(self):
        return "%s(<%s>)" % (self.__class__.__name__, self.element.tag)
