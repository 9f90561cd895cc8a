
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

"""The ``httprpc.serializer.json`` module writes adapted values as JSON.

Unlike :func:`json.dump`, nothing is materialized up front: lists and result
sets are written element by element as they are iterated, so a large query
result streams straight to the response.
"""

import logging
logger = logging.getLogger(__name__)

import json

from collections.abc import Iterable
from collections.abc import Mapping
from datetime import date
from numbers import Number

from httprpc.adapter import adapt
from httprpc.serializer._base import Serializer
from httprpc.util import SCALAR_TYPES
from httprpc.util import to_millis


class JsonSerializer(Serializer):
    """Serializes values to JSON.

    Dates become milliseconds since the epoch. Other scalars that have no
    JSON counterpart, like times, UUIDs and enum members, are written as
    strings.

    :param compact: When ``False``, the output is indented by two spaces.
    """

    content_type = 'application/json'

    def __init__(self, compact=False, content_type=None):
        super(JsonSerializer, self).__init__(content_type)

        self.compact = compact

    def serialize(self, sink, value):
        self.encode(sink, adapt(value), 0)

    def encode(self, writer, value, depth):
        self.check_sink(writer)

        if value is None or isinstance(value, (str, Number)):
            writer.write(json.dumps(value))

        elif isinstance(value, date):
            writer.write(str(to_millis(value)))

        elif isinstance(value, SCALAR_TYPES):
            writer.write(json.dumps(str(value)))

        elif isinstance(value, Mapping):
            writer.write('{')

            i = 0
            for k in value:
                if k is None:
                    continue

                if i > 0:
                    writer.write(',')

                self.indent(writer, depth + 1)
                writer.write(json.dumps(str(k)))
                writer.write(':' if self.compact else ': ')

                self.encode(writer, value[k], depth + 1)
                i += 1

            if i > 0:
                self.indent(writer, depth)

            writer.write('}')

        elif isinstance(value, Iterable) and \
                                not isinstance(value, (bytes, bytearray)):
            writer.write('[')

            try:
                i = 0
                for element in value:
                    if i > 0:
                        writer.write(',')

                    self.indent(writer, depth + 1)
                    self.encode(writer, element, depth + 1)
                    i += 1

            finally:
                close = getattr(value, 'close', None)
                if close is not None:
                    close()

            if i > 0:
                self.indent(writer, depth)

            writer.write(']')

        else:
            raise TypeError("Can't serialize %r to JSON" % (value,))

    def indent(self, writer, depth):
        if not self.compact:
            writer.write('\n')
            writer.write('  ' * depth)
