
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

"""Character sinks used by the serializers.

Writes never raise. A failing stream puts the sink into an error state that
the serializers query with :meth:`OutputSink.check_error` before they go on.
"""

import logging
logger = logging.getLogger(__name__)

from httprpc import const


class OutputSink(object):
    """Buffering wrapper around a text stream.

    :param stream: Anything with a ``write(str)`` method, e.g. an
        :class:`io.StringIO` or an HTTP response writer.
    :param buffer_size: Number of characters to accumulate before they are
        handed to ``stream``.
    """

    def __init__(self, stream, buffer_size=None):
        if buffer_size is None:
            buffer_size = const.DEFAULT_BUFFER_SIZE

        self.stream = stream
        self.buffer_size = buffer_size

        self.buffer = []
        self.buffered = 0
        self.error = None

    def write(self, data):
        if self.error is not None:
            return

        self.buffer.append(data)
        self.buffered += len(data)

        if self.buffered >= self.buffer_size:
            self._drain()

    def _drain(self):
        data = ''.join(self.buffer)
        del self.buffer[:]
        self.buffered = 0

        if len(data) == 0:
            return

        try:
            self.stream.write(data)

        except (IOError, ValueError) as e:
            logger.error("Error writing to %r: %r", self.stream, e)
            self.error = e

    def flush(self):
        if self.error is not None:
            return

        self._drain()

        flush = getattr(self.stream, 'flush', None)
        if self.error is None and flush is not None:
            try:
                flush()

            except (IOError, ValueError) as e:
                logger.error("Error flushing %r: %r", self.stream, e)
                self.error = e

    def check_error(self):
        """Returns True if a previous write to the underlying stream
        failed."""

        return self.error is not None


class NullWriter(OutputSink):
    """Sink that discards everything. Used to scan the body of sections that
    have nothing to render."""

    def __init__(self):
        super(NullWriter, self).__init__(None, buffer_size=0)

    def write(self, data):
        pass

    def flush(self):
        pass
