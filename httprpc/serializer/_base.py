
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

from httprpc.error import OutputError
from httprpc.evmgr import EventManager
from httprpc.io.writer import OutputSink


class Serializer(object):
    """This is the abstract base class for all serializers. A serializer
    writes the value a request handler returned to a character sink.

    Serializers only hold configuration. Everything that's specific to a
    single call lives in the objects :meth:`write_value` creates, so one
    instance can serve concurrent requests.

    The Serializer class supports the following events:

    * ``before_serialize``:
      Called right before the value is written, with the sink and the value.

    * ``after_serialize``:
      Called after the value was written and the sink was flushed, with the
      sink and the value. Not called when serialization fails.

    :param content_type: The content type the transport should put in the
        response headers. It's returned as it is.
    """

    content_type = None

    def __init__(self, content_type=None):
        if content_type is not None:
            self.content_type = content_type

        self.event_manager = EventManager(self)

    def get_content_type(self):
        return self.content_type

    def write_value(self, writer, value):
        """Writes the given value to the given writer.

        :param writer: An :class:`httprpc.io.writer.OutputSink` or a text
            stream.
        :param value: The value to write. ``None`` writes nothing.
        """

        if value is None:
            return

        sink = self.get_sink(writer)

        self.event_manager.fire_event('before_serialize', sink, value)

        self.serialize(sink, value)

        sink.flush()
        self.check_sink(sink)

        self.event_manager.fire_event('after_serialize', sink, value)

    def serialize(self, sink, value):
        raise NotImplementedError()

    @staticmethod
    def get_sink(writer):
        if isinstance(writer, OutputSink):
            return writer
        return OutputSink(writer)

    @staticmethod
    def check_sink(sink):
        """Raises :class:`httprpc.error.OutputError` if a previous write to
        the given sink failed."""

        if sink.check_error():
            raise OutputError("Error writing to output stream: %r"
                                                                 % (sink.error,))

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.content_type)
