
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


"""The ``httprpc.error`` module contains the exceptions raised while
serializing a response.

Every fatal condition is an :class:`IOError` subclass, so the transport layer
can map all of them to a server error with a single ``except`` clause.
"""


class SerializationError(IOError):
    """Base class of all fatal serialization errors."""

    CODE = 'Server.SerializationError'

    def __init__(self, faultstring="Error serializing the response."):
        super(SerializationError, self).__init__(faultstring)

        self.faultcode = self.CODE
        self.faultstring = faultstring

    def __repr__(self):
        return "%s(%s: %r)" % (self.__class__.__name__,
                                               self.faultcode, self.faultstring)


class MalformedTemplateError(SerializationError):
    """Raised when a template contains an unterminated or improperly closed
    marker."""

    CODE = 'Server.MalformedTemplate'

    def __init__(self, faultstring="Malformed template."):
        super(MalformedTemplateError, self).__init__(faultstring)


class InvalidSectionError(SerializationError):
    """Raised when a section name resolves to something that can not be
    iterated."""

    CODE = 'Server.InvalidSection'

    def __init__(self, name, value=None,
                             faultstring="Invalid section element %r: %r"):
        super(InvalidSectionError, self) \
                                      .__init__(faultstring % (name, value))

        self.name = name


class InvalidVariableError(SerializationError):
    """Raised when a variable resolves to a structured (non-scalar) value."""

    CODE = 'Server.InvalidVariable'

    def __init__(self, name, value=None,
                             faultstring="Invalid variable element %r: %r"):
        super(InvalidVariableError, self) \
                                      .__init__(faultstring % (name, value))

        self.name = name


class ResourceNotFoundError(SerializationError):
    """Raised when a template or an include can not be found."""

    CODE = 'Server.ResourceNotFound'

    def __init__(self, fault_object,
                                fault_string="Requested resource %r not found"):
        super(ResourceNotFoundError, self) \
                                      .__init__(fault_string % (fault_object,))

        self.resource = fault_object


class OutputError(SerializationError):
    """Raised when the output sink reported a write failure."""

    CODE = 'Server.OutputError'

    def __init__(self, faultstring="Error writing to output stream."):
        super(OutputError, self).__init__(faultstring)
