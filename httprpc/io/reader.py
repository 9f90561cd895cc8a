
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

"""Character readers that can be rewound.

:class:`PagedReader` consumes its source strictly once, forward only, and
keeps everything it has read in fixed-size pages. Rewinding is done with a
stack of marks, so that the same region of a template can be replayed once
per section element.
"""

import logging
logger = logging.getLogger(__name__)

from httprpc import const


EOF = ''
"""Value returned by the ``read`` methods at the end of the stream."""


class PagedReader(object):
    """Reader that processes data in pages, allowing the stream to be marked
    and reset any number of times.

    :param source: A text stream. Only its ``read(size)`` and ``close()``
        methods are used.
    :param page_size: Number of characters per page. Defaults to
        :data:`httprpc.const.DEFAULT_PAGE_SIZE`.

    Calling :meth:`reset` without a pending mark rewinds the reader to the
    start of the stream.
    """

    def __init__(self, source, page_size=None):
        if source is None:
            raise ValueError("source can't be None")

        if page_size is None:
            page_size = const.DEFAULT_PAGE_SIZE
        if page_size < 1:
            page_size = 1

        self.source = source
        self.page_size = page_size

        self.position = 0
        self.count = 0
        self.end_of_file = False

        self.pages = []
        self.marks = []

    def _fill(self):
        """Reads the rest of the current page from the source. Returns the
        number of characters that were added."""

        if self.end_of_file:
            return 0

        if len(self.pages) == 0 or len(self.pages[-1]) == self.page_size:
            self.pages.append('')

        page = self.pages[-1]
        data = self.source.read(self.page_size - len(page))
        if not data:
            self.end_of_file = True
            return 0

        self.pages[-1] = page + data
        self.count += len(data)

        return len(data)

    def read(self, size=1):
        """Reads at most ``size`` characters. Returns :data:`EOF` (the empty
        string) when the end of the stream is reached."""

        if size == 1 and self.position < self.count:
            page, offset = divmod(self.position, self.page_size)
            self.position += 1
            return self.pages[page][offset]

        chars = []
        n = 0
        while size < 0 or n < size:
            if self.position == self.count and self._fill() == 0:
                break

            page, offset = divmod(self.position, self.page_size)
            chunk = self.pages[page][offset:]
            if size >= 0:
                chunk = chunk[:size - n]

            chars.append(chunk)
            n += len(chunk)
            self.position += len(chunk)

        return ''.join(chars)

    def readinto(self, buffer, offset=0, length=None):
        """Reads characters into the given mutable sequence, starting at
        ``offset``. Returns the number of characters read, 0 at the end of
        the stream."""

        if length is None:
            length = len(buffer) - offset

        length = min(length, len(buffer) - offset)
        if length <= 0:
            return 0

        data = self.read(length)
        buffer[offset:offset + len(data)] = data

        return len(data)

    def mark(self):
        """Pushes the current position onto the mark stack."""

        self.marks.append(self.position)

    def reset(self):
        """Pops the most recent mark and rewinds to it. Rewinds to the start
        of the stream when no mark is pending."""

        if len(self.marks) == 0:
            self.position = 0
        else:
            self.position = self.marks.pop()

    def close(self):
        logger.debug("Closing %r after %d characters", self, self.count)
        self.source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return "%s(page_size=%d)" % (self.__class__.__name__, self.page_size)


class EmptyReader(object):
    """Reader that is always at the end of the stream. It stands in for
    includes referenced from sections that have no elements."""

    def read(self, size=1):
        return EOF

    def readinto(self, buffer, offset=0, length=None):
        return 0

    def mark(self):
        pass

    def reset(self):
        pass

    def close(self):
        pass
