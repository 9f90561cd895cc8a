
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

"""The ``httprpc.const`` package contains miscellanous constant values needed
in various parts of httprpc. They are read at call time, so they can be
overridden by assignment before the first request is served."""


DEFAULT_PAGE_SIZE = 1024
"""Number of characters held by a single page of
:class:`httprpc.io.reader.PagedReader`."""

DEFAULT_BUFFER_SIZE = 8192
"""Number of characters :class:`httprpc.io.writer.OutputSink` accumulates
before handing them to the underlying stream."""

DEFAULT_ENCODING = 'utf-8'
"""Character encoding of template resources."""

DEFAULT_LOCALE = 'en_US'
"""Locale code to use for formatting and resource bundle lookups when the
caller does not supply one."""

DEFAULT_TIMEZONE = 'UTC'
"""Time zone name (as understood by pytz) used by the date and time styles of
the ``format`` modifier when the caller does not supply one."""

DEFAULT_CURRENCY = 'USD'
"""Currency code used by ``format=currency`` when the locale has no
territory to derive one from."""

SELF_REFERENCE = '.'
"""Variable name that refers to the value of the current dictionary itself."""

KEY_REFERENCE = '~'
"""Variable name that refers to the key of the current entry when a section
iterates over a mapping."""

RESOURCE_PREFIX = '@'
"""Variable prefix for localized resource bundle lookups."""

CONTEXT_PREFIX = '$'
"""Variable prefix for context variable lookups."""

PATH_SEPARATOR = '.'
"""Separator of nested keys in variable paths and column labels."""

MODIFIER_ENTRY_POINT_GROUP = 'httprpc.modifiers'
"""Entry point group that is scanned for externally declared modifiers when
the default modifier registry is populated."""
