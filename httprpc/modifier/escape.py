
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

"""Escape modifiers for the output formats templates are usually written in.

Each one substitutes special characters one by one and leaves every other
character, including non-ASCII ones, alone.
"""

from urllib.parse import quote_plus

from httprpc.modifier._base import Modifier
from httprpc.util import to_text


class TableEscapeModifier(Modifier):
    """Escapes characters according to a substitution table."""

    table = {}

    def apply(self, value, argument, **_):
        return to_text(value).translate(self.table)


class MarkupEscapeModifier(TableEscapeModifier):
    """Escapes text for inclusion in HTML or XML content and attribute
    values."""

    table = {
        ord('<'): u'&lt;',
        ord('>'): u'&gt;',
        ord('&'): u'&amp;',
        ord('"'): u'&quot;',
    }


class JsonEscapeModifier(TableEscapeModifier):
    """Escapes text for inclusion in a JSON string literal."""

    table = dict([(i, u'\\u%04x' % i) for i in range(0x20)])
    table.update({
        ord('"'): u'\\"',
        ord('\\'): u'\\\\',
        ord('\b'): u'\\b',
        ord('\f'): u'\\f',
        ord('\n'): u'\\n',
        ord('\r'): u'\\r',
        ord('\t'): u'\\t',
    })


class CsvEscapeModifier(TableEscapeModifier):
    """Escapes text for inclusion in a double-quoted CSV field that uses the
    backslash as its escape character."""

    table = {
        ord('"'): u'\\"',
        ord('\\'): u'\\\\',
    }


class UrlEscapeModifier(Modifier):
    """Percent-encodes text in ``application/x-www-form-urlencoded`` style."""

    def apply(self, value, argument, **_):
        return quote_plus(to_text(value), safe='', encoding='utf-8')
