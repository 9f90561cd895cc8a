
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

"""The ``format`` modifier.

Numbers are formatted with ``currency`` and ``percent``. The date and time
styles accept epoch milliseconds as well as :class:`datetime.datetime` and
:class:`datetime.date` instances, and render them in the time zone of the
request. Any other argument is used as a printf-style pattern, e.g.
``{{price:format=%.2f}}``.
"""

import logging
logger = logging.getLogger(__name__)

from datetime import date
from datetime import datetime
from numbers import Number

import pytz

from babel.dates import format_date
from babel.dates import format_time
from babel.dates import format_datetime
from babel.numbers import format_currency
from babel.numbers import format_percent
from babel.numbers import get_territory_currencies

from httprpc import const
from httprpc.modifier._base import Modifier
from httprpc.util import get_locale
from httprpc.util import get_timezone


DATE = 'date'
TIME = 'time'
DATE_TIME = 'datetime'


def _get_currency(locale):
    if locale.territory is not None:
        currencies = get_territory_currencies(locale.territory)
        if len(currencies) > 0:
            return currencies[0]

    return const.DEFAULT_CURRENCY


def _to_datetime(value, tz):
    if isinstance(value, bool):
        raise TypeError("Can't format %r as date or time" % (value,))

    if isinstance(value, Number):
        return datetime.fromtimestamp(float(value) / 1000.0, tz)

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = pytz.utc.localize(value)
        return value.astimezone(tz)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=pytz.utc)

    raise TypeError("Can't format %r as date or time" % (value,))


class FormatModifier(Modifier):
    CURRENCY = 'currency'
    PERCENT = 'percent'

    STYLES = {
        'fullDate': (DATE, 'full'),
        'longDate': (DATE, 'long'),
        'mediumDate': (DATE, 'medium'),
        'shortDate': (DATE, 'short'),
        'isoDate': (DATE, None),

        'fullTime': (TIME, 'full'),
        'longTime': (TIME, 'long'),
        'mediumTime': (TIME, 'medium'),
        'shortTime': (TIME, 'short'),
        'isoTime': (TIME, None),

        'fullDateTime': (DATE_TIME, 'full'),
        'longDateTime': (DATE_TIME, 'long'),
        'mediumDateTime': (DATE_TIME, 'medium'),
        'shortDateTime': (DATE_TIME, 'short'),
        'isoDateTime': (DATE_TIME, None),
    }

    def apply(self, value, argument, locale=None, timezone=None):
        if argument is None:
            return value

        locale = get_locale(locale)

        if argument == self.CURRENCY:
            return format_currency(value, _get_currency(locale), locale=locale)

        if argument == self.PERCENT:
            return format_percent(value, locale=locale)

        style = self.STYLES.get(argument, None)
        if style is not None:
            kind, length = style
            return self.format_temporal(value, kind, length, locale,
                                                        get_timezone(timezone))

        return argument % (value,)

    @staticmethod
    def format_temporal(value, kind, length, locale, tz):
        value = _to_datetime(value, tz)

        if kind == DATE:
            if length is None:
                return value.date().isoformat()
            return format_date(value, format=length, locale=locale)

        if kind == TIME:
            if length is None:
                return value.timetz().isoformat()
            return format_time(value, format=length, tzinfo=tz, locale=locale)

        if length is None:
            return value.isoformat()
        return format_datetime(value, format=length, tzinfo=tz, locale=locale)
