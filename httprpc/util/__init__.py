
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

import calendar

from datetime import date
from datetime import datetime
from datetime import time
from datetime import tzinfo
from enum import Enum
from numbers import Number
from uuid import UUID

import pytz

from babel import Locale

from httprpc import const


SCALAR_TYPES = (str, Number, date, time, UUID, Enum)
"""Types a template variable can be substituted with. Booleans are numbers
and datetimes are dates."""


def is_scalar(value):
    return isinstance(value, SCALAR_TYPES)


def to_text(value):
    """Converts a scalar to its textual form. Booleans become ``true`` and
    ``false``."""

    if isinstance(value, bool):
        return "true" if value else "false"

    return str(value)


def to_millis(value):
    """Converts dates and datetimes to milliseconds since the epoch. Naive
    datetimes are assumed to be in UTC."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(pytz.utc)
        return calendar.timegm(value.timetuple()) * 1000 \
                                                   + value.microsecond // 1000

    if isinstance(value, date):
        return calendar.timegm(value.timetuple()) * 1000

    raise TypeError("%r is not a date" % (value,))


def get_locale(locale):
    """Returns a :class:`babel.Locale` for the given locale or locale code.
    ``None`` means :data:`httprpc.const.DEFAULT_LOCALE`."""

    if isinstance(locale, Locale):
        return locale

    if locale is None:
        locale = const.DEFAULT_LOCALE

    return Locale.parse(str(locale).replace('-', '_'))


def get_timezone(tz):
    """Returns a ``tzinfo`` for the given time zone or time zone name.
    ``None`` means :data:`httprpc.const.DEFAULT_TIMEZONE`."""

    if isinstance(tz, tzinfo):
        return tz

    if tz is None:
        tz = const.DEFAULT_TIMEZONE

    return pytz.timezone(tz)


def close_all(*closeables):
    """Closes every given object, in order, even when some of them fail.
    ``None`` entries are skipped. Re-raises the first failure, if any."""

    first_error = None

    for c in closeables:
        if c is None:
            continue

        try:
            c.close()

        except Exception as e:
            logger.exception("Error closing %r", c)
            if first_error is None:
                first_error = e

    if first_error is not None:
        raise first_error
