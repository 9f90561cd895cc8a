#!/usr/bin/env python
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
logging.basicConfig(level=logging.DEBUG)

import unittest

from datetime import date
from datetime import datetime
from io import StringIO
from unittest import mock

import pytz

from babel import Locale

from httprpc.evmgr import EventManager
from httprpc.io.writer import NullWriter
from httprpc.io.writer import OutputSink
from httprpc.util import close_all
from httprpc.util import get_locale
from httprpc.util import get_timezone
from httprpc.util import is_scalar
from httprpc.util import to_millis
from httprpc.util import to_text


class TestUtil(unittest.TestCase):
    def test_is_scalar(self):
        assert is_scalar("a")
        assert is_scalar(1)
        assert is_scalar(1.5)
        assert is_scalar(False)
        assert is_scalar(date(2000, 1, 1))
        assert not is_scalar(None)
        assert not is_scalar({})
        assert not is_scalar([])

    def test_to_text(self):
        assert to_text(True) == "true"
        assert to_text(False) == "false"
        assert to_text(1) == "1"

    def test_to_millis(self):
        assert to_millis(date(1970, 1, 1)) == 0
        assert to_millis(datetime(1970, 1, 1, 0, 0, 0, 1000)) == 1
        assert to_millis(pytz.timezone('Europe/Istanbul').localize(
                                      datetime(2020, 1, 1, 3))) == 1577836800000

        self.assertRaises(TypeError, to_millis, "2020-01-01")

    def test_get_locale(self):
        assert get_locale(None) == Locale('en', 'US')
        assert get_locale('pt-BR') == Locale('pt', 'BR')

        locale = Locale('tr')
        assert get_locale(locale) is locale

    def test_get_timezone(self):
        assert get_timezone(None) is pytz.utc
        assert get_timezone('Europe/Istanbul').zone == 'Europe/Istanbul'
        assert get_timezone(pytz.utc) is pytz.utc

    def test_close_all(self):
        a = mock.Mock()
        b = mock.Mock()
        b.close.side_effect = ValueError("b")
        c = mock.Mock()
        c.close.side_effect = IOError("c")
        d = mock.Mock()

        try:
            close_all(a, None, b, c, d)
        except ValueError as e:
            assert str(e) == "b"
        else:
            raise Exception("must fail")

        for m in (a, b, c, d):
            m.close.assert_called_once_with()

    def test_close_all_success(self):
        a = mock.Mock()
        close_all(a)
        a.close.assert_called_once_with()


class TestOutputSink(unittest.TestCase):
    def test_buffering(self):
        stream = StringIO()
        sink = OutputSink(stream, buffer_size=4)

        sink.write("ab")
        assert stream.getvalue() == ""

        sink.write("cd")
        assert stream.getvalue() == "abcd"

        sink.write("e")
        sink.flush()
        assert stream.getvalue() == "abcde"
        assert not sink.check_error()

    def test_error(self):
        stream = StringIO()
        stream.close()

        sink = OutputSink(stream, buffer_size=1)
        sink.write("a")

        assert sink.check_error()
        assert isinstance(sink.error, ValueError)

        # further writes are ignored
        sink.write("b")
        sink.flush()

    def test_null_writer(self):
        sink = NullWriter()
        sink.write("anything")
        sink.flush()
        assert not sink.check_error()


class TestEventManager(unittest.TestCase):
    def test_events(self):
        calls = []

        def handler(ctx, *args):
            calls.append((ctx, args))

        evmgr = EventManager(None)
        evmgr.add_listener('ev', handler)
        evmgr.add_listener('ev', handler)
        evmgr.fire_event('ev', 'ctx', 1)
        evmgr.fire_event('other', 'ctx')

        assert calls == [('ctx', (1,))]

        evmgr.del_listener('ev', handler)
        evmgr.fire_event('ev', 'ctx', 2)
        assert len(calls) == 1

    def test_initial_handlers(self):
        calls = []

        evmgr = EventManager(None, {'ev': [lambda ctx: calls.append(ctx)]})
        evmgr.fire_event('ev', 1)

        assert calls == [1]


if __name__ == '__main__':
    unittest.main()
