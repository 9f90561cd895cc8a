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

import sqlite3
import unittest

from collections import Counter
from io import BytesIO
from io import StringIO
from unittest import mock

from lxml import etree
from sqlalchemy import create_engine
from sqlalchemy import text

from httprpc import const
from httprpc.adapter.sql import ResultSetAdapter
from httprpc.error import InvalidSectionError
from httprpc.error import InvalidVariableError
from httprpc.error import MalformedTemplateError
from httprpc.error import OutputError
from httprpc.error import ResourceNotFoundError
from httprpc.error import SerializationError
from httprpc.io.reader import PagedReader
from httprpc.io.writer import OutputSink
from httprpc.modifier import Modifier
from httprpc.serializer.template import TemplateSerializer

import httprpc.test.templates


class UpperModifier(Modifier):
    def apply(self, value, argument, **_):
        return str(value).upper()


class Templates(object):
    """Serves templates from memory, keeping track of how many times each
    one was opened."""

    def __init__(self, templates):
        self.templates = templates
        self.opened = Counter()
        self.streams = []

    def __call__(self, name):
        if not name in self.templates:
            return None

        self.opened[name] += 1

        retval = BytesIO(self.templates[name].encode('utf8'))
        self.streams.append(retval)

        return retval


class BrokenStream(object):
    def __init__(self):
        self.writes = 0

    def write(self, data):
        self.writes += 1
        raise IOError("Broken pipe")


class RecordingWriter(object):
    def __init__(self):
        self.chunks = []

    def write(self, data):
        self.chunks.append(data)

    def check_error(self):
        return False


class UnclosableStream(BytesIO):
    def close(self):
        if not self.closed:
            super(UnclosableStream, self).close()
            raise IOError("Can't close")


class Address(object):
    def __init__(self, city):
        self._city = city

    def get_city(self):
        return self._city


class Person(object):
    def __init__(self, name, address):
        self._name = name
        self._address = address

    def get_name(self):
        return self._name

    def getNested(self):
        return self._address


class TemplateTestBase(unittest.TestCase):
    def get_serializer(self, template, includes=None, **kwargs):
        templates = {'main.txt': template}
        if includes is not None:
            templates.update(includes)

        self.templates = Templates(templates)

        return TemplateSerializer(httprpc.test, 'main.txt',
                                   content_type='text/plain',
                                   resolver=self.templates, **kwargs)

    def render(self, template, value, includes=None, **kwargs):
        serializer = self.get_serializer(template, includes, **kwargs)

        out = StringIO()
        serializer.write_value(out, value)

        return out.getvalue()


class TestVariables(TemplateTestBase):
    def test_dictionary(self):
        assert self.render("{{a}}, {{b}}, {{c}}, {{d}}",
                      {'a': "x", 'b': 1, 'c': 2.5, 'd': True}) == "x, 1, 2.5, true"

    def test_scalar_root(self):
        assert self.render("<{{.}}>", "hello") == "<hello>"
        assert self.render("<{{.}}>", 42) == "<42>"

    def test_null_value(self):
        assert self.render("text", None) == ""
        assert self.templates.opened['main.txt'] == 0

    def test_missing(self):
        assert self.render("[{{nope}}]", {}) == "[]"
        assert self.render("[{{.}}]", {'a': 1}) == "[]"

    def test_dotted_path(self):
        value = {'a': {'b': {'c': 123}}, 's': "text"}

        assert self.render("{{a.b.c}}", value) == "123"
        assert self.render("{{a.b.z}}", value) == ""
        assert self.render("{{a.b.c.d}}", value) == ""
        assert self.render("{{s.length}}", value) == ""
        assert self.render("{{x.y}}", value) == ""

    def test_bean_nesting(self):
        template = "{{name}} lives in {{nested.city}}"
        expected = "Ayla lives in Izmir"

        assert self.render(template,
                               Person("Ayla", Address("Izmir"))) == expected
        assert self.render(template,
                 {'name': "Ayla", 'nested': {'city': "Izmir"}}) == expected

    def test_literal_braces(self):
        assert self.render("a { b } {c} }} {", {}) == "a { b } {c} }} {"

    def test_comment(self):
        assert self.render("a{{! ignore: me }}b", {}) == "ab"

    def test_unicode(self):
        assert self.render(u"ç{{a}}中", {'a': u"ü"}) == \
                                                          u"çü中"


class TestModifiers(TemplateTestBase):
    def test_chain_order(self):
        modifiers = {'upper': UpperModifier}

        assert self.render("{{value:upper:^html}}", {'value': "<b>"},
                                      modifiers=modifiers) == "&lt;B&gt;"
        assert self.render("{{value:^html:upper}}", {'value': "<b>"},
                                      modifiers=modifiers) == "&LT;B&GT;"

    def test_unknown_modifier(self):
        assert self.render("{{value:bogus=1:^html}}", {'value': "<b>"}) == \
                                                                   "&lt;b&gt;"

    def test_format(self):
        assert self.render("{{price:format=%.2f}}", {'price': 3.14159}) == \
                                                                       "3.14"
        assert self.render("{{price:format=currency}}", {'price': 3},
                                               locale='en_US') == "$3.00"

    def test_format_date(self):
        assert self.render("{{when:format=isoDate}}", {'when': 0},
                                 timezone='America/New_York') == "1969-12-31"

    def test_escapers(self):
        value = {'v': u'a "b" & c'}

        assert self.render("{{v:^json}}", value) == u'a \\"b\\" & c'
        assert self.render("{{v:^url}}", value) == u'a+%22b%22+%26+c'
        assert self.render("{{v:^csv}}", value) == u'a \\"b\\" & c'
        assert self.render("{{v:^xml}}", value) == \
                                               u'a &quot;b&quot; &amp; c'


class TestSections(TemplateTestBase):
    def test_replay(self):
        value = {'rows': [{'x': "a"}, {'x': "b"}, {'x': "c"}]}

        assert self.render("{{#rows}}{{x}}{{/rows}}", value) == "abc"

    def test_isolation(self):
        value = {'x': "outer", 'rows': [{'x': "a"}, {}, {'x': "c"}]}

        assert self.render("{{x}}:{{#rows}}[{{x}}]{{/rows}}", value) == \
                                                          "outer:[a][][c]"

    def test_empty(self):
        template = "{{#items}}body{{/items}}"

        assert self.render(template, {'items': []}) == ""
        assert self.render(template, {}) == ""
        assert self.render(template, {'items': None}) == ""
        assert self.render("<" + template + ">", {}) == "<>"

    def test_empty_with_nested_markers(self):
        template = "a{{#items}}{{x}}{{#sub}}{{y}}{{/sub}}{{!c}}{{/items}}b"

        assert self.render(template, {'items': []}) == "ab"

    def test_nested(self):
        value = {'a': [{'b': [1, 2]}, {'b': []}, {'b': [3]}]}

        assert self.render("{{#a}}[{{#b}}{{.}}{{/b}}]{{/a}}", value) == \
                                                                 "[12][][3]"

    def test_scalar_elements(self):
        assert self.render("{{#list}}<{{.}}>{{/list}}",
                                       {'list': ["x", "y"]}) == "<x><y>"

    def test_root_list(self):
        assert self.render("{{#.}}{{n}},{{/.}}", [{'n': 1}, {'n': 2}]) == \
                                                                       "1,2,"

    def test_separator(self):
        assert self.render("{{#list[, ]}}{{.}}{{/list}}",
                                        {'list': [1, 2, 3]}) == "1, 2, 3"
        assert self.render("{{#list[, ]}}{{.}}{{/list}}",
                                        {'list': []}) == ""

    def test_mapping(self):
        value = {'m': {'a': 1, 'b': 2}}

        assert self.render("{{#m}}{{~}}={{.}};{{/m}}", value) == "a=1;b=2;"

    def test_mapping_of_mappings(self):
        value = {'m': {'x': {'name': "X"}, 'y': {'name': "Y"}}}

        assert self.render("{{#m}}{{~}}:{{name}} {{/m}}", value) == "x:X y:Y "

    def test_generator(self):
        def gen():
            for i in range(3):
                yield {'i': i}

        assert self.render("{{#g}}{{i}}{{/g}}", {'g': gen()}) == "012"

    def test_result_set(self):
        conn = sqlite3.connect(':memory:')
        cursor = conn.cursor()
        cursor.execute('SELECT 1 AS id, \'Ada\' AS "name.first" '
                       'UNION ALL SELECT 2, \'Alan\'')

        value = {'rows': ResultSetAdapter(cursor)}
        assert self.render("{{#rows}}{{id}}:{{name.first}};{{/rows}}",
                                                      value) == "1:Ada;2:Alan;"

        # the section closed the cursor
        self.assertRaises(sqlite3.ProgrammingError, cursor.fetchone)

        conn.close()

    def test_nested_cursor(self):
        conn = sqlite3.connect(':memory:')
        cursor = conn.cursor()
        cursor.execute("SELECT 'a' AS name UNION ALL SELECT 'b'")

        assert self.render("{{#rows}}[{{name}}]{{/rows}}",
                                                {'rows': cursor}) == "[a][b]"

        conn.close()

    def test_nested_result(self):
        engine = create_engine('sqlite://')

        with engine.connect() as conn:
            result = conn.execute(text("SELECT 'a' AS name UNION ALL "
                                       "SELECT 'b'"))

            assert self.render("{{#rows}}[{{name}}]{{/rows}}",
                                                {'rows': result}) == "[a][b]"

    def test_nested_element(self):
        doc = etree.fromstring(b'<doc a="1"><b>x</b></doc>')

        assert self.render("{{doc.@a}}", {'doc': doc}) == "1"

    def test_nested_cursor_from_bean(self):
        conn = sqlite3.connect(':memory:')
        cursor = conn.cursor()
        cursor.execute("SELECT 'a' AS name")

        class Report(object):
            def get_rows(self):
                return cursor

        assert self.render("{{#rows}}[{{name}}]{{/rows}}", Report()) == "[a]"

        conn.close()

    def test_xml(self):
        root = etree.fromstring(
                    b'<r><item name="first">one</item><item>two</item></r>')

        assert self.render("{{#item*[,]}}{{.}}{{/item*}}|{{item.@name}}",
                                                       root) == "one,two|first"

    def test_conditional(self):
        template = "{{?flag}}yes{{/flag}}"

        assert self.render(template, {'flag': True}) == "yes"
        assert self.render(template, {'flag': "x"}) == "yes"
        assert self.render(template, {'flag': 0}) == "yes"
        assert self.render(template, {'flag': [1]}) == "yes"
        assert self.render(template, {'flag': False}) == ""
        assert self.render(template, {'flag': []}) == ""
        assert self.render(template, {}) == ""

    def test_conditional_empty_iterables(self):
        def empty():
            return
            yield

        def single():
            yield 1

        assert self.render("{{?items}}some{{/items}}", {'items': empty()}) == ""
        assert self.render("{{?items}}some{{/items}}", {'items': set()}) == ""
        assert self.render("{{?items}}some{{/items}}",
                                                 {'items': single()}) == "some"
        assert self.render("{{?items}}some{{/items}}",
                                                  {'items': set([1])}) == "some"

        assert (self.render("{{^items}}none{{/items}}", {'items': empty()}) ==
                                                                         "none")
        assert (self.render("{{^items}}none{{/items}}", {'items': set()}) ==
                                                                         "none")
        assert self.render("{{^items}}none{{/items}}",
                                                     {'items': single()}) == ""

    def test_conditional_scope(self):
        value = {'user': {'name': "A"}, 'items': [1, 2], 'title': "T"}

        assert self.render("{{?user}}{{name}}{{/user}}", value) == "A"
        assert self.render("{{?items}}{{title}}:{{#items}}{{.}}{{/items}}"
                                            "{{/items}}", value) == "T:12"

    def test_inverted(self):
        template = "{{^items}}none{{/items}}"

        assert self.render(template, {'items': []}) == "none"
        assert self.render(template, {}) == "none"
        assert self.render(template, {'items': [1]}) == ""

    def test_invalid(self):
        self.assertRaises(InvalidSectionError, self.render,
                                    "{{#a}}{{/a}}", {'a': "text"})
        self.assertRaises(InvalidSectionError, self.render,
                                    "{{#a}}{{/a}}", {'a': 5})


class TestIncludes(TemplateTestBase):
    def test_include(self):
        assert self.render("<{{>inc}}>", {'x': "a"},
                                      includes={'inc': "{{x}}"}) == "<a>"

    def test_reuse_across_iterations(self):
        value = {'rows': [{'x': i} for i in range(5)]}

        result = self.render("{{#rows}}{{>footer}}{{/rows}}", value,
                                          includes={'footer': "<{{x}}>"})

        assert result == "<0><1><2><3><4>"
        assert self.templates.opened['footer'] == 1
        assert self.templates.opened['main.txt'] == 1

    def test_reuse_in_scope(self):
        result = self.render("{{>inc}}|{{>inc}}", {'x': "a"},
                                              includes={'inc': "({{x}})"})

        assert result == "(a)|(a)"
        assert self.templates.opened['inc'] == 1

    def test_include_with_section(self):
        value = {'rows': [{'items': [1, 2]}, {'items': [3]}]}

        result = self.render("{{#rows}}{{>list}};{{/rows}}", value,
                          includes={'list': "{{#items}}{{.}}{{/items}}"})

        assert result == "12;3;"
        assert self.templates.opened['list'] == 1

    def test_include_in_empty_section(self):
        assert self.render("{{#rows}}{{>missing}}{{/rows}}",
                                                        {'rows': []}) == ""
        assert self.templates.opened['missing'] == 0

    def test_missing_include(self):
        self.assertRaises(ResourceNotFoundError, self.render, "{{>missing}}",
                                                                        {})

    def test_missing_template(self):
        serializer = TemplateSerializer('httprpc.test.templates', 'nope.html')

        self.assertRaises(ResourceNotFoundError, serializer.write_value,
                                                              StringIO(), {})

    def test_readers_closed(self):
        self.render("{{#rows}}{{>inc}}{{/rows}}", {'rows': [{}, {}]},
                                                  includes={'inc': "x"})

        assert len(self.templates.streams) == 2
        assert all(s.closed for s in self.templates.streams)

    def test_readers_closed_on_error(self):
        self.assertRaises(InvalidVariableError, self.render,
                          "{{>inc}}{{a}}", {'a': [1]}, includes={'inc': "x"})

        assert all(s.closed for s in self.templates.streams)


class TestLocalization(TemplateTestBase):
    def test_resource_bundle(self):
        assert self.render("{{@title}} {{@other}}", {},
                        resource_bundle={'title': "Hello"}) == "Hello other"

    def test_no_bundle(self):
        assert self.render("{{@title}}", {}) == "title"

    def test_context(self):
        assert self.render("{{$path}} {{$nope}}", {},
                                 context={'path': "/x"}) == "/x nope"

    def test_bundle_from_package(self):
        translations = mock.Mock()
        translations._catalog = {'': "metadata", 'title': "Merhaba"}

        with mock.patch('httprpc.serializer.template.get_bundle',
                                       return_value=translations) as get_bundle:
            result = self.render("{{@title}}", {}, locale='tr_TR')

        assert result == "Merhaba"
        args = get_bundle.call_args[0]
        assert args[1] == 'main'
        assert str(args[2]) == 'tr_TR'


class TestErrors(TemplateTestBase):
    def test_unterminated_marker(self):
        self.assertRaises(MalformedTemplateError, self.render, "{{a", {})
        self.assertRaises(MalformedTemplateError, self.render, "{{a}", {})
        self.assertRaises(MalformedTemplateError, self.render, "{{a}x", {})

    def test_empty_marker(self):
        self.assertRaises(MalformedTemplateError, self.render, "{{}}", {})
        self.assertRaises(MalformedTemplateError, self.render, "{{#}}", {})

    def test_unterminated_section(self):
        self.assertRaises(MalformedTemplateError, self.render,
                                                  "{{#a}}x", {'a': [1]})
        self.assertRaises(MalformedTemplateError, self.render,
                                                  "{{#a}}x", {'a': []})

    def test_section_end_mismatch(self):
        self.assertRaises(MalformedTemplateError, self.render,
                                            "{{#a}}x{{/b}}", {'a': [1]})
        self.assertRaises(MalformedTemplateError, self.render, "{{/a}}", {})

    def test_invalid_variable(self):
        self.assertRaises(InvalidVariableError, self.render, "{{a}}",
                                                          {'a': {'b': 1}})
        self.assertRaises(InvalidVariableError, self.render, "{{a}}",
                                                          {'a': [1, 2]})

    def test_invalid_encoding(self):
        serializer = TemplateSerializer(httprpc.test, 'main.txt',
                         resolver=lambda name: BytesIO(b"ab\xff\xfe{{x}}"))

        try:
            serializer.write_value(StringIO(), {'x': 1})
        except SerializationError as e:
            assert isinstance(e, MalformedTemplateError)
            assert isinstance(e.__cause__, UnicodeDecodeError)
        else:
            raise Exception("must fail")

    def test_close_error_keeps_render_error(self):
        serializer = TemplateSerializer(httprpc.test, 'main.txt',
                            resolver=lambda name: UnclosableStream(b"{{a}}"))

        self.assertRaises(InvalidVariableError, serializer.write_value,
                                                     StringIO(), {'a': [1]})

        # with nothing else going wrong, the close error is reported
        self.assertRaises(IOError, serializer.write_value,
                                                     StringIO(), {'a': 1})

    def test_error_class(self):
        try:
            self.render("{{a", {})
        except IOError as e:
            assert isinstance(e, SerializationError)
            assert e.faultcode == 'Server.MalformedTemplate'
        else:
            raise Exception("must fail")

    def test_output_error(self):
        stream = BrokenStream()
        serializer = self.get_serializer("{{a}}{{b}}{{c}}")

        self.assertRaises(OutputError, serializer.write_value,
                             OutputSink(stream, buffer_size=1),
                             {'a': "x", 'b': "y", 'c': "z"})

        assert stream.writes == 1

    def test_output_error_on_flush(self):
        serializer = self.get_serializer("text")

        self.assertRaises(OutputError, serializer.write_value,
                                                       BrokenStream(), {})


class TestSerializer(TemplateTestBase):
    def test_content_type(self):
        serializer = self.get_serializer("x")
        assert serializer.content_type == 'text/plain'
        assert serializer.get_content_type() == 'text/plain'

    def test_events(self):
        events = []

        serializer = self.get_serializer("{{.}}")
        serializer.event_manager.add_listener('before_serialize',
                                  lambda sink, value: events.append(('b', value)))
        serializer.event_manager.add_listener('after_serialize',
                                  lambda sink, value: events.append(('a', value)))

        serializer.write_value(StringIO(), "v")

        assert events == [('b', "v"), ('a', "v")]

    def test_package_template(self):
        serializer = TemplateSerializer(httprpc.test.templates, 'example.html',
                                        resource_bundle={'title': "Items"})

        out = StringIO()
        serializer.write_value(out, {'rows': [
            {'id': 1, 'name': "<a>"},
            {'id': 2, 'name': "b"},
        ]})

        assert out.getvalue() == (
            "<html>\n"
            "<head><title>Items</title></head>\n"
            "<body>\n"
            "<p>&lt;a&gt;</p><small>1</small>\n"
            "<p>b</p><small>2</small>\n"
            "</body>\n"
            "</html>\n"
        )

    def test_literal_text_flushed(self):
        serializer = self.get_serializer("")
        ctx = serializer.create_context()
        writer = RecordingWriter()

        buffer_size = const.DEFAULT_BUFFER_SIZE
        const.DEFAULT_BUFFER_SIZE = 4
        try:
            serializer.write_template(ctx, writer, {'x': 1},
                                 PagedReader(StringIO("abcdefghij{{x}}")), {})
        finally:
            const.DEFAULT_BUFFER_SIZE = buffer_size

        assert writer.chunks == ['abcd', 'efgh', 'ij', '1']

    def test_small_pages(self):
        value = {'rows': [{'x': i} for i in range(20)]}

        result = self.render("head {{#rows}}<{{x}}>{{/rows}} tail", value,
                                                               page_size=3)

        assert result == "head " + ''.join(["<%d>" % i for i in range(20)]) \
                                                                    + " tail"


if __name__ == '__main__':
    unittest.main()
