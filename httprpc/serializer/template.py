
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

"""The ``httprpc.serializer.template`` module contains the template
serializer, which renders a value through a template that ships as a package
resource.

Templates are plain text with markers in double braces:

* ``{{name}}``, ``{{a.b.c}}``, ``{{.}}``: Variables. They may be followed
  by a chain of modifiers, e.g. ``{{price:format=currency:^html}}``.
  ``{{@key}}`` is looked up in the resource bundle and ``{{$key}}`` in the
  context. Both fall back to the key itself.
* ``{{#name}}...{{/name}}``: Repeats its body for every element of a list.
  ``{{#name[, ]}}`` writes ``, `` between repetitions. When ``name`` is a
  mapping, the body is repeated for every entry, with ``~`` bound to the
  key.
* ``{{?name}}...{{/name}}``: Renders its body if ``name`` is set, is not
  ``false`` and is not an empty list.
* ``{{^name}}...{{/name}}``: The opposite of the above.
* ``{{>name}}``: Includes another template resource from the same package.
* ``{{!...}}``: Comment.

The whole thing runs in a single forward pass over the template. Section
bodies are replayed by marking and resetting the template reader, so that
neither the template nor the data is ever fully loaded in memory.
"""

import logging
logger = logging.getLogger(__name__)

import io
import os.path

from collections.abc import Iterable
from collections.abc import Mapping
from numbers import Number

from httprpc import const
from httprpc.adapter import adapt
from httprpc.adapter.resource import ResourceBundleAdapter
from httprpc.adapter.resource import get_bundle
from httprpc.error import MalformedTemplateError
from httprpc.error import InvalidSectionError
from httprpc.error import InvalidVariableError
from httprpc.error import ResourceNotFoundError
from httprpc.io.reader import EOF
from httprpc.io.reader import EmptyReader
from httprpc.io.reader import PagedReader
from httprpc.io.writer import NullWriter
from httprpc.modifier import get_default_registry
from httprpc.modifier import ModifierRegistry
from httprpc.serializer._base import Serializer
from httprpc.util import close_all
from httprpc.util import get_locale
from httprpc.util import get_timezone
from httprpc.util import is_scalar
from httprpc.util import to_text
from httprpc.util.resource import get_resource_dir
from httprpc.util.resource import get_resource_file


SECTION_START = '#'
CONDITIONAL_SECTION_START = '?'
INVERTED_SECTION_START = '^'
SECTION_END = '/'
INCLUDE = '>'
COMMENT = '!'
VARIABLE = None

MARKER_TYPES = (SECTION_START, CONDITIONAL_SECTION_START,
                  INVERTED_SECTION_START, SECTION_END, INCLUDE, COMMENT)

_END = object()


class EmptyIncludeScope(dict):
    """Include scope of sections that have nothing to render. Includes are
    not opened, every name maps to an :class:`EmptyReader`."""

    def get(self, key, default=None):
        return EmptyReader()

    def __setitem__(self, key, value):
        pass


class MapEntryAdapter(Mapping):
    """Presents a mapping entry as a section element. ``~`` is the key, and
    the value's own keys are visible as well. A scalar value is ``.``."""

    def __init__(self, key, value):
        self.key = key
        self.value = value

    def __getitem__(self, key):
        if key == const.KEY_REFERENCE:
            return self.key

        if isinstance(self.value, Mapping):
            return self.value[key]

        if key == const.SELF_REFERENCE:
            return self.value

        raise KeyError(key)

    def __iter__(self):
        yield const.KEY_REFERENCE

        if isinstance(self.value, Mapping):
            for k in self.value:
                yield k
        else:
            yield const.SELF_REFERENCE

    def __len__(self):
        if isinstance(self.value, Mapping):
            return len(self.value) + 1
        return 2


def is_truthy(value):
    """Decides whether a conditional section is rendered."""

    if value is None or value is False:
        return False

    if isinstance(value, (str, Number, Mapping)):
        return True

    if isinstance(value, Iterable):
        return bool(value)

    return True


def split_separator(name):
    """Splits ``name[sep]`` into ``('name', 'sep')``."""

    if name.endswith(']'):
        i = name.rfind('[')
        if i != -1:
            return name[:i], name[i + 1:-1]

    return name, None


class RenderContext(object):
    """Holds the state of a single :meth:`TemplateSerializer.write_value`
    call: the readers opened so far and the localization inputs."""

    def __init__(self, serializer, locale, timezone, context, bundle,
                                                                     modifiers):
        self.serializer = serializer
        self.locale = locale
        self.timezone = timezone
        self.context = context
        self.bundle = bundle
        self.modifiers = modifiers

        self.readers = []

    def open(self, name):
        stream = self.serializer.get_template_stream(name)
        reader = PagedReader(io.TextIOWrapper(stream,
                                   encoding=self.serializer.encoding),
                                   page_size=self.serializer.page_size)

        self.readers.append(reader)
        logger.debug("Opened template %r", name)

        return reader

    def close(self, quiet=False):
        """Closes every reader opened so far. When ``quiet`` is set, close
        failures are only logged."""

        readers = self.readers[:]
        del self.readers[:]

        try:
            close_all(*readers)

        except Exception:
            if not quiet:
                raise
            # close_all logs every failure


class TemplateSerializer(Serializer):
    """Renders values through a template.

    :param service_type: The namespace templates and resource bundles are
        looked up in. A class, a module or a dotted package name.
    :param template_name: The name of the template resource, relative to
        the package of ``service_type``.
    :param content_type: The content type of the rendered output.
    :param locale: The locale for the ``format`` modifier and the resource
        bundle. A :class:`babel.Locale` or a locale code.
    :param context: A mapping for ``$``-prefixed variables.
    :param timezone: The time zone dates and times are rendered in. A
        ``tzinfo`` or a time zone name.
    :param modifiers: A :class:`httprpc.modifier.ModifierRegistry`, or a
        dict of additional modifiers to use on top of the default ones.
    :param resource_bundle: A mapping or a gettext translations object for
        ``@``-prefixed variables. When ``None``, the gettext catalog named
        after the template is loaded from the package of ``service_type``,
        if it exists.
    :param resolver: A callable that returns a binary stream for a template
        name, or ``None`` if there's no such template. Defaults to loading
        package resources.
    :param encoding: The character encoding of the templates.
    :param page_size: The page size of the template readers.
    """

    def __init__(self, service_type, template_name, content_type='text/html',
                      locale=None, context=None, timezone=None, modifiers=None,
                      resource_bundle=None, resolver=None, encoding=None,
                      page_size=None):
        super(TemplateSerializer, self).__init__(content_type)

        if service_type is None:
            raise ValueError("service_type can't be None")
        if template_name is None:
            raise ValueError("template_name can't be None")

        if encoding is None:
            encoding = const.DEFAULT_ENCODING

        if modifiers is not None and \
                                   not isinstance(modifiers, ModifierRegistry):
            registry = get_default_registry().copy()
            for k, v in modifiers.items():
                registry.register(k, v)
            modifiers = registry.freeze()

        self.service_type = service_type
        self.template_name = template_name
        self.locale = locale
        self.context = context
        self.timezone = timezone
        self.modifiers = modifiers
        self.resource_bundle = resource_bundle
        self.resolver = resolver
        self.encoding = encoding
        self.page_size = page_size

    def get_template_stream(self, name):
        """Returns a binary stream for the given template or include name."""

        if self.resolver is None:
            return get_resource_file(self.service_type, name)

        retval = self.resolver(name)
        if retval is None:
            raise ResourceNotFoundError(name)

        return retval

    def get_bundle(self, locale):
        """Returns the resource bundle for the given locale as a mapping, or
        ``None``."""

        bundle = self.resource_bundle

        if bundle is None:
            basename = os.path.splitext(
                                      os.path.basename(self.template_name))[0]
            try:
                dirname = get_resource_dir(self.service_type)

            except ImportError as e:
                logger.debug("No resource directory for %r: %r",
                                                          self.service_type, e)
                return None

            bundle = get_bundle(dirname, basename, locale)

        if bundle is None or isinstance(bundle, Mapping):
            return bundle

        return ResourceBundleAdapter(bundle)

    def create_context(self):
        locale = get_locale(self.locale)

        modifiers = self.modifiers
        if modifiers is None:
            modifiers = get_default_registry()

        context = self.context
        if context is None:
            context = {}

        return RenderContext(self, locale, get_timezone(self.timezone),
                                   context, self.get_bundle(locale), modifiers)

    def serialize(self, sink, value):
        ctx = self.create_context()

        failed = True

        try:
            reader = ctx.open(self.template_name)
            self.write_template(ctx, sink, adapt(value), reader, {})
            failed = False

        except UnicodeDecodeError as e:
            raise MalformedTemplateError("Template is not valid %s: %s"
                                                   % (self.encoding, e)) from e

        finally:
            ctx.close(quiet=failed)

    def write_template(self, ctx, writer, root, reader, includes,
                                                                  section=None):
        """Renders ``reader`` against ``root`` until the end of the stream or,
        when ``section`` is given, until the end marker of that section."""

        self.check_sink(writer)

        if isinstance(root, Mapping):
            dictionary = root
        else:
            dictionary = {const.SELF_REFERENCE: root}

        text = []

        while True:
            c = reader.read()
            if c == EOF:
                break

            if c != '{':
                text.append(c)
                if len(text) >= const.DEFAULT_BUFFER_SIZE:
                    self.write_text(writer, text)
                continue

            c = reader.read()
            if c == EOF:
                text.append('{')
                break

            if c != '{':
                text.append('{')
                text.append(c)
                continue

            self.write_text(writer, text)

            marker_type, marker = self.read_marker(reader)

            self.check_sink(writer)

            if marker_type == SECTION_END:
                if section is None or marker != section:
                    raise MalformedTemplateError(
                          "Invalid closing section marker %r, expected %r"
                                                            % (marker, section))
                return

            if marker_type == SECTION_START:
                self.write_section(ctx, writer, dictionary, reader, marker)

            elif marker_type == CONDITIONAL_SECTION_START:
                value = self.get_value(dictionary, marker)
                self.write_conditional_section(ctx, writer, dictionary, reader,
                                          includes, marker, is_truthy(value),
                                          value)

            elif marker_type == INVERTED_SECTION_START:
                value = self.get_value(dictionary, marker)
                self.write_conditional_section(ctx, writer, dictionary, reader,
                                      includes, marker, not is_truthy(value),
                                      None)

            elif marker_type == INCLUDE:
                self.write_include(ctx, writer, dictionary, includes, marker)

            elif marker_type == COMMENT:
                pass

            else:
                self.write_variable(ctx, writer, dictionary, marker)

        self.write_text(writer, text)

        if section is not None:
            raise MalformedTemplateError("Unterminated section %r" % section)

    def write_text(self, writer, text):
        """Writes and clears the literal text gathered so far."""

        if len(text) > 0:
            self.check_sink(writer)
            writer.write(''.join(text))
            del text[:]

    @staticmethod
    def read_marker(reader):
        """Reads the rest of a marker after the opening braces. Returns a
        ``(marker_type, marker)`` tuple."""

        c = reader.read()

        if c in MARKER_TYPES:
            marker_type = c
            c = reader.read()
        else:
            marker_type = VARIABLE

        chars = []
        while c != '}':
            if c == EOF:
                raise MalformedTemplateError(
                                          "Unexpected end of character stream.")
            chars.append(c)
            c = reader.read()

        if reader.read() != '}':
            raise MalformedTemplateError("Improperly terminated marker.")

        marker = ''.join(chars)
        if len(marker) == 0:
            raise MalformedTemplateError("Invalid marker.")

        return marker_type, marker

    def write_section(self, ctx, writer, dictionary, reader, marker):
        name, separator = split_separator(marker)

        value = self.get_value(dictionary, name)

        if value is None:
            elements = iter(())
        elif isinstance(value, Mapping):
            elements = (MapEntryAdapter(k, value[k]) for k in value)
        elif isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise InvalidSectionError(name, value)
        else:
            elements = iter(value)

        try:
            element = next(elements, _END)

            if element is _END:
                self.write_template(ctx, NullWriter(), None, reader,
                                                  EmptyIncludeScope(), name)

            else:
                includes = {}
                first = True

                while element is not _END:
                    following = next(elements, _END)

                    if following is not _END:
                        reader.mark()

                    if separator is not None and not first:
                        writer.write(separator)

                    self.write_template(ctx, writer, element, reader, includes,
                                                                           name)

                    if following is not _END:
                        reader.reset()

                    element = following
                    first = False

        finally:
            close = getattr(value, 'close', None)
            if close is not None:
                close()

    def write_conditional_section(self, ctx, writer, dictionary, reader,
                                           includes, marker, condition, value):
        if not condition:
            self.write_template(ctx, NullWriter(), None, reader,
                                                  EmptyIncludeScope(), marker)

        elif isinstance(value, Mapping):
            self.write_template(ctx, writer, value, reader, {}, marker)

        else:
            self.write_template(ctx, writer, dictionary, reader, includes,
                                                                         marker)

    def write_include(self, ctx, writer, dictionary, includes, name):
        reader = includes.get(name, None)

        if reader is None:
            reader = ctx.open(name)
            includes[name] = reader

        else:
            logger.debug("Replaying include %r", name)
            reader.reset()

        self.write_template(ctx, writer, dictionary, reader, includes)

    def write_variable(self, ctx, writer, dictionary, marker):
        components = marker.split(':')
        name = components[0]

        value = self.resolve(ctx, dictionary, name)
        if value is None:
            return

        if not is_scalar(value):
            raise InvalidVariableError(name, value)

        for m in components[1:]:
            modifier_name, eq, argument = m.partition('=')
            if len(eq) == 0:
                argument = None

            modifier = ctx.modifiers.resolve(modifier_name)
            if modifier is None:
                continue

            value = modifier.apply(value, argument, locale=ctx.locale,
                                                        timezone=ctx.timezone)
            if value is None:
                return

        writer.write(to_text(value))

    def resolve(self, ctx, dictionary, name):
        """Resolves a variable name against the given dictionary, the
        resource bundle or the context."""

        if name.startswith(const.RESOURCE_PREFIX):
            key = name[len(const.RESOURCE_PREFIX):]
            if ctx.bundle is not None and key in ctx.bundle:
                return ctx.bundle[key]
            return key

        if name.startswith(const.CONTEXT_PREFIX):
            key = name[len(const.CONTEXT_PREFIX):]
            if key in ctx.context:
                return ctx.context[key]
            return key

        return self.get_value(dictionary, name)

    @staticmethod
    def get_value(dictionary, path):
        """Walks the given dotted path. Returns ``None`` when a component is
        missing or its parent is not a mapping."""

        if path == const.SELF_REFERENCE:
            return dictionary.get(const.SELF_REFERENCE, None)

        value = dictionary
        for key in path.split(const.PATH_SEPARATOR):
            if not isinstance(value, Mapping):
                return None

            value = value.get(key, None)

        return value

    def __repr__(self):
        return "%s(%r, %r)" % (self.__class__.__name__, self.service_type,
                                                             self.template_name)
