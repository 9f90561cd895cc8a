
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

"""Localized string tables for ``@``-prefixed template variables.

Bundles are gettext catalogs. The bundle of the template ``user.html`` in the
``myapp.service`` package for the ``de_DE`` locale is looked up in::

    myapp/service/de_DE/LC_MESSAGES/user.mo

with the usual gettext locale fallbacks.
"""

import logging
logger = logging.getLogger(__name__)

from collections.abc import Mapping

from babel.support import Translations

from httprpc.util import get_locale


def get_bundle(dirname, basename, locale=None):
    """Loads the gettext catalog named ``basename`` for the given locale from
    ``dirname``. Returns ``None`` when there's no such catalog."""

    locale = get_locale(locale)

    retval = Translations.load(dirname, [locale], domain=basename)
    if not isinstance(retval, Translations):
        logger.debug("No bundle %r for %s in %r", basename, locale, dirname)
        return None

    logger.debug("Loaded bundle %r for %s from %r", basename, locale, dirname)
    return retval


class ResourceBundleAdapter(Mapping):
    """Read-only mapping view of a gettext translations object. Only the
    messages that are actually present in the catalog are visible."""

    def __init__(self, translations):
        if translations is None:
            raise ValueError("translations can't be None")

        self.translations = translations

    def _get_catalog(self):
        return getattr(self.translations, '_catalog', {})

    def __getitem__(self, key):
        catalog = self._get_catalog()
        if not key or not key in catalog:
            raise KeyError(key)

        return catalog[key]

    def __iter__(self):
        for k in self._get_catalog():
            # the empty key holds the catalog metadata, tuples are plurals
            if isinstance(k, str) and k:
                yield k

    def __len__(self):
        return len(list(iter(self)))

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.translations)
