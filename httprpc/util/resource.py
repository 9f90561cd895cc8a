
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

"""Lookup of templates and other files that ship inside python packages.

Resources are addressed the way service classes see them: a namespace, which
is a dotted package name, a module or a class, and a file name relative to
that package.
"""

import logging
logger = logging.getLogger(__name__)

import os.path
import sys

from importlib.resources import files

from httprpc.error import ResourceNotFoundError


def get_namespace(ns):
    """Returns the dotted name of the package that holds the resources of the
    given namespace."""

    if isinstance(ns, str):
        return ns

    if isinstance(ns, type):
        ns = sys.modules[ns.__module__]

    if hasattr(ns, '__path__'):
        return ns.__name__

    return ns.__package__ or ns.__name__.rpartition('.')[0]


def _get_resource(ns, fn):
    try:
        retval = files(get_namespace(ns))
    except (ImportError, TypeError):
        raise ResourceNotFoundError(fn)

    for part in fn.split('/'):
        if part in ('', '.'):
            continue
        retval = retval.joinpath(part)

    if not retval.is_file():
        raise ResourceNotFoundError(fn)

    return retval


def get_resource_path(ns, fn):
    return os.path.abspath(str(_get_resource(ns, fn)))


def get_resource_dir(ns):
    return os.path.abspath(str(files(get_namespace(ns))))


def get_resource_file(ns, fn):
    """Opens the given resource for reading in binary mode. Raises
    :class:`httprpc.error.ResourceNotFoundError` when it does not exist."""

    retval = _get_resource(ns, fn).open('rb')
    logger.debug("Opened resource %r from %r", fn, ns)

    return retval


def get_resource_file_contents(ns, fn, enc=None):
    with get_resource_file(ns, fn) as f:
        retval = f.read()

    if enc is None:
        return retval

    return retval.decode(enc)
