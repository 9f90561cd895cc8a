#!/usr/bin/env python
#encoding: utf8

import io
import os
import re

from setuptools import setup
from setuptools import find_packages


with io.open(os.path.join(os.path.dirname(__file__), 'httprpc', '__init__.py'), 'r') as v:
    VERSION = re.match(r".*__version__ = '(.*?)'", v.read(), re.S).group(1)

SHORT_DESC="Streaming, template-driven response serialization for " \
"lightweight HTTP-RPC services."

LONG_DESC = """httprpc renders the values HTTP-RPC request handlers return.

Handler results, be they plain dicts, arbitrary python objects, database
cursors or xml documents, are presented as uniform, lazily evaluated mappings
and streamed to the response through mustache-like templates or as JSON,
without ever being fully loaded in memory.
"""

try:
    os.stat('CHANGELOG.rst')
    with io.open('CHANGELOG.rst', 'rb') as f:
        LONG_DESC += u"\n\n" + f.read().decode('utf8')
except OSError:
    pass


setup(
    name='httprpc',
    packages=find_packages(),

    version=VERSION,
    description=SHORT_DESC,
    long_description=LONG_DESC,
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Operating System :: OS Independent',
        'Natural Language :: English',
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
    ],
    keywords='rpc http template json sqlalchemy lxml',
    license='LGPL-2.1',
    zip_safe=False,
    python_requires='>=3.10',

    install_requires=[
        'pytz',
        'Babel',
        'lxml',
        'SQLAlchemy>=1.4',
    ],

    extras_require={
        'test': [
            'pytest',
        ],
    },

    package_data={
        'httprpc.test.templates': ['*.html'],
    },
)
