# -*- coding: utf-8 -*-
#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from setuptools import setup, find_packages

with open("README.rst") as readme:
    long_description = readme.read()

setup(
    name='reportpath',
    version='1.0.0',
    packages=find_packages(include=['reportpath', 'reportpath.*']),
    package_data={'reportpath': ['py.typed']},
    author='Davide Brunato',
    author_email='brunato@sissa.it',
    keywords=['XPath', 'XPath1', 'LALR-parser', 'ElementTree', 'lxml',
              'JUnit', 'GitHub Actions', 'annotations'],
    license='MIT',
    license_file='LICENSE',
    description='XPath 1.0 parser and selectors for ElementTree and lxml, with '
                'a report annotator for GitHub Actions',
    long_description=long_description,
    python_requires='>=3.8',
    install_requires=['PyYAML'],
    extras_require={
        'lxml': ['lxml'],
        'dev': ['tox', 'coverage', 'lxml', 'flake8', 'mypy', 'lxml-stubs', 'types-PyYAML']
    },
    entry_points={
        'console_scripts': [
            'report-annotate=reportpath.annotate.__main__:main',
        ]
    },
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Programming Language :: Python :: Implementation :: CPython',
        'Programming Language :: Python :: Implementation :: PyPy',
        'Topic :: Software Development :: Libraries',
        'Topic :: Software Development :: Testing',
        'Topic :: Text Processing :: Markup :: XML',
    ]
)
