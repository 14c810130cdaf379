import os
import sys

from setuptools import setup

sys.path.append('src')
from rteman import metadata


setup(
    name=metadata.package,
    version=metadata.version,
    description=metadata.description,
    author=metadata.authors_string,
    license=metadata.license,
    python_requires='>=3.10',
    packages=[
        'rteman',
        'rteman.loggers',
        'rteman.runtime',
        'rteman.scripts',
        'rteman.utils',
    ],
    package_dir={
        'rteman': os.path.join('src', 'rteman')
    },
    install_requires=[
        'PyYAML',
        'Jinja2',
        'invoke',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'rteman=rteman.scripts.app:main',
        ],
    }
)
