"""Setuptools setup script for P4Runner."""

# cSpell:ignore dotmap

from pathlib import Path
from setuptools import find_packages, setup  # Always prefer setuptools over distutils

import p4runner

setup(
    name=p4runner.__title__,
    version=p4runner.__version__,

    description=p4runner.__summary__,
    long_description=(Path(__file__).parent / 'DOCUMENTATION.md').read_text(encoding='UTF-8'),
    long_description_content_type='text/markdown',
    keywords='perforce p4 ztag automation',

    author=p4runner.__author__,
    author_email=p4runner.__email__,
    license=p4runner.__license__,

    url=p4runner.__uri__,

    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'License :: OSI Approved :: MIT License',

        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3.12',

        'Intended Audience :: Developers',
        'Topic :: Software Development :: Version Control',
        'Natural Language :: English',
    ],

    python_requires='>=3.11',
    packages=find_packages(exclude=['tests']),
    install_requires=['dotmap ~= 1.3',
                      'PyYAML ~= 6.0'],
    extras_require={
        'dev': ['setuptools', 'wheel', 'unittest-xml-reporting'],
        'test': ['pytest']},
    entry_points={
        'console_scripts': ['p4bump = p4runner.bumper:main'],
    },
    package_data={'p4runner': ['py.typed']}
)
