#!/usr/bin/env python3
"""
Setup configuration for midi2text package.
"""

from pathlib import Path

from setuptools import setup, find_packages

readme = Path(__file__).parent / 'README.md'

setup(
    name="midi2text",
    version="1.0.0",
    description="Converts MIDI files to a flat tempo/note text notation",
    long_description=readme.read_text(encoding='utf-8') if readme.exists() else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests', 'tests.*']),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Sound/Audio :: MIDI",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=['mido>=1.2.10', 'numpy>=1.19.0'],
    extras_require={
        'dev': ['pytest>=6.0.0', 'pytest-cov>=2.10.0'],
    },
    entry_points={
        'console_scripts': [
            'midi2text=midi2text.cli:main',
        ],
    },
    keywords="midi music notes text converter",
)
