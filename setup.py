#!/usr/bin/env python3
"""
Message Lookup Setup Script
===========================
Allows installation of the msglookup package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # With test dependencies
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="msglookup",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "msglookup-server=msglookup.server:main",
            "msglookup-client=msglookup.client:main",
        ],
    },
)
