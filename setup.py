"""
fast-constraints setup configuration

Minimal setup.py for backward compatibility.
All configuration lives in pyproject.toml.
"""

from setuptools import setup

setup()
