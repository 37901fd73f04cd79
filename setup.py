#!/usr/bin/env python
"""Setup for authorized-persona."""

import re
from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def get_about() -> dict:
    text = (HERE / "authorized_persona" / "version.py").read_text()
    return dict(re.findall(r'^(__\w+__) = "([^"]*)"$', text, re.M))


about = get_about()

if __name__ == "__main__":
    setup(
        name=about["__title__"],
        version=about["__version__"],
        description=about["__description__"],
        author=about["__author__"],
        author_email=about["__author_email__"],
        license=about["__license__"],
        python_requires=">=3.9",
        packages=find_packages(exclude=["tests", "tests.*"]),
        install_requires=[
            "navconfig>=1.7.0",
            "navigator-session",
            "aiohttp>=3.9.0",
            "yarl>=1.9.0",
        ],
        extras_require={
            "test": [
                "pytest>=7.4.0",
                "pytest-asyncio>=0.23.0",
            ],
        },
    )
