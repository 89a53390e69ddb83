#!/usr/bin/env python3
"""Setup script for promptpanel."""

from setuptools import setup, find_packages

setup(
    name="promptpanel",
    version="1.0.0",
    description="Personal prompt manager with git-backed history",
    packages=find_packages(exclude=["tests"]),
    py_modules=["promptpanel"],
    install_requires=[
        "GitPython>=3.1.40",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "promptpanel=promptpanel:main",
        ],
    },
    python_requires=">=3.9",
)
