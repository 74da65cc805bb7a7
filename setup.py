#!/usr/bin/env python

from setuptools import setup

setup(
    name="pbxkit",
    version="0.1.0",
    packages=[
        "pbxkit",
        "pbxkit.details",
        "pbxkit.details.tools",
        "pbxkit.xcode",
    ],
    python_requires=">=3.9",
    extras_require={"test": ["pytest", "hypothesis"]},
    entry_points={"console_scripts": ["pbxkit = pbxkit.__main__:main"]},
)
