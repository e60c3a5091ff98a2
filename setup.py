#!/usr/bin/env python
"""Setup script for pipeflow-mcp package."""

from setuptools import setup, find_packages

# Read the README file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="pipeflow-mcp",
    version="0.1.0",
    author="Puran Water LLC",
    author_email="engineering@puranwater.com",
    description="MCP server for pipe pressure loss and flowrate calculations with the Churchill friction factor",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/puran-water/pipeflow-mcp",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["server"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Scientific/Engineering",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "mcp>=1.0.0,<2",
        "pydantic>=2.0.0",
        "fluids>=1.0.26",
        "scipy>=1.10.0",
        "numpy>=1.24.0",
        "CoolProp>=6.4.1",
        "pint>=0.22",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pipeflow-mcp=server:main",
        ],
    },
)
