#!/usr/bin/env python3
"""
Setup script for nldebug package.
"""

from setuptools import setup

# Read long description from README
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="nldebug",
    version="1.0.0",
    author="Harry Coin",
    author_email="hcoin@quietfountain.com",
    description="Netlink control-plane debug instrumentation: hex/ASCII dumps, socket call logging and protocol code names",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/hcoin/nldebug",
    project_urls={
        "Bug Tracker": "https://github.com/hcoin/nldebug/issues",
        "Documentation": "https://github.com/hcoin/nldebug#readme",
        "Source Code": "https://github.com/hcoin/nldebug",
    },
    packages=["nldebug"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: System :: Networking",
        "Topic :: System :: Monitoring",
        "Topic :: Software Development :: Debuggers",
    ],
    python_requires=">=3.8",
    install_requires=[
        "cffi>=1.12.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "nldebug=nldebug.cli:main",
        ],
    },
)
