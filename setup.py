"""
und-py setup.py — install the UND Mainchain client SDK.

Usage:
    pip install .                          # install everything
    pip install ".[dev]"                   # install with dev tools
    pip install ".[test]"                  # install with test tools only
"""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).resolve().parent
long_description = ""
if (HERE / "README.md").exists():
    long_description = (HERE / "README.md").read_text(encoding="utf-8")

_TEST_REQUIRES = [
    "pytest>=7.0",
    "pytest-asyncio>=0.21",
]

setup(
    name="und-py",
    version="1.0.0",
    description="Python client SDK for the UND Mainchain: keys, signing and REST client",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    author="und-py Contributors",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*", "build"]),
    install_requires=[
        "ecdsa>=0.18.0",
        "aiohttp>=3.9.0",
        "tomli>=2.0.0,<3;python_version<'3.11'",
        "pycryptodome>=3.21.0,<4",
        "mnemonic>=0.20",
        "bech32>=1.2.0",
    ],
    extras_require={
        "test": _TEST_REQUIRES,
        "dev": _TEST_REQUIRES + [
            "pytest-cov>=4.0",
            "mypy>=1.5",
            "ruff>=0.1.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries",
    ],
)
