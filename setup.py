"""
Setup script for the victordle package.

Installs the engine from the src/ layout together with the SQLite
schema used by the SQLite document store.
"""

from setuptools import setup, find_packages

setup(
    name="victordle",
    version="1.0.0",
    description="Victordle - serverless matchmaking and game-session engine for two-player Wordle",
    author="Victordle Team",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "victordle": ["_store/schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "victordle=victordle.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
