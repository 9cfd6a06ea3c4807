"""
Setup script for playquiz.

playquiz runs timed educational quiz sessions in the terminal. One
generic session controller drives every question format:

1. Multiple choice, comparison, fill in the blank
2. Sentence and number sorting, missing-number sequences, arithmetic
3. Reading practice scored by a fuzzy accuracy matcher

The 'playquiz' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="playquiz",
    version="0.1.0",
    description="Timed educational quiz sessions with retries, hints and reading practice",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP (speech recognition service)
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
        # Edit distance for the accuracy matcher
        "rapidfuzz>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "playquiz=playquiz.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="quiz education reading-practice cli",
)
