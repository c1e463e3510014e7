"""
Setup script for practice-engine.

Practice Engine ranks a pool of candidate practice problems for a learner
and answers "what should I practice next?". It fuses five heuristics:

1. Difficulty progression - contest-tier graph plus ordinal fallback
2. Concept coverage - missing concepts and current topics
3. Solve history - novelty and retry signals
4. Spaced repetition - review due-timing
5. Diversity - unseen concepts

The 'practice-engine' command is a thin developer CLI over JSON fixtures.
"""

from setuptools import find_packages, setup

setup(
    name="practice-engine",
    version="1.0.0",
    description="Multi-criteria practice problem recommendation and review scheduling engine",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Practice Engine Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "practice-engine=practice_engine.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition recommendation competitive-programming practice",
)
