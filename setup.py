#!/usr/bin/env python3
"""
calldist setup script
"""

import os
from setuptools import setup, find_packages

# Read the contents of README.md
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="calldist",
    version="0.1.0",
    description="Call-stack-sensitive instruction distance analysis for control-flow graphs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="calldist Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "colorama>=0.4.6,<0.5",
        "pyyaml>=6.0.1,<7",
        "pydantic>=2.4.0,<3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "black>=23.7.0",
            "isort>=5.12.0",
            "mypy>=1.5.1,<2",
            "flake8>=6.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "calldist=calldist.main:run_calldist",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Topic :: Software Development :: Quality Assurance",
    ],
    python_requires=">=3.10",
    keywords=[
        "static-analysis",
        "control-flow",
        "call-graph",
        "reachability",
        "program-analysis",
    ],
    include_package_data=True,
)
