#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Setup script for seqstream, a streaming FASTA reader with an
alphabet-aware sequence model.
"""

from setuptools import setup

setup(
    name="seqstream",
    version="0.1.0",
    description="Streaming FASTA parsing and biological sequence operations",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=["seqstream"],
    install_requires=[
        "numpy>=1.20.0",
        "pandas>=1.3.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    python_requires=">=3.8",
    zip_safe=False,
    platforms="any",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
