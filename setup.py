"""
Setup script for pdf-process.

This script configures the package for installation via pip.
The poppler utilities (pdfinfo, pdftocairo, pdftotext) must be installed
separately and available on PATH or through PDF_PROCESS_POPPLER_PATH.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

# Read requirements
with open(this_directory / "requirements.txt") as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith("#")]

setup(
    name="pdf-process",
    version="0.2.0",
    description="Async wrapper around the poppler command-line tools for PDF info, rendering and text extraction",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="pdf-process Contributors",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
            "pypdf>=3.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
            "pytest-cov>=4.0.0",
            "pypdf>=3.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdf-process=pdf_process.cli:cli",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf poppler pdfinfo pdftocairo pdftotext render text asyncio cli",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
