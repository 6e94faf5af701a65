"""Package setup for zip_rewriter."""

from setuptools import setup, find_packages

setup(
    name="zip-rewriter",
    version="1.0.0",
    description="Reference discovery and rewriting for CSS/HTML/XML served out of zip archives",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "beautifulsoup4>=4.12.0",
        "lxml>=5.0.0",
        "colorlog>=6.8.0",
        "tqdm>=4.66.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "zip-rewriter=zip_rewriter.cli:main",
        ],
    },
)
