"""
Setup script for the xmlconf configuration package.
"""

from setuptools import setup, find_packages

setup(
    name="xmlconf",
    version="1.0.0",
    description="XML-backed hierarchical key/value configuration with typed accessors",
    author="xmlconf Team",
    packages=find_packages(include=["xmlconf", "xmlconf.*"]),
    python_requires=">=3.9",
    install_requires=[
        # Core dependencies
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
