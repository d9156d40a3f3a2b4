"""
Setup script for MAC2D package.

This allows the package to be installed in development mode:
    pip install -e .

Or for regular installation:
    pip install .

Test dependencies:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="mac2d",
    version="0.1.0",
    description="2D Incompressible Navier-Stokes Solver on a Staggered (MAC) Grid",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "scripts"]),
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={"test": ["pytest>=7"]},
)
