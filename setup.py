"""
Setup script for eigenstats package.
"""

from setuptools import setup, find_packages

setup(
    name="eigenstats",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        # Core numerical dependencies
        "numpy>=1.20.0",
        "pandas>=1.3.0,<3",
        "scipy>=1.7.0",
        
        # Utilities
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "tests": [
            "pytest>=6.0.0",
            "scikit-learn>=1.0.0",
        ],
    },
    description="Principal component and canonical correlation analysis with eigen-decomposition",
    keywords="pca, cca, eigenvalues, multivariate statistics",
    python_requires=">=3.8",
)
