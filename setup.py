"""Installation script with dependencies."""

from setuptools import find_packages, setup

setup(
    name="nnloss",
    version="0.1",
    python_requires=">=3.11",
    packages=find_packages(where="src/python"),
    package_dir={"": "src/python"},
    install_requires=[
        "torch>=2.6.0",
        "ruff>=0.9.7",
        "pydantic>=2.10.6",
        "gin_config>=0.5.0",
        "termcolor>=2.5.0",
    ],
    extras_require={
        "test": ["pytest", "numpy>=1.26.4", "scipy>=1.15.0"],
    },
)
