"""Setup script for the socklisten package."""

from setuptools import setup, find_packages

requires = ["blinker>=1.4", "trio>=0.26.0"]

__version__ = None
exec(open("src/socklisten/version.py").read())

setup(
    name="socklisten",
    version=__version__,
    description="Listening sockets created from address descriptors",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=requires,
    extras_require={
        "test": ["pytest>=7.0", "anyio>=4.0"],
    },
    test_suite="test",
)
