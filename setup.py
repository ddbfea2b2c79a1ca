from setuptools import find_packages, setup

setup(
    name="pyclj",
    version="0.1.0",
    description="Clojure-style collection functions for plain Python containers",
    packages=find_packages(include=["pyclj", "pyclj.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest"],
    },
)
