import os

from setuptools import find_packages, setup

setup(
    name="isoschema",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.10.6,<3.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "hypothesis>=6.0.0",
        ],
    },
    author="isoschema Contributors",
    description="Declarative ISO 20022 record schemas with a fail-fast constraint validator",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
