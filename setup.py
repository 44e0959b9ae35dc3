# setup.py
from setuptools import setup, find_packages

setup(
    name="watson-vm",
    version="0.1.0",
    description="Lexer and stack VM for the Watson bytecode language",
    packages=find_packages(include=["watson", "watson.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["watson=watson.cli:main"],
    },
    zip_safe=False,
)
