# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="a2lisp",
    version="0.1.0",
    description="A minimal S-expression interpreter with a tagged cell heap",
    packages=find_namespace_packages(include=["a2lisp", "a2lisp.*"]),
    python_requires=">=3.9",
    install_requires=["numpy"],
    extras_require={"test": ["pytest", "hypothesis"]},
    entry_points={"console_scripts": ["a2lisp = a2lisp.repl:main"]},
    zip_safe=False,
)
