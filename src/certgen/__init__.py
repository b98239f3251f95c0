# certgen/__init__.py

"""
certgen - Class-based X.509 Certificate Generator
=================================================

This module provides tools for issuing root, intermediate and leaf certificates
graded into three assurance classes, each fixing key strength, validity,
permitted key usages and CA path length.
"""

# ---- Package metadata ----
__version__ = "0.9.0"
__title__ = "Class-based Certificate Generator"
__short_title__ = "certgen"
__author__ = "certgen contributors"
__license__ = "MIT"


# ---- Public exports ----
__all__ = [
    "__version__",
    "__title__",
    "__short_title__",
    "__author__",
    "__license__",
]
