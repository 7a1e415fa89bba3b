"""Wordma blog toolkit.

Wordma keeps track of the blogs ("sites") you work on and the articles in
them, remembers which site was open last, and wraps the git and package
manager commands used to fetch themes, build them and stage the output for
deployment.

The main entry point is the CLI module. The persistence layer lives in
``store``, with ``sites``, ``settings`` and ``navigation`` built on top of it.
"""

__all__ = ["__version__", "__description__"]
__version__ = "0.1.0"
__description__ = "Blog authoring toolkit: sites, articles, themes and deployment"
