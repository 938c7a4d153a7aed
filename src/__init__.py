"""
blogmark - Markdown content compiler for the blog site

Parses the blog's Markdown dialect, applies the directive/embed/asset
transformation passes and renders static HTML.
"""

__version__ = "1.0.0"
__author__ = "創技 光"

from .lib import Parser, Renderer, Compiler, transform, LOG, state_connectToLogger

__all__ = ["Parser", "Renderer", "Compiler", "transform", "LOG", "state_connectToLogger", "__version__"]
