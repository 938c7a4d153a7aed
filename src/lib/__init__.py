"""
blogmark library: parser, transformation passes, renderer and site compiler
"""

from .parser import Parser
from .transformer import Transformer, transform
from .renderer import Renderer
from .compiler import Compiler
from .directives import DirectiveRegistry, DirectiveResolver
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Transformer",
    "transform",
    "Renderer",
    "Compiler",
    "DirectiveRegistry",
    "DirectiveResolver",
    "LOG",
    "state_connectToLogger",
]
