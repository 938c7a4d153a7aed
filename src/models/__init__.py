"""
Models package for blogmark

Contains data structures and type definitions for the build pipeline.
"""

from .state import ProgramState, pipeline
from .tree import Node
from .directives import DirectiveName, DirectiveCategory, DirectiveDescriptor, DirectiveSpec
from .embeds import Provider, EmbedMatch
from .content import Collection, BlogEntry, NewsEntry, EventEntry, SeriesInfo
from .storage import UploadResult, StoredObject, ListResult

__all__ = [
    "ProgramState",
    "pipeline",
    "Node",
    "DirectiveName",
    "DirectiveCategory",
    "DirectiveDescriptor",
    "DirectiveSpec",
    "Provider",
    "EmbedMatch",
    "Collection",
    "BlogEntry",
    "NewsEntry",
    "EventEntry",
    "SeriesInfo",
    "UploadResult",
    "StoredObject",
    "ListResult",
]
