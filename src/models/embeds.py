"""
Embed provider models

Provider tags and the transient match produced when a bare URL is tested
against a provider pattern.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict


class Provider(Enum):
    """Embeddable providers, in matching priority order"""
    YOUTUBE = "youtube"         # video host
    TWITTER = "twitter"         # social post
    CODEPEN = "codepen"         # interactive snippet (pen)
    GITHUB = "github"           # code-hosting repository
    CODESANDBOX = "codesandbox" # cloud sandbox


@dataclass
class EmbedMatch:
    """
    Result of matching a URL against a provider pattern

    Attributes:
        provider: Which provider matched
        url: The original URL, rendered as the footer link
        ids: Provider-specific captures (video_id, post_id, pen_id,
             owner/repo, sandbox_id)

    Example:
        EmbedMatch(provider=Provider.GITHUB, url="https://github.com/foo/bar",
                   ids={"owner": "foo", "repo": "bar"})
    """
    provider: Provider
    url: str
    ids: Dict[str, str] = field(default_factory=dict)
