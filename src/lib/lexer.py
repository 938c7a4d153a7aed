"""
Custom Pygments lexer for the blog Markdown dialect

Highlights directive and Markdown markup when a post shows dialect source
in a ```blogmark fence (e.g. a "how to write posts" article).

Token types:
- Keyword.Declaration: Callout directives (:::info, :::warning, ...)
- Literal.Number: Widget directives (:::download, :::audio, :::slider)
- Name.Tag: Other directive names and the closing :::
- Name.Attribute / Literal.String: key="value" attributes
- Generic.Heading: # headings
- String: $math$ spans
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
    Generic,
)


class BlogmarkLexer(RegexLexer):
    """
    Lexer for the blog Markdown dialect

    Example:
        :::download{file="a.pdf" name="資料"}
        :::

    Tokens:
        ::: → Punctuation
        download → Literal.Number
        { → Punctuation
        file → Name.Attribute
        "a.pdf" → Literal.String
    """

    name = 'Blogmark'
    aliases = ['blogmark', 'bm']
    filenames = []

    tokens = {
        'root': [
            # HTML comments
            (r'<!--.*?-->', Comment),

            # Callout directives
            (r'^(:{3,})((info|warning|danger|success))\b',
             bygroups(Punctuation, Keyword.Declaration, None), 'directive'),

            # Widget and layout directives
            (r'^(:{3,})((download|audio|slider))\b',
             bygroups(Punctuation, Literal.Number, None), 'directive'),

            # Other directives
            (r'^(:{3,})([a-zA-Z][\w-]*)', bygroups(Punctuation, Name.Tag), 'directive'),

            # Closing fence
            (r'^:{3,}[ \t]*$', Name.Tag),

            # Code fences, with optional language:filename
            (r'^(`{3,}|~{3,})([^\n]*)', bygroups(Punctuation, Name.Label)),

            # Headings
            (r'^#{1,6}[ \t][^\n]*', Generic.Heading),

            # Display and inline math
            (r'\$\$', String),
            (r'\$[^$\n]+\$', String),

            # Images and links
            (r'(!?\[)([^\]\n]*)(\]\()([^)\n]*)(\))',
             bygroups(Punctuation, Text, Punctuation, Name.Builtin, Punctuation)),

            # HTML tags pass through
            (r'<[^>\n]+>', Name.Builtin),

            # Emphasis markers
            (r'\*\*[^*\n]+\*\*', Generic.Strong),
            (r'==[^=\n]+==', Generic.Emph),

            (r'[^:$!\[<*=`~#\n]+', Text),
            (r'\n', Text),
            (r'.', Text),
        ],

        'directive': [
            (r'\{', Punctuation),
            (r'\}', Punctuation),
            (r'([a-zA-Z_][\w-]*)(=)("[^"\n]*"|\'[^\'\n]*\'|[^\s}]+)',
             bygroups(Name.Attribute, Punctuation, Literal.String)),
            (r'[#.][\w-]+', Name.Decorator),
            (r'[ \t]+', Text),
            (r'\n', Text, '#pop'),
            (r'.', Text),
        ],
    }


def get_lexer() -> BlogmarkLexer:
    """
    Get the BlogmarkLexer instance

    Returns:
        BlogmarkLexer instance ready for use with Pygments
    """
    return BlogmarkLexer()
