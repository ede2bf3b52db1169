"""
Tree Glob.

Compile glob patterns into path segments.

Licensed under MIT
Copyright (c) 2018 - 2020 Isaac Muse <isaacmuse@gmail.com>

Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
documentation files (the "Software"), to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
and to permit persons to whom the Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all copies or substantial portions
of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED
TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL
THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF
CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
IN THE SOFTWARE.
"""
import functools
import copyreg
import bracex
from . import util
from . import _segments

PATTERN_LIMIT = 1000

RECURSIVE_WILDCARD = '**'
WILDCARD = '*'
ANY_EXTENSION = '*.*'

# Flags
CASE = 0x0001
IGNORECASE = 0x0002
BRACE = 0x0200
FOLLOW = 0x0800
FORCEWIN = 0x10000
FORCEUNIX = 0x20000

CASE_FLAGS = CASE | IGNORECASE

FLAG_MASK = (
    CASE |
    IGNORECASE |
    BRACE |
    FOLLOW |
    FORCEWIN |
    FORCEUNIX
)


class PatternLimitException(Exception):
    """Pattern limit exception."""


def is_case_sensitive(flags):
    """Is case sensitive."""

    if bool(flags & FORCEWIN):
        case_sensitive = False
    elif bool(flags & FORCEUNIX):
        case_sensitive = True
    else:
        case_sensitive = util.is_case_sensitive()
    return case_sensitive


def get_case(flags):
    """Parse flags for case sensitivity settings."""

    if not bool(flags & CASE_FLAGS):
        case_sensitive = is_case_sensitive(flags)
    elif flags & CASE:
        case_sensitive = True
    else:
        case_sensitive = False
    return case_sensitive


def check_pattern(pattern):
    """Reject patterns that cannot be compiled."""

    if pattern is None:
        raise ValueError('Pattern cannot be None')
    if not isinstance(pattern, str):
        raise TypeError('Pattern should be a string, not {}'.format(type(pattern)))
    if not pattern:
        raise ValueError('Pattern cannot be empty')


def expand_braces(pattern, flags):
    """Expand braces."""

    if flags & BRACE:
        # Turn off limit as we are handling it ourselves.
        yield from bracex.iexpand(pattern, limit=0)
    else:
        yield pattern


def expand(pattern, flags):
    """Expand and normalize."""

    # Backslashes are path separators, not escapes, so get them out of the way first.
    for expanded in expand_braces(util.norm_slash(pattern), flags):
        if expanded:
            yield expanded


def compile(patterns, flags, limit=PATTERN_LIMIT):  # noqa A001
    """Compile patterns."""

    if patterns is None:
        raise ValueError('Pattern cannot be None')

    compiled = []
    seen = set()

    for pattern in util.to_tuple(patterns):
        check_pattern(pattern)
        for count, expanded in enumerate(expand(pattern, flags), 1):
            if 0 < limit < count:
                raise PatternLimitException("Pattern limit exceeded the limit of {:d}".format(limit))
            if expanded not in seen:
                seen.add(expanded)
                compiled.append(_compile(expanded))

    return tuple(compiled)


@functools.lru_cache(maxsize=256)
def _compile(pattern):
    """Compile a single, already expanded, pattern."""

    return PatternParser(pattern).parse()


class Pattern(util.Immutable):
    """
    Compiled pattern.

    `segments` holds every segment of the pattern in order. When the pattern has a
    recursive wildcard, it is also broken down into the segments before the first `**`
    (`starts_with`), the groups between each `**` (`contains`), and the segments after
    the last `**` (`ends_with`). Patterns without `**` leave all three as `None`.
    """

    __slots__ = ("pattern", "segments", "starts_with", "contains", "ends_with", "_hash")

    def __init__(self, pattern, segments, starts_with=None, contains=None, ends_with=None):
        """Initialization."""

        segments = tuple(segments)
        if starts_with is not None:
            starts_with = tuple(starts_with)
            contains = tuple(tuple(group) for group in contains)
            ends_with = tuple(ends_with)

        super(Pattern, self).__init__(
            pattern=pattern,
            segments=segments,
            starts_with=starts_with,
            contains=contains,
            ends_with=ends_with,
            _hash=hash((type(self), pattern, segments, starts_with, contains, ends_with))
        )

    @property
    def is_ragged(self):
        """Whether the pattern has a recursive wildcard."""

        return self.starts_with is not None

    @property
    def has_parent_segment(self):
        """Whether the pattern starts by moving up to the parent directory."""

        return isinstance(self.segments[0], _segments.ParentSegment)

    def __hash__(self):
        """Hash."""

        return self._hash

    def __eq__(self, other):
        """Equal."""

        return (
            isinstance(other, Pattern) and
            self.pattern == other.pattern and
            self.segments == other.segments and
            self.starts_with == other.starts_with and
            self.contains == other.contains and
            self.ends_with == other.ends_with
        )

    def __ne__(self, other):
        """Not equal."""

        return not self.__eq__(other)

    def __repr__(self):
        """Representation."""

        return '{}({!r})'.format(type(self).__name__, self.pattern)


class PatternParser(object):
    """
    Parse a glob pattern into path segments.

    Both `/` and `\\` separate segments. Each segment is one of:

    - `**`: any number of directories.
    - `..`: the parent directory, only at the start of a pattern.
    - `.`: the current directory; dropped as it never narrows a match.
    - text with `*`: a wildcard (`*.*` is the same as `*`).
    - anything else: a literal name.

    A pattern ending with a separator names a directory, and matches everything
    below that directory.
    """

    def __init__(self, pattern):
        """Initialize."""

        check_pattern(pattern)
        self.pattern = pattern

    def parse_segment(self, name):
        """Parse one path component."""

        if name == RECURSIVE_WILDCARD:
            return _segments.RecursiveWildcardSegment()
        elif name == _segments.PARENT:
            return _segments.ParentSegment()
        elif name == _segments.CURRENT:
            return _segments.CurrentSegment()

        if name == ANY_EXTENSION:
            name = WILDCARD

        if WILDCARD not in name:
            return _segments.LiteralSegment(name)

        parts = name.split(WILDCARD)
        # Empty runs between adjacent stars are dropped, so `a**b` is `a*b`.
        return _segments.WildcardSegment(parts[0], [part for part in parts[1:-1] if part], parts[-1])

    def parse(self):
        """Parse the pattern."""

        pattern = util.norm_slash(self.pattern).lstrip('/')
        if pattern.endswith('/'):
            pattern = pattern.rstrip('/') + '/' + RECURSIVE_WILDCARD

        segments = []
        starts_with = None
        contains = None
        ends_with = None
        parent_allowed = True

        for name in pattern.split('/'):
            if not name:
                continue

            segment = self.parse_segment(name)
            if isinstance(segment, _segments.CurrentSegment):
                continue

            if isinstance(segment, _segments.ParentSegment):
                if not parent_allowed:
                    raise ValueError(
                        "'..' can only be used at the beginning of a pattern: {!r}".format(self.pattern)
                    )
            else:
                parent_allowed = False

            if isinstance(segment, _segments.RecursiveWildcardSegment):
                if starts_with is None:
                    starts_with = list(segments)
                    contains = []
                    ends_with = []
                elif ends_with:
                    contains.append(ends_with)
                    ends_with = []
            elif ends_with is not None:
                ends_with.append(segment)

            segments.append(segment)

        if not segments:
            raise ValueError('Pattern has no path segments: {!r}'.format(self.pattern))

        return Pattern(self.pattern, segments, starts_with, contains, ends_with)


def _pickle(p):
    return Pattern, (p.pattern, p.segments, p.starts_with, p.contains, p.ends_with)


copyreg.pickle(Pattern, _pickle)
