"""
Path segments.

A compiled pattern is an ordered list of segments, one per path component.
Every segment knows how to test a single file or directory name.
"""
import copyreg
from . import util

CURRENT = '.'
PARENT = '..'
SPECIALS = frozenset((CURRENT, PARENT))


class Segment(util.Immutable):
    """Base path segment."""

    __slots__ = ('_hash',)

    # Segments that can consume a varying portion of a path contribute to the stem.
    can_produce_stem = False

    def __init__(self, **kwargs):
        """Initialize."""

        super(Segment, self).__init__(_hash=hash((type(self),) + tuple(kwargs.values())), **kwargs)

    def _args(self):
        """Arguments needed to rebuild the segment."""

        return tuple()

    def __hash__(self):
        """Hash."""

        return self._hash

    def __eq__(self, other):
        """Equal."""

        return type(self) is type(other) and self._args() == other._args()

    def __ne__(self, other):
        """Not equal."""

        return not self.__eq__(other)

    def __repr__(self):
        """Representation."""

        return '{}({})'.format(type(self).__name__, ', '.join(repr(a) for a in self._args()))

    def match(self, value, case_sensitive=True):
        """Test a file or directory name against the segment."""

        raise NotImplementedError


class LiteralSegment(Segment):
    """Plain text segment."""

    __slots__ = ('value',)

    def __init__(self, value):
        """Initialize."""

        if not value:
            raise ValueError('A literal segment cannot be empty')
        super(LiteralSegment, self).__init__(value=value)

    def _args(self):
        """Arguments needed to rebuild the segment."""

        return (self.value,)

    def match(self, value, case_sensitive=True):
        """Match the exact name."""

        if case_sensitive:
            return value == self.value
        return value.lower() == self.value.lower()


class WildcardSegment(Segment):
    """
    Segment with one or more `*`.

    `a*b*c*d` is stored as `begins_with='a'`, `contains=('b', 'c')` and `ends_with='d'`.
    The `contains` parts must be found in order, without overlapping, between the
    beginning and the end of the name.
    """

    __slots__ = ('begins_with', 'contains', 'ends_with')

    can_produce_stem = True

    def __init__(self, begins_with, contains, ends_with):
        """Initialize."""

        super(WildcardSegment, self).__init__(
            begins_with=begins_with,
            contains=tuple(contains),
            ends_with=ends_with
        )

    def _args(self):
        """Arguments needed to rebuild the segment."""

        return (self.begins_with, self.contains, self.ends_with)

    def match(self, value, case_sensitive=True):
        """Match the name against the wildcard parts."""

        if value in SPECIALS:
            return False

        begins_with = self.begins_with
        ends_with = self.ends_with
        contains = self.contains
        if not case_sensitive:
            value = value.lower()
            begins_with = begins_with.lower()
            ends_with = ends_with.lower()
            contains = [part.lower() for part in contains]

        # Lowering can change the length of some characters, so measure afterwards.
        if len(value) < len(begins_with) + len(ends_with):
            return False

        if not value.startswith(begins_with) or not value.endswith(ends_with):
            return False

        pos = len(begins_with)
        end = len(value) - len(ends_with)
        for part in contains:
            index = value.find(part, pos, end)
            if index == -1:
                return False
            pos = index + len(part)
        return True


class CurrentSegment(Segment):
    """Current directory `.`."""

    __slots__ = ()

    def match(self, value, case_sensitive=True):
        """Only the current directory name matches."""

        return value == CURRENT


class ParentSegment(Segment):
    """Parent directory `..`."""

    __slots__ = ()

    def match(self, value, case_sensitive=True):
        """Only the parent directory name matches."""

        return value == PARENT


class RecursiveWildcardSegment(Segment):
    """
    Recursive wildcard `**`.

    The compiler folds it into the starts with, contains and ends with groups
    of a pattern, so it is never tested against a name.
    """

    __slots__ = ()

    can_produce_stem = True

    def match(self, value, case_sensitive=True):
        """Never tested directly."""

        return False


def _pickle(s):
    return type(s), s._args()


for _cls in (LiteralSegment, WildcardSegment, CurrentSegment, ParentSegment, RecursiveWildcardSegment):
    copyreg.pickle(_cls, _pickle)
