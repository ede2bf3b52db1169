"""
Track the match state of one pattern while walking a directory tree.

The walker pushes a frame for every directory it enters and pops it when it
leaves, so the top frame always describes how far the current directory has
progressed through the pattern. Frames are immutable, a push stores a modified
copy of the parent frame and a pop simply restores the parent.

Patterns without `**` use the linear contexts: one segment is consumed per directory.

Patterns with `**` use the ragged contexts. The walk never revisits a directory,
so instead of backtracking, every directory absorbed by a `**` bumps
`backtrack_available`. Once enough directories have been absorbed, the trailing
directories (read back through each entry's `parent`) are compared against the
next required group. Every valid placement of a group is a trailing window at
some depth, and every depth gets checked.
"""
from collections import namedtuple
from . import _segments


class LinearFrame(namedtuple('LinearFrame', ['is_not_applicable', 'segment_index', 'in_stem', 'stem_items'])):
    """Linear pattern progress at one directory depth."""


class RaggedFrame(
    namedtuple(
        'RaggedFrame',
        [
            'is_not_applicable', 'segment_group_index', 'segment_group', 'backtrack_available',
            'segment_index', 'in_stem', 'stem_items'
        ]
    )
):
    """Ragged pattern progress at one directory depth."""


class PatternTestResult(namedtuple('PatternTestResult', ['is_successful', 'stem'])):
    """Result of testing a file against a pattern."""


FAILED = PatternTestResult(False, None)


def _stem(frame, name):
    """Join the stem of the frame with a file name."""

    return '/'.join(frame.stem_items + (name,))


class PatternContext(object):
    """Frame stack of one pattern."""

    def __init__(self, pattern, case_sensitive=True):
        """Initialize."""

        self.pattern = pattern
        self.case_sensitive = case_sensitive
        self._stack = []

    @property
    def frame(self):
        """Frame of the current directory."""

        if not self._stack:
            raise RuntimeError('No directory has been pushed for {!r}'.format(self.pattern))
        return self._stack[-1]

    @property
    def depth(self):
        """Number of directories currently pushed."""

        return len(self._stack)

    def is_stack_empty(self):
        """Check if no directory has been entered yet."""

        return not self._stack

    def push_directory(self, directory):
        """Enter a directory."""

        raise NotImplementedError

    def pop_directory(self):
        """Leave the current directory."""

        if not self._stack:
            raise RuntimeError('Directory stack of {!r} is already empty'.format(self.pattern))
        self._stack.pop()

    def test_file(self, file):
        """Test a file in the current directory."""

        raise NotImplementedError

    def test_directory(self, directory):
        """Test a directory in the current directory."""

        raise NotImplementedError


class LinearPatternContext(PatternContext):
    """Match state for patterns without `**`."""

    def push_directory(self, directory):
        """Enter a directory."""

        if self.is_stack_empty():
            frame = LinearFrame(False, 0, False, ())
        else:
            frame = self.frame
            if frame.is_not_applicable:
                pass
            elif not self._test_matching_segment(directory.name):
                frame = frame._replace(is_not_applicable=True)
            else:
                segment = self.pattern.segments[frame.segment_index]
                in_stem = frame.in_stem or segment.can_produce_stem
                frame = frame._replace(
                    segment_index=frame.segment_index + 1,
                    in_stem=in_stem,
                    stem_items=frame.stem_items + (directory.name,) if in_stem else frame.stem_items
                )
        self._stack.append(frame)

    def _is_last_segment(self):
        """Check if the current directory is positioned on the last segment."""

        return self.frame.segment_index == len(self.pattern.segments) - 1

    def _test_matching_segment(self, name):
        """Test a name against the segment for the current directory."""

        index = self.frame.segment_index
        segments = self.pattern.segments
        return index < len(segments) and segments[index].match(name, self.case_sensitive)

    def test_file(self, file):
        """The file must match the last segment."""

        frame = self.frame
        if frame.is_not_applicable:
            return FAILED

        if self._is_last_segment() and self._test_matching_segment(file.name):
            return PatternTestResult(True, _stem(frame, file.name))
        return FAILED


class LinearIncludeContext(LinearPatternContext):
    """Linear include pattern."""

    def test_directory(self, directory):
        """A directory is worth entering if it matches a segment with more segments to follow."""

        if self.frame.is_not_applicable:
            return False

        return not self._is_last_segment() and self._test_matching_segment(directory.name)


class LinearExcludeContext(LinearPatternContext):
    """Linear exclude pattern."""

    def test_directory(self, directory):
        """A directory matching the last segment is excluded with everything in it."""

        if self.frame.is_not_applicable:
            return False

        return self._is_last_segment() and self._test_matching_segment(directory.name)


class RaggedPatternContext(PatternContext):
    """Match state for patterns with `**`."""

    def push_directory(self, directory):
        """Enter a directory."""

        pattern = self.pattern

        if self.is_stack_empty():
            self._push(RaggedFrame(False, -1, pattern.starts_with, 0, 0, False, ()))
            return

        frame = self.frame
        if frame.is_not_applicable:
            self._stack.append(frame)
            return

        is_not_applicable = False
        segment_index = frame.segment_index
        backtrack_available = frame.backtrack_available
        in_stem = frame.in_stem

        if self._is_starting_group():
            if not self._test_matching_segment(directory.name):
                is_not_applicable = True
            else:
                in_stem = in_stem or frame.segment_group[segment_index].can_produce_stem
                segment_index += 1
        elif directory.name == _segments.PARENT:
            is_not_applicable = True
        else:
            in_stem = True
            if not self._is_ending_group() and self._test_matching_group(directory):
                segment_index = len(frame.segment_group)
                backtrack_available = 0
            else:
                backtrack_available += 1

        if is_not_applicable:
            self._stack.append(frame._replace(is_not_applicable=True))
            return

        self._push(
            frame._replace(
                segment_index=segment_index,
                backtrack_available=backtrack_available,
                in_stem=in_stem,
                stem_items=frame.stem_items + (directory.name,) if in_stem else frame.stem_items
            )
        )

    def _push(self, frame):
        """Move past every group that is complete and push the frame."""

        contains = self.pattern.contains
        segment_group_index = frame.segment_group_index
        segment_group = frame.segment_group
        segment_index = frame.segment_index

        while segment_index == len(segment_group) and segment_group_index != len(contains):
            segment_group_index += 1
            segment_index = 0
            if segment_group_index < len(contains):
                segment_group = contains[segment_group_index]
            else:
                segment_group = self.pattern.ends_with

        self._stack.append(
            frame._replace(
                segment_group_index=segment_group_index,
                segment_group=segment_group,
                segment_index=segment_index
            )
        )

    def _is_starting_group(self):
        """Check if still matching the segments before the first `**`."""

        return self.frame.segment_group_index == -1

    def _is_ending_group(self):
        """Check if matching the segments after the last `**`."""

        return self.frame.segment_group_index == len(self.pattern.contains)

    def _test_matching_segment(self, name):
        """Test a name against the next segment of the current group."""

        frame = self.frame
        if frame.segment_index >= len(frame.segment_group):
            return False
        return frame.segment_group[frame.segment_index].match(name, self.case_sensitive)

    def _test_matching_group(self, entry):
        """Test the trailing path components ending at the entry against the whole current group."""

        frame = self.frame
        group = frame.segment_group
        group_length = len(group)
        if frame.backtrack_available + 1 < group_length:
            return False

        scan = entry
        for index in range(group_length):
            if scan is None or not group[group_length - index - 1].match(scan.name, self.case_sensitive):
                return False
            scan = scan.parent
        return True

    def test_file(self, file):
        """The file must complete the segments after the last `**`."""

        frame = self.frame
        if frame.is_not_applicable:
            return FAILED

        if self._is_ending_group() and self._test_matching_group(file):
            return PatternTestResult(True, _stem(frame, file.name))
        return FAILED


class RaggedIncludeContext(RaggedPatternContext):
    """Ragged include pattern."""

    def test_directory(self, directory):
        """Past the starting segments, `**` can reach into any directory."""

        if self.frame.is_not_applicable:
            return False

        if self._is_starting_group():
            return self._test_matching_segment(directory.name)
        return directory.name != _segments.PARENT


class RaggedExcludeContext(RaggedPatternContext):
    """Ragged exclude pattern."""

    def test_directory(self, directory):
        """Check if the directory, and everything in it, is excluded."""

        frame = self.frame
        pattern = self.pattern
        if frame.is_not_applicable:
            return False

        if self._is_ending_group() and self._test_matching_group(directory):
            return True

        if not pattern.ends_with:
            if self._is_starting_group():
                # `a/b/**`: the directory completes the starting segments.
                return (
                    not pattern.contains and
                    frame.segment_index == len(frame.segment_group) - 1 and
                    self._test_matching_segment(directory.name)
                )
            # `**/bin/**`: the directory completes the last group.
            return frame.segment_group_index == len(pattern.contains) - 1 and self._test_matching_group(directory)

        return False


def create_include(pattern, case_sensitive=True):
    """Create the include context fitting the pattern."""

    cls = RaggedIncludeContext if pattern.is_ragged else LinearIncludeContext
    return cls(pattern, case_sensitive)


def create_exclude(pattern, case_sensitive=True):
    """Create the exclude context fitting the pattern."""

    cls = RaggedExcludeContext if pattern.is_ragged else LinearExcludeContext
    return cls(pattern, case_sensitive)
