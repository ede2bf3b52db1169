"""
Tree Glob.

Match include and exclude glob patterns against a directory tree in one walk.

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
import os
import logging
from collections import namedtuple
from . import _parse
from . import _context
from . import _segments
from . import dirinfo

__all__ = (
    "CASE", "IGNORECASE", "BRACE", "FOLLOW", "FORCEWIN", "FORCEUNIX",
    "C", "I", "B", "L", "W", "U",
    "PATTERN_LIMIT", "PatternLimitException",
    "FilePatternMatch", "PatternMatchingResult", "MatcherContext", "Matcher"
)

logger = logging.getLogger(__name__)

C = CASE = _parse.CASE
I = IGNORECASE = _parse.IGNORECASE
B = BRACE = _parse.BRACE
L = FOLLOW = _parse.FOLLOW
W = FORCEWIN = _parse.FORCEWIN
U = FORCEUNIX = _parse.FORCEUNIX

FLAG_MASK = _parse.FLAG_MASK

PATTERN_LIMIT = _parse.PATTERN_LIMIT
PatternLimitException = _parse.PatternLimitException


def _flag_transform(flags):
    """Transform flags to matcher defaults."""

    # Enabling both cancels out
    if flags & FORCEUNIX and flags & FORCEWIN:
        flags ^= FORCEWIN | FORCEUNIX

    return flags & FLAG_MASK


class FilePatternMatch(namedtuple('FilePatternMatch', ['path', 'stem'])):
    """
    Matched file.

    `path` is relative to the directory the matcher ran against and always uses `/`.
    `stem` is the part of the path from the first wildcard on, `src/**/*.py` gives
    the stem `pkg/mod.py` for `src/pkg/mod.py`.
    """


class PatternMatchingResult(namedtuple('PatternMatchingResult', ['files', 'has_matches'])):
    """Result of a match."""


def _combine_path(left, right):
    """Join relative paths with `/`."""

    return right if not left else left + '/' + right


class MatcherContext(object):
    """
    State of a single walk.

    Every walk needs its own context as the pattern contexts keep a frame
    stack that follows the directory being walked.
    """

    def __init__(self, include_patterns, exclude_patterns, directory, case_sensitive=True, follow_links=False):
        """Initialize."""

        self.root = directory
        self.follow_links = follow_links
        self.include = [_context.create_include(p, case_sensitive) for p in include_patterns]
        self.exclude = [_context.create_exclude(p, case_sensitive) for p in exclude_patterns]
        self.declared_parent = any(p.has_parent_segment for p in include_patterns)

    def _push_directory(self, directory):
        """Enter a directory in every pattern context."""

        for context in self.include:
            context.push_directory(directory)
        for context in self.exclude:
            context.push_directory(directory)

    def _pop_directory(self):
        """Leave the current directory in every pattern context."""

        for context in self.include:
            context.pop_directory()
        for context in self.exclude:
            context.pop_directory()

    def _match_file(self, file):
        """Get the include result of a file, unless an exclude pattern matches it."""

        result = _context.FAILED
        for context in self.include:
            result = context.test_file(file)
            if result.is_successful:
                break

        if result.is_successful:
            for context in self.exclude:
                if context.test_file(file).is_successful:
                    return _context.FAILED
        return result

    def _match_directory(self, directory):
        """Check if a directory should be walked."""

        if not any(context.test_directory(directory) for context in self.include):
            return False

        for context in self.exclude:
            if context.test_directory(directory):
                logger.debug("Excluded directory %s by %r", directory.full_name, context.pattern)
                return False
        return True

    def _match(self, directory, parent_relative_path):
        """Walk a directory."""

        self._push_directory(directory)
        try:
            entries = list(directory.enumerate())
            if self.declared_parent:
                entries.append(directory.get_directory(_segments.PARENT))

            directories = []
            for entry in entries:
                if entry.is_dir:
                    follow = not entry.is_link or self.follow_links
                    if follow and self._match_directory(entry):
                        directories.append(entry)
                    continue

                result = self._match_file(entry)
                if result.is_successful:
                    yield FilePatternMatch(_combine_path(parent_relative_path, entry.name), result.stem)

            for entry in directories:
                yield from self._match(entry, _combine_path(parent_relative_path, entry.name))
        finally:
            self._pop_directory()

    def iexecute(self):
        """Walk the directory tree yielding matches."""

        logger.debug(
            "Matching %d include and %d exclude patterns in %s",
            len(self.include), len(self.exclude), self.root.full_name
        )
        yield from self._match(self.root, '')

    def execute(self):
        """Walk the directory tree."""

        files = list(self.iexecute())
        return PatternMatchingResult(files, bool(files))


class Matcher(object):
    """
    Find files by include and exclude patterns.

    ```
    matcher = Matcher().add_include('**/*.py').add_exclude('**/build/**')
    result = matcher.execute(DirectoryInfo('project'))
    ```

    A file matches if any include pattern matches it and no exclude pattern does.
    Directories are only entered when an include pattern can still match below them
    and no exclude pattern excludes them outright. Symlinked directories are only
    entered with `FOLLOW`.
    """

    def __init__(self, flags=0, limit=PATTERN_LIMIT):
        """Initialize."""

        self.flags = _flag_transform(flags)
        self.limit = limit
        self.case_sensitive = _parse.get_case(self.flags)
        self.follow_links = bool(self.flags & FOLLOW)
        self.include_patterns = []
        self.exclude_patterns = []

    def add_include(self, patterns):
        """Add include patterns."""

        self.include_patterns.extend(_parse.compile(patterns, self.flags, self.limit))
        return self

    def add_exclude(self, patterns):
        """Add exclude patterns."""

        self.exclude_patterns.extend(_parse.compile(patterns, self.flags, self.limit))
        return self

    def _context(self, directory):
        """Create a fresh context for one walk."""

        return MatcherContext(
            self.include_patterns, self.exclude_patterns, directory, self.case_sensitive, self.follow_links
        )

    def iexecute(self, directory):
        """Walk the directory yielding `FilePatternMatch` as they are found."""

        yield from self._context(directory).iexecute()

    def execute(self, directory):
        """Walk the directory."""

        return self._context(directory).execute()

    def match(self, files, root_dir=''):
        """Match a list of file paths without accessing the file system."""

        if isinstance(files, (str, os.PathLike)):
            files = [files]
        return self.execute(dirinfo.InMemoryDirectoryInfo(root_dir, files))

    def get_result_paths(self, root_dir):
        """Walk a directory on the file system and return the full path of every match."""

        root_dir = os.fspath(root_dir)
        return [
            os.path.join(root_dir, *f.path.split('/'))
            for f in self.execute(dirinfo.DirectoryInfo(root_dir)).files
        ]
