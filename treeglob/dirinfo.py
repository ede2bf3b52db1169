"""
Directory sources for the matcher.

The matcher only needs a name, a directory flag and a parent for every entry,
and a way to list the children of a directory. `DirectoryInfo` reads them from
the file system and `InMemoryDirectoryInfo` builds them from a list of paths.
"""
import os
import posixpath
import re
from collections import OrderedDict
from . import util

RE_DRIVE = re.compile(r"^[a-z]:/", re.I)


class FileSystemInfo(object):
    """Base entry."""

    is_dir = False
    is_link = False

    def __init__(self, name, full_name, parent=None):
        """Initialize."""

        self.name = name
        self.full_name = full_name
        self.parent = parent

    def __repr__(self):
        """Representation."""

        return '{}({!r})'.format(type(self).__name__, self.full_name)


class FileInfo(FileSystemInfo):
    """File entry."""


class DirectoryInfoBase(FileSystemInfo):
    """Directory entry."""

    is_dir = True

    def enumerate(self):
        """Iterate the files and directories directly inside the directory."""

        raise NotImplementedError

    def get_directory(self, name):
        """Get a directory inside this directory, `..` gives the parent directory."""

        raise NotImplementedError


class DirectoryInfo(DirectoryInfoBase):
    """Directory on the file system."""

    def __init__(self, full_name, name=None, parent=None, is_link=False):
        """Initialize."""

        full_name = os.fspath(full_name)
        if name is None:
            name = os.path.basename(os.path.normpath(full_name))
        super(DirectoryInfo, self).__init__(name, full_name, parent)
        self.is_link = is_link

    def enumerate(self):
        """
        Scan the directory.

        Errors opening the directory are left to the caller.
        Symlinked directories are treated as directories, flagged with `is_link`.
        """

        with os.scandir(self.full_name) as scan:
            for f in scan:
                try:
                    is_dir = f.is_dir()
                except OSError:  # pragma: no cover
                    is_dir = False
                if is_dir:
                    yield DirectoryInfo(f.path, f.name, self, f.is_symlink())
                else:
                    yield FileInfo(f.name, f.path, self)

    def get_directory(self, name):
        """Get a directory inside this directory."""

        return DirectoryInfo(os.path.join(self.full_name, name), name, self)


def _norm_path(path):
    """Normalize to a `/` separated path without `.` or redundant separators."""

    path = posixpath.normpath(util.norm_slash(os.fspath(path))) if path else ''
    return '' if path == '.' else path


def _is_abs(path):
    """Check for a rooted path, with or without a drive."""

    return posixpath.isabs(path) or RE_DRIVE.match(path) is not None


class InMemoryDirectoryInfo(DirectoryInfoBase):
    """
    Directory made up from a list of file paths.

    Relative file paths are relative to `root_dir`. Paths are never checked
    against the file system; a directory exists if some file lives below it.

    Each directory only keeps the paths below it. The full list is kept as
    well so `..` can reach outside of the directory.
    """

    def __init__(self, root_dir, files, parent=None, name=None):
        """Initialize."""

        root = _norm_path(root_dir)
        if name is None:
            name = posixpath.basename(root)
        super(InMemoryDirectoryInfo, self).__init__(name, root, parent)

        paths = []
        for f in files:
            path = util.norm_slash(os.fspath(f))
            if root and not _is_abs(path):
                path = posixpath.join(root, path)
            paths.append(_norm_path(path))
        self._all_files = tuple(paths)
        self._files = self._all_files

    @classmethod
    def _child(cls, full_name, name, parent, paths, all_paths):
        """Create a directory from already normalized paths."""

        directory = cls.__new__(cls)
        FileSystemInfo.__init__(directory, name, full_name, parent)
        directory._all_files = all_paths
        directory._files = paths
        return directory

    def _join(self, name):
        """Get the full name of an entry in this directory."""

        return _norm_path(posixpath.join(self.full_name, name) if self.full_name else name)

    def _relative(self, path):
        """Get the path relative to this directory, or `None` if it isn't below it."""

        root = self.full_name
        if not root:
            if _is_abs(path) or path == '..' or path.startswith('../'):
                return None
            return path

        prefix = root if root.endswith('/') else root + '/'
        return path[len(prefix):] if path.startswith(prefix) else None

    def enumerate(self):
        """Iterate the files and directories directly inside the directory."""

        files = OrderedDict()
        directories = OrderedDict()
        for path in self._files:
            relative = self._relative(path)
            if not relative:
                continue
            name, sep, rest = relative.partition('/')
            if sep:
                directories.setdefault(name, []).append(path)
            else:
                files.setdefault(name, None)

        for name in files:
            yield FileInfo(name, posixpath.join(self.full_name, name), self)
        for name, paths in directories.items():
            yield self._child(self._join(name), name, self, tuple(paths), self._all_files)

    def get_directory(self, name):
        """Get a directory inside this directory, or the parent directory for `..`."""

        full_name = self._join(name)
        directory = self._child(full_name, name, self, (), self._all_files)
        directory._files = tuple(p for p in self._all_files if directory._relative(p))
        return directory
