# -*- coding: utf-8 -*-
"""Tests for `_context`."""
import unittest
import treeglob._context as _context
import treeglob._parse as _parse
import treeglob.dirinfo as dirinfo


def directory(name, parent):
    """Create a directory entry."""

    full_name = name if parent is None or not parent.full_name else parent.full_name + '/' + name
    return dirinfo.DirectoryInfoBase(name, full_name, parent)


def file(name, parent):
    """Create a file entry."""

    full_name = name if not parent.full_name else parent.full_name + '/' + name
    return dirinfo.FileInfo(name, full_name, parent)


class _TestContext(unittest.TestCase):
    """Helpers to walk a context by hand."""

    def setUp(self):
        """Setup."""

        self.root = directory('', None)

    def include(self, pattern, case_sensitive=True):
        """Create an include context and enter the root."""

        context = _context.create_include(_parse.PatternParser(pattern).parse(), case_sensitive)
        context.push_directory(self.root)
        return context

    def exclude(self, pattern, case_sensitive=True):
        """Create an exclude context and enter the root."""

        context = _context.create_exclude(_parse.PatternParser(pattern).parse(), case_sensitive)
        context.push_directory(self.root)
        return context

    def enter(self, context, *names):
        """Go back to the root and enter nested directories, returning the last one."""

        while context.depth > 1:
            context.pop_directory()

        current = self.root
        for name in names:
            current = directory(name, current)
            context.push_directory(current)
        return current


class TestLinearContext(_TestContext):
    """Test contexts of patterns without `**`."""

    def test_context_type(self):
        """Test the context fits the pattern."""

        self.assertIsInstance(self.include('a/b'), _context.LinearIncludeContext)
        self.assertIsInstance(self.exclude('a/b'), _context.LinearExcludeContext)

    def test_file_at_root(self):
        """Test a single segment pattern matches files in the root."""

        context = self.include('*.txt')
        self.assertTrue(context.test_file(file('a.txt', self.root)).is_successful)
        self.assertFalse(context.test_file(file('a.md', self.root)).is_successful)
        self.assertFalse(context.test_directory(directory('a.txt', self.root)))

    def test_descend(self):
        """Test directories are entered one segment at a time."""

        context = self.include('src/*/file.txt')
        self.assertTrue(context.test_directory(directory('src', self.root)))
        self.assertFalse(context.test_directory(directory('lib', self.root)))
        self.assertFalse(context.test_file(file('file.txt', self.root)).is_successful)

        current = self.enter(context, 'src', 'pkg')
        self.assertEqual(context.frame.segment_index, 2)
        result = context.test_file(file('file.txt', current))
        self.assertTrue(result.is_successful)
        self.assertEqual(result.stem, 'pkg/file.txt')
        self.assertFalse(context.test_directory(directory('file.txt', current)))

    def test_not_applicable(self):
        """Test a mismatched directory prunes everything below it."""

        context = self.include('src/*.txt')
        current = self.enter(context, 'lib')
        self.assertTrue(context.frame.is_not_applicable)
        self.assertFalse(context.test_file(file('a.txt', current)).is_successful)

        current = self.enter(context, 'lib', 'src')
        self.assertTrue(context.frame.is_not_applicable)
        self.assertFalse(context.test_directory(directory('src', current)))

    def test_too_deep(self):
        """Test files deeper than the pattern never match."""

        context = self.include('a/*')
        current = self.enter(context, 'a', 'b')
        self.assertFalse(context.test_file(file('c', current)).is_successful)

    def test_pop(self):
        """Test popping restores the parent frame."""

        context = self.include('a/b/c.txt')
        self.enter(context, 'a')
        self.assertEqual(context.depth, 2)
        context.pop_directory()
        self.assertEqual(context.depth, 1)
        self.assertEqual(context.frame.segment_index, 0)
        context.pop_directory()
        self.assertTrue(context.is_stack_empty())

        with self.assertRaises(RuntimeError):
            context.pop_directory()

        with self.assertRaises(RuntimeError):
            context.frame

    def test_ignore_case(self):
        """Test matching without case sensitivity."""

        self.assertFalse(self.include('file.txt').test_file(file('File.txt', self.root)).is_successful)
        self.assertTrue(self.include('file.txt', False).test_file(file('File.txt', self.root)).is_successful)

    def test_literal_stem(self):
        """Test the stem of a literal pattern is the file name."""

        context = self.include('a/b.txt')
        current = self.enter(context, 'a')
        self.assertEqual(context.test_file(file('b.txt', current)).stem, 'b.txt')

    def test_exclude_directory(self):
        """Test an exclude pattern only excludes a directory matching its last segment."""

        context = self.exclude('src/bin')
        self.assertFalse(context.test_directory(directory('src', self.root)))
        current = self.enter(context, 'src')
        self.assertTrue(context.test_directory(directory('bin', current)))
        self.assertFalse(context.test_directory(directory('lib', current)))

    def test_exclude_file(self):
        """Test an exclude pattern matches files like an include pattern."""

        context = self.exclude('src/*.log')
        current = self.enter(context, 'src')
        self.assertTrue(context.test_file(file('a.log', current)).is_successful)
        self.assertFalse(context.test_file(file('a.txt', current)).is_successful)

    def test_parent(self):
        """Test a leading `..` only accepts the parent directory."""

        context = self.include('../docs/*.md')
        self.assertTrue(context.test_directory(directory('..', self.root)))
        self.assertFalse(context.test_directory(directory('docs', self.root)))


class TestRaggedContext(_TestContext):
    """Test contexts of patterns with `**`."""

    def test_context_type(self):
        """Test the context fits the pattern."""

        self.assertIsInstance(self.include('**/b'), _context.RaggedIncludeContext)
        self.assertIsInstance(self.exclude('**/b'), _context.RaggedExcludeContext)

    def test_leading_recursive(self):
        """Test an empty starting group moves straight to the next group."""

        context = self.include('**/*.cs')
        self.assertEqual(context.frame.segment_group_index, 0)
        self.assertTrue(context.test_file(file('a.cs', self.root)).is_successful)

        current = self.enter(context, 'x', 'y')
        self.assertEqual(context.frame.backtrack_available, 2)
        result = context.test_file(file('a.cs', current))
        self.assertTrue(result.is_successful)
        self.assertEqual(result.stem, 'x/y/a.cs')

    def test_starting_group(self):
        """Test directories before the first `**` must match exactly."""

        context = self.include('a/**/z')
        self.assertEqual(context.frame.segment_group_index, -1)
        self.assertTrue(context.test_directory(directory('a', self.root)))
        self.assertFalse(context.test_directory(directory('b', self.root)))
        self.assertFalse(context.test_file(file('z', self.root)).is_successful)

        current = self.enter(context, 'a')
        self.assertEqual(context.frame.segment_group_index, 0)
        self.assertEqual(context.frame.backtrack_available, 0)
        result = context.test_file(file('z', current))
        self.assertTrue(result.is_successful)
        self.assertEqual(result.stem, 'z')

        current = self.enter(context, 'a', 'x')
        self.assertEqual(context.test_file(file('z', current)).stem, 'x/z')

    def test_starting_group_mismatch(self):
        """Test a mismatch in the starting group prunes the tree."""

        context = self.include('a/**/z')
        current = self.enter(context, 'b', 'x')
        self.assertTrue(context.frame.is_not_applicable)
        self.assertFalse(context.test_file(file('z', current)).is_successful)
        self.assertFalse(context.test_directory(directory('y', current)))

    def test_contains_group(self):
        """Test a group between `**` is found at any depth."""

        context = self.include('**/b/c/**/*.txt')
        self.enter(context, 'x')
        self.assertEqual(context.frame.backtrack_available, 1)
        self.assertEqual(context.frame.segment_group_index, 0)
        self.enter(context, 'x', 'b')
        self.assertEqual(context.frame.segment_group_index, 0)
        self.assertEqual(context.frame.backtrack_available, 2)
        current = self.enter(context, 'x', 'b', 'c')
        self.assertEqual(context.frame.segment_group_index, 1)
        self.assertEqual(context.frame.backtrack_available, 0)
        self.assertTrue(context.test_file(file('f.txt', current)).is_successful)

    def test_contains_group_order(self):
        """Test a group must match in order."""

        context = self.include('**/b/c/**/*.txt')
        current = self.enter(context, 'c', 'b')
        self.assertEqual(context.frame.segment_group_index, 0)
        self.assertFalse(context.test_file(file('f.txt', current)).is_successful)

    def test_groups_do_not_overlap(self):
        """Test the ending group can't reuse a directory matched by an earlier group."""

        context = self.include('**/a/**/a/*.txt')
        current = self.enter(context, 'a')
        self.assertFalse(context.test_file(file('f.txt', current)).is_successful)

        current = self.enter(context, 'a', 'a')
        self.assertTrue(context.test_file(file('f.txt', current)).is_successful)

    def test_ending_group_window(self):
        """Test the ending group is matched against the trailing path."""

        context = self.include('x/**/y/z')
        current = self.enter(context, 'x')
        self.assertFalse(context.test_file(file('z', current)).is_successful)

        current = self.enter(context, 'x', 'y')
        self.assertTrue(context.test_file(file('z', current)).is_successful)

        current = self.enter(context, 'x', 'q', 'y')
        self.assertTrue(context.test_file(file('z', current)).is_successful)

        current = self.enter(context, 'x', 'y', 'q')
        self.assertFalse(context.test_file(file('z', current)).is_successful)

    def test_parent_after_start(self):
        """Test `..` is never walked into past the starting group."""

        context = self.include('**/*.txt')
        self.assertFalse(context.test_directory(directory('..', self.root)))
        self.enter(context, '..')
        self.assertTrue(context.frame.is_not_applicable)

    def test_pop(self):
        """Test popping restores the parent frame."""

        context = self.include('**/b/**/c')
        self.enter(context, 'x', 'b')
        self.assertEqual(context.frame.segment_group_index, 1)
        context.pop_directory()
        self.assertEqual(context.frame.segment_group_index, 0)
        self.assertEqual(context.frame.backtrack_available, 1)
        context.pop_directory()
        context.pop_directory()
        self.assertTrue(context.is_stack_empty())

    def test_exclude_contents(self):
        """Test `**/bin/**` excludes any `bin` directory."""

        context = self.exclude('**/bin/**')
        self.assertTrue(context.test_directory(directory('bin', self.root)))
        self.assertFalse(context.test_directory(directory('src', self.root)))
        self.assertFalse(context.test_file(file('bin', self.root)).is_successful)

        current = self.enter(context, 'src')
        self.assertTrue(context.test_directory(directory('bin', current)))
        self.assertFalse(context.test_file(file('a.cs', current)).is_successful)

    def test_exclude_starting_group(self):
        """Test `a/b/**` excludes the `a/b` directory."""

        context = self.exclude('a/b/**')
        self.assertFalse(context.test_directory(directory('a', self.root)))
        current = self.enter(context, 'a')
        self.assertTrue(context.test_directory(directory('b', current)))
        self.assertFalse(context.test_directory(directory('c', current)))

    def test_exclude_ending_group(self):
        """Test an exclude with an ending group excludes files and matching directories."""

        context = self.exclude('**/*.log')
        self.assertTrue(context.test_file(file('a.log', self.root)).is_successful)
        self.assertTrue(context.test_directory(directory('old.log', self.root)))
        self.assertFalse(context.test_directory(directory('src', self.root)))

    def test_exclude_everything(self):
        """Test `**` excludes everything."""

        context = self.exclude('**')
        self.assertTrue(context.test_directory(directory('src', self.root)))
        self.assertTrue(context.test_file(file('a', self.root)).is_successful)
