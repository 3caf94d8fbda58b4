"""Unit tests for single-entity queries."""

import os
import shutil
import stat
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastfind import FileAttributes, NativeError, get_attributes, get_owner, get_sector_size


class TestFileInfo(unittest.TestCase):
    """Queries against a real temporary directory."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="fastfind_info_")
        self.test_file = Path(self.test_dir) / "test.txt"
        self.test_file.write_text("test content")
        self.missing = os.path.join(self.test_dir, "missing.txt")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_attributes_of_directory(self):
        attributes = get_attributes(self.test_dir)
        self.assertIsInstance(attributes, FileAttributes)
        self.assertTrue(attributes & FileAttributes.DIRECTORY)

    def test_attributes_of_file(self):
        self.assertFalse(get_attributes(self.test_file) & FileAttributes.DIRECTORY)

    @unittest.skipIf(sys.platform == 'win32', "POSIX permission bits")
    def test_attributes_read_only(self):
        self.test_file.chmod(stat.S_IRUSR)
        try:
            self.assertTrue(get_attributes(self.test_file) & FileAttributes.READONLY)
        finally:
            self.test_file.chmod(stat.S_IRUSR | stat.S_IWUSR)

    def test_attributes_missing_raises(self):
        with self.assertRaises(NativeError) as context:
            get_attributes(self.missing)
        self.assertIsNotNone(context.exception.code)
        self.assertEqual(context.exception.path, self.missing)

    def test_native_error_is_os_error(self):
        self.assertTrue(issubclass(NativeError, OSError))

    def test_owner(self):
        owner = get_owner(self.test_file)
        self.assertIsInstance(owner, str)
        self.assertTrue(owner)

    @unittest.skipIf(sys.platform == 'win32', "POSIX account database")
    def test_owner_matches_current_user(self):
        import pwd
        uid = os.getuid()
        try:
            expected = pwd.getpwuid(uid).pw_name
        except KeyError:
            expected = str(uid)
        self.assertEqual(get_owner(self.test_file), expected)

    @unittest.skipIf(sys.platform == 'win32', "POSIX account database")
    def test_owner_falls_back_to_uid(self):
        with patch('pwd.getpwuid', side_effect=KeyError("no such uid")):
            self.assertEqual(get_owner(self.test_file), str(os.getuid()))

    def test_owner_missing_raises(self):
        with self.assertRaises(NativeError):
            get_owner(self.missing)

    def test_sector_size(self):
        size = get_sector_size(self.test_dir)
        self.assertGreater(size, 0)
        self.assertEqual(size & (size - 1), 0)

    def test_sector_size_missing_raises(self):
        with self.assertRaises(NativeError):
            get_sector_size(os.path.join(self.test_dir, "no", "such", "dir"))


if __name__ == '__main__':
    unittest.main()
