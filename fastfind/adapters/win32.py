"""Windows directory reader and file queries via ctypes.

This is the only module that talks to the Win32 API. It binds exactly the
calls FastFind uses: the FindFirstFileExW/FindNextFileW/FindClose listing
session, plus the attribute, owner and volume queries behind
``fastfind.fileinfo``. Only import it on Windows.
"""

import ctypes
import ntpath
from ctypes import wintypes
from typing import Optional

from ..core.reader import (
    DirectoryListingError,
    DirectoryReader,
    ListingErrorKind,
    NativeError,
    RawEntry,
)
from ..paths import to_extended_length_path


ERROR_FILE_NOT_FOUND = 2
ERROR_PATH_NOT_FOUND = 3
ERROR_NO_MORE_FILES = 18

INVALID_HANDLE_VALUE = wintypes.HANDLE(-1).value
INVALID_FILE_ATTRIBUTES = 0xFFFFFFFF

FIND_EX_INFO_BASIC = 1
FIND_EX_SEARCH_NAME_MATCH = 0
FIND_FIRST_EX_LARGE_FETCH = 2

SE_FILE_OBJECT = 1
OWNER_SECURITY_INFORMATION = 1

MAX_PATH = 260


class WIN32_FIND_DATAW(ctypes.Structure):
    _fields_ = [
        ('dwFileAttributes', wintypes.DWORD),
        ('ftCreationTime', wintypes.FILETIME),
        ('ftLastAccessTime', wintypes.FILETIME),
        ('ftLastWriteTime', wintypes.FILETIME),
        ('nFileSizeHigh', wintypes.DWORD),
        ('nFileSizeLow', wintypes.DWORD),
        ('dwReserved0', wintypes.DWORD),
        ('dwReserved1', wintypes.DWORD),
        ('cFileName', wintypes.WCHAR * MAX_PATH),
        ('cAlternateFileName', wintypes.WCHAR * 14),
    ]


_kernel32 = ctypes.WinDLL('kernel32', use_last_error=True)
_advapi32 = ctypes.WinDLL('advapi32', use_last_error=True)

_FindFirstFileExW = _kernel32.FindFirstFileExW
_FindFirstFileExW.argtypes = [wintypes.LPCWSTR, ctypes.c_int, ctypes.POINTER(WIN32_FIND_DATAW),
                              ctypes.c_int, wintypes.LPVOID, wintypes.DWORD]
_FindFirstFileExW.restype = wintypes.HANDLE

_FindNextFileW = _kernel32.FindNextFileW
_FindNextFileW.argtypes = [wintypes.HANDLE, ctypes.POINTER(WIN32_FIND_DATAW)]
_FindNextFileW.restype = wintypes.BOOL

_FindClose = _kernel32.FindClose
_FindClose.argtypes = [wintypes.HANDLE]
_FindClose.restype = wintypes.BOOL

_GetFileAttributesW = _kernel32.GetFileAttributesW
_GetFileAttributesW.argtypes = [wintypes.LPCWSTR]
_GetFileAttributesW.restype = wintypes.DWORD

_GetDiskFreeSpaceW = _kernel32.GetDiskFreeSpaceW
_GetDiskFreeSpaceW.argtypes = [wintypes.LPCWSTR] + [ctypes.POINTER(wintypes.DWORD)] * 4
_GetDiskFreeSpaceW.restype = wintypes.BOOL

_LocalFree = _kernel32.LocalFree
_LocalFree.argtypes = [wintypes.HLOCAL]
_LocalFree.restype = wintypes.HLOCAL

_GetNamedSecurityInfoW = _advapi32.GetNamedSecurityInfoW
_GetNamedSecurityInfoW.argtypes = [wintypes.LPCWSTR, ctypes.c_int, wintypes.DWORD,
                                   ctypes.POINTER(wintypes.LPVOID), ctypes.POINTER(wintypes.LPVOID),
                                   ctypes.POINTER(wintypes.LPVOID), ctypes.POINTER(wintypes.LPVOID),
                                   ctypes.POINTER(wintypes.LPVOID)]
_GetNamedSecurityInfoW.restype = wintypes.DWORD

_LookupAccountSidW = _advapi32.LookupAccountSidW
_LookupAccountSidW.argtypes = [wintypes.LPCWSTR, wintypes.LPVOID, wintypes.LPWSTR,
                               ctypes.POINTER(wintypes.DWORD), wintypes.LPWSTR,
                               ctypes.POINTER(wintypes.DWORD), ctypes.POINTER(wintypes.DWORD)]
_LookupAccountSidW.restype = wintypes.BOOL

_ConvertSidToStringSidW = _advapi32.ConvertSidToStringSidW
_ConvertSidToStringSidW.argtypes = [wintypes.LPVOID, ctypes.POINTER(wintypes.LPWSTR)]
_ConvertSidToStringSidW.restype = wintypes.BOOL


def _message(code: int) -> str:
    return ctypes.FormatError(code).strip()


def _native_error(code: int, path: Optional[str] = None) -> NativeError:
    return NativeError(code, _message(code), path)


def _listing_error(path: str, code: int) -> DirectoryListingError:
    if code in (ERROR_FILE_NOT_FOUND, ERROR_PATH_NOT_FOUND):
        kind = ListingErrorKind.NOT_FOUND
    elif code == ERROR_NO_MORE_FILES:
        kind = ListingErrorKind.NO_MORE_FILES
    else:
        kind = ListingErrorKind.OTHER
    return DirectoryListingError(path, _message(code), code, kind)


def _filetime_ticks(filetime: wintypes.FILETIME) -> int:
    return (filetime.dwHighDateTime << 32) + filetime.dwLowDateTime


def _to_raw_entry(data: WIN32_FIND_DATAW) -> RawEntry:
    return RawEntry(
        name=data.cFileName,
        attributes=data.dwFileAttributes,
        size_high=data.nFileSizeHigh,
        size_low=data.nFileSizeLow,
        creation_time=_filetime_ticks(data.ftCreationTime),
        last_access_time=_filetime_ticks(data.ftLastAccessTime),
        last_write_time=_filetime_ticks(data.ftLastWriteTime),
    )


class _FindSession:
    """Find handle plus the entry FindFirstFileExW already returned."""

    __slots__ = ('path', 'handle', 'pending')

    def __init__(self, path: str, handle: int, pending: Optional[RawEntry]):
        self.path = path
        self.handle = handle
        self.pending = pending


class Win32DirectoryReader(DirectoryReader):
    """DirectoryReader backed by FindFirstFileExW.

    Uses FindExInfoBasic (no 8.3 short names) and lists every entry with
    ``*``; name filtering is left to the filter engine.
    """

    def open(self, path: str, pattern: str, large_fetch: bool = False) -> _FindSession:
        search = to_extended_length_path(path).rstrip('\\') + '\\*'
        data = WIN32_FIND_DATAW()
        flags = FIND_FIRST_EX_LARGE_FETCH if large_fetch else 0
        handle = _FindFirstFileExW(search, FIND_EX_INFO_BASIC, ctypes.byref(data),
                                   FIND_EX_SEARCH_NAME_MATCH, None, flags)
        if handle is None or handle == INVALID_HANDLE_VALUE:
            raise _listing_error(path, ctypes.get_last_error())
        return _FindSession(path, handle, _to_raw_entry(data))

    def next(self, session: _FindSession) -> Optional[RawEntry]:
        if session.pending is not None:
            raw, session.pending = session.pending, None
            return raw

        data = WIN32_FIND_DATAW()
        if not _FindNextFileW(session.handle, ctypes.byref(data)):
            code = ctypes.get_last_error()
            if code == ERROR_NO_MORE_FILES:
                return None
            raise _listing_error(session.path, code)
        return _to_raw_entry(data)

    def close(self, session: _FindSession) -> None:
        if session.handle is not None:
            _FindClose(session.handle)
            session.handle = None

    def supports_large_fetch(self) -> bool:
        return True


def get_file_attributes(path: str) -> int:
    attributes = _GetFileAttributesW(to_extended_length_path(path))
    if attributes == INVALID_FILE_ATTRIBUTES:
        raise _native_error(ctypes.get_last_error(), path)
    return attributes


def get_cluster_size(path: str) -> int:
    """Bytes per allocation unit of the volume holding ``path``."""
    drive, _ = ntpath.splitdrive(ntpath.abspath(path))
    root = drive.rstrip('\\') + '\\'

    sectors_per_cluster = wintypes.DWORD()
    bytes_per_sector = wintypes.DWORD()
    free_clusters = wintypes.DWORD()
    total_clusters = wintypes.DWORD()
    if not _GetDiskFreeSpaceW(root, ctypes.byref(sectors_per_cluster),
                              ctypes.byref(bytes_per_sector),
                              ctypes.byref(free_clusters),
                              ctypes.byref(total_clusters)):
        raise _native_error(ctypes.get_last_error(), path)
    return sectors_per_cluster.value * bytes_per_sector.value


def get_file_owner(path: str) -> str:
    """Return DOMAIN\\account of the owner, or the SID string if unresolvable."""
    sid_owner = wintypes.LPVOID()
    descriptor = wintypes.LPVOID()
    code = _GetNamedSecurityInfoW(to_extended_length_path(path), SE_FILE_OBJECT,
                                  OWNER_SECURITY_INFORMATION, ctypes.byref(sid_owner),
                                  None, None, None, ctypes.byref(descriptor))
    if code != 0:
        raise _native_error(code, path)

    try:
        name = ctypes.create_unicode_buffer(256)
        domain = ctypes.create_unicode_buffer(256)
        name_length = wintypes.DWORD(len(name))
        domain_length = wintypes.DWORD(len(domain))
        use = wintypes.DWORD()
        if _LookupAccountSidW(None, sid_owner, name, ctypes.byref(name_length),
                              domain, ctypes.byref(domain_length), ctypes.byref(use)):
            if not domain.value:
                # Well-known SIDs such as Everyone have no domain
                return name.value
            return f"{domain.value}\\{name.value}"

        sid_string = wintypes.LPWSTR()
        if not _ConvertSidToStringSidW(sid_owner, ctypes.byref(sid_string)):
            raise _native_error(ctypes.get_last_error(), path)
        try:
            return sid_string.value
        finally:
            _LocalFree(ctypes.cast(sid_string, wintypes.HLOCAL))
    finally:
        _LocalFree(descriptor)
