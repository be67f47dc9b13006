"""A fixed-size, length-prefixed byte buffer kept in a shared file mapping."""

from __future__ import annotations

import mmap
import os
import struct
from types import TracebackType

MMAP_SIZE = 8192
_HEADER = struct.Struct("N")
HEADER_SIZE = _HEADER.size
CAPACITY = MMAP_SIZE - HEADER_SIZE


class SharedRegion:
    """A shared mapping holding a size header followed by a data area."""

    def __init__(self, mapping: mmap.mmap) -> None:
        self._map = mapping

    @property
    def capacity(self) -> int:
        """Number of data bytes the region can hold."""
        return CAPACITY

    @property
    def closed(self) -> bool:
        return self._map.closed

    def _check_open(self) -> None:
        if self._map.closed:
            raise ValueError("shared region is closed")

    def read(self) -> bytes:
        """Return the bytes currently stored in the data area."""
        self._check_open()
        (size,) = _HEADER.unpack_from(self._map, 0)
        size = min(size, CAPACITY)
        return bytes(self._map[HEADER_SIZE:HEADER_SIZE + size])

    def write(self, data: bytes) -> None:
        """Store ``data`` in the data area, update the size and flush."""
        self._check_open()
        payload = bytes(data)
        if len(payload) > CAPACITY:
            raise ValueError(
                f"data of {len(payload)} bytes exceeds capacity of {CAPACITY}"
            )
        end = HEADER_SIZE + len(payload)
        self._map[HEADER_SIZE:end] = payload
        if len(payload) < CAPACITY:
            self._map[end] = 0
        _HEADER.pack_into(self._map, 0, len(payload))
        self._map.flush()

    def clear(self) -> None:
        """Zero the whole mapping."""
        self._check_open()
        self._map[:] = bytes(MMAP_SIZE)
        self._map.flush()

    def close(self) -> None:
        """Flush and release the mapping; closing twice is harmless."""
        if not self._map.closed:
            self._map.flush()
            self._map.close()

    def __enter__(self) -> SharedRegion:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _map_descriptor(fd: int) -> mmap.mmap:
    return mmap.mmap(fd, MMAP_SIZE, access=mmap.ACCESS_WRITE)


def create_region(path: str | os.PathLike[str]) -> SharedRegion:
    """Create (or reuse) ``path``, size it to the region size, map and zero it."""
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o600)
    try:
        os.ftruncate(fd, MMAP_SIZE)
        mapping = _map_descriptor(fd)
    finally:
        os.close(fd)
    region = SharedRegion(mapping)
    region.clear()
    return region


def open_region(path: str | os.PathLike[str]) -> SharedRegion:
    """Map an existing region file.

    Raises OSError if the file cannot be opened and ValueError if it is too
    small to be mapped.
    """
    fd = os.open(path, os.O_RDWR)
    try:
        mapping = _map_descriptor(fd)
    finally:
        os.close(fd)
    return SharedRegion(mapping)