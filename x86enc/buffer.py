"""A fixed-size byte buffer that is written little-endian from a cursor."""

from __future__ import annotations


class Buffer:
    """Zero-filled storage of ``size`` bytes with a write cursor."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"buffer size must not be negative, got {size}")
        self.size = size
        self.data = bytearray(size)
        self.cursor = 0

    def write_8(self, val: int) -> None:
        """Write the low byte of ``val`` and advance the cursor."""
        if self.cursor >= self.size:
            raise IndexError(f"buffer of {self.size} bytes is full")
        self.data[self.cursor] = val & 0xFF
        self.cursor += 1

    def _write(self, val: int, width: int) -> None:
        for shift in range(0, width * 8, 8):
            self.write_8(val >> shift)

    def write_16(self, val: int) -> None:
        """Write the low 16 bits of ``val``, least significant byte first."""
        self._write(val, 2)

    def write_32(self, val: int) -> None:
        """Write the low 32 bits of ``val``, least significant byte first."""
        self._write(val, 4)

    def write_64(self, val: int) -> None:
        """Write the low 64 bits of ``val``, least significant byte first."""
        self._write(val, 8)

    def align(self, boundary: int) -> None:
        """Move the cursor to the next multiple of ``boundary`` past its position."""
        if boundary <= 0:
            raise ValueError(f"alignment boundary must be positive, got {boundary}")
        self.cursor = (self.cursor // boundary + 1) * boundary

    def hexdump(self) -> str:
        """Rows of 16 bytes that hold any non-zero byte, one line each."""
        lines = []
        for offset in range(0, self.size, 16):
            row = self.data[offset:offset + 16]
            if not any(row):
                continue
            groups = " ".join(row[start:start + 4].hex() for start in range(0, len(row), 4))
            lines.append(f"{offset:04x}: {groups}\n")
        return "".join(lines)