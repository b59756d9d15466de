"""RGBA images whose low pixel bits carry hidden data."""

from __future__ import annotations

import enum
import io
import os
from typing import Union

from PIL import Image as _PILImage

PathLike = Union[str, "os.PathLike[str]"]

_CHANNELS = 4


class EncodingLevel(enum.IntEnum):
    """How many low bits of each channel byte carry payload."""

    LOW = 0
    MED = 1
    HIGH = 2

    @property
    def bits(self) -> int:
        """Payload bits stored in each channel byte."""
        return 1 << self.value


class ImageError(Exception):
    """Raised when an image cannot be read or written."""


class Image:
    """An RGBA pixel buffer, eight bits per channel."""

    def __init__(self, width: int, height: int, pixels: bytes | None = None) -> None:
        if width < 0 or height < 0:
            raise ValueError("image dimensions must not be negative")
        expected = width * height * _CHANNELS
        if pixels is None:
            buffer = bytearray(expected)
        else:
            buffer = bytearray(pixels)
            if len(buffer) != expected:
                raise ValueError(
                    f"expected {expected} bytes of RGBA data, got {len(buffer)}"
                )
        self.width = width
        self.height = height
        self._pixels = buffer

    @property
    def pixels(self) -> bytes:
        """A copy of the raw RGBA bytes, row by row."""
        return bytes(self._pixels)

    @classmethod
    def _from_pil(cls, source: "_PILImage.Image") -> "Image":
        rgba = source.convert("RGBA")
        return cls(rgba.width, rgba.height, rgba.tobytes())

    @classmethod
    def open(cls, path: PathLike) -> "Image":
        """Load an image file of any format Pillow reads."""
        try:
            with _PILImage.open(path) as source:
                return cls._from_pil(source)
        except (OSError, ValueError, _PILImage.DecompressionBombError) as exc:
            raise ImageError(f"cannot load image {os.fspath(path)}: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> "Image":
        """Load an image from the bytes of an encoded image file."""
        try:
            with _PILImage.open(io.BytesIO(bytes(data))) as source:
                return cls._from_pil(source)
        except (OSError, ValueError, _PILImage.DecompressionBombError) as exc:
            raise ImageError(f"cannot load image from memory: {exc}") from exc

    def save(self, path: PathLike) -> None:
        """Write the image as PNG, whatever the file name's extension."""
        try:
            picture = _PILImage.frombytes(
                "RGBA", (self.width, self.height), bytes(self._pixels)
            )
            picture.save(path, format="PNG")
        except (OSError, ValueError) as exc:
            raise ImageError(f"cannot save image {os.fspath(path)}: {exc}") from exc

    def _span(self, size: int, level: EncodingLevel, offset: int) -> tuple[int, int]:
        if size < 0:
            raise ValueError("size must not be negative")
        if offset < 0:
            raise ValueError("offset must not be negative")
        end = offset + self.encoded_size(size, level)
        if end > len(self._pixels):
            raise ValueError(
                f"{size} bytes at offset {offset} do not fit into "
                f"{len(self._pixels)} channel bytes"
            )
        return offset, end

    def encode(
        self, data: bytes, level: EncodingLevel = EncodingLevel.LOW, offset: int = 0
    ) -> None:
        """Hide ``data`` in the low bits of the channel bytes from ``offset`` on."""
        level = EncodingLevel(level)
        data = bytes(data)
        position, _ = self._span(len(data), level, offset)
        bits = level.bits
        mask = (1 << bits) - 1
        keep = 0xFF ^ mask
        pixels = self._pixels
        for byte in data:
            for shift in range(0, 8, bits):
                pixels[position] = (pixels[position] & keep) | ((byte >> shift) & mask)
                position += 1

    def decode(
        self, size: int, level: EncodingLevel = EncodingLevel.LOW, offset: int = 0
    ) -> bytes:
        """Read back ``size`` bytes hidden from ``offset`` on."""
        level = EncodingLevel(level)
        start, end = self._span(size, level, offset)
        bits = level.bits
        mask = (1 << bits) - 1
        step = 8 // bits
        out = bytearray()
        for chunk_start in range(start, end, step):
            value = 0
            for index, channel in enumerate(self._pixels[chunk_start:chunk_start + step]):
                value |= (channel & mask) << (index * bits)
            out.append(value)
        return bytes(out)

    @staticmethod
    def encoded_size(size: int, level: EncodingLevel) -> int:
        """Number of channel bytes needed to hide ``size`` bytes."""
        return size * (8 // EncodingLevel(level).bits)