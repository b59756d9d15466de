"""Command line tool that hides a file inside an image and recovers it."""

from __future__ import annotations

import os
import struct
import sys
from dataclasses import dataclass
from pathlib import Path

from .image import EncodingLevel, Image, ImageError
from .utils import data_size

SIGNATURE = b"HIDE"
VERSION = 1
NAME_SIZE = 32
RESERVED_SIZE = 12
DEFAULT_LEVEL = EncodingLevel.LOW

_HEADER = struct.Struct(f"<4sHBBII{NAME_SIZE}s{RESERVED_SIZE}s")
HEADER_SIZE = _HEADER.size

_LEVEL_NAMES = {
    EncodingLevel.LOW: "Low (Default)",
    EncodingLevel.MED: "Medium",
    EncodingLevel.HIGH: "High",
}

USAGE = (
    "Usage:\n"
    "  pixelhide encode -i inputfile -e embedfile -o outputfile\n"
    "  pixelhide decode -i inputfile -o outputfile"
)
ENCODE_USAGE = "Usage: pixelhide encode -i inputfile -e embedfile -o outputfile"
DECODE_USAGE = "Usage: pixelhide decode -i inputfile -o outputfile"


class StegoError(Exception):
    """Raised when embedding or extracting a file fails."""


@dataclass
class Header:
    """The fixed-size record stored in front of the hidden data."""

    level: int
    offset: int
    size: int
    name: str
    version: int = VERSION
    flags: int = 0
    signature: bytes = SIGNATURE
    reserved: bytes = bytes(RESERVED_SIZE)

    def pack(self) -> bytes:
        """Serialise the header into its little-endian wire form."""
        raw_name = self.name.encode("utf-8", "surrogateescape")
        if len(raw_name) > NAME_SIZE:
            raise StegoError(f"File name '{self.name}' is over {NAME_SIZE} characters")
        try:
            return _HEADER.pack(
                self.signature,
                self.version,
                int(self.level),
                self.flags,
                self.offset,
                self.size,
                raw_name,
                self.reserved,
            )
        except struct.error as exc:
            raise StegoError(f"Invalid header field: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "Header":
        """Parse and validate a header read back from an image."""
        data = bytes(data)
        if len(data) != HEADER_SIZE:
            raise StegoError(f"Header must be {HEADER_SIZE} bytes, got {len(data)}")
        signature, version, level, flags, offset, size, raw_name, reserved = _HEADER.unpack(data)
        if signature != SIGNATURE:
            raise StegoError("Invalid header signature")
        if version != VERSION:
            raise StegoError(f"Unsupported file-version {version}")
        if any(reserved):
            raise StegoError("Invalid reserved bytes")
        name_bytes = raw_name if raw_name[-1] else raw_name.split(b"\x00", 1)[0]
        return cls(
            level=level,
            offset=offset,
            size=size,
            name=name_bytes.decode("utf-8", "surrogateescape"),
            version=version,
            flags=flags,
            signature=signature,
            reserved=reserved,
        )


def _pad(data: bytes) -> bytes:
    size = len(data)
    padded_size = size + 1
    if padded_size % 16:
        padded_size = (size // 16 + 1) * 16
    left = padded_size - size
    return data + bytes([left]) * left


def _random_u32() -> int:
    try:
        return int.from_bytes(os.urandom(4), "little")
    except NotImplementedError as exc:
        raise StegoError("Unable to generate random number") from exc


def embed(
    image: Image,
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    level: EncodingLevel = DEFAULT_LEVEL,
) -> Header:
    """Hide the file at ``input_path`` in ``image`` and save it as PNG."""
    level = EncodingLevel(level)
    input_path = Path(input_path)
    try:
        payload = input_path.read_bytes()
    except OSError as exc:
        raise StegoError(f"Unable to open file '{input_path}'") from exc

    print(f"* Image size: {image.width}x{image.height} pixels")
    print(f"* Encoding level: {_LEVEL_NAMES[level]}")

    padded = _pad(payload)
    header_span = Image.encoded_size(HEADER_SIZE, EncodingLevel.LOW)
    channels = image.width * image.height * 4
    max_size = max(0, channels // Image.encoded_size(1, level) - header_span)

    print(f"* Max embed size: {data_size(max_size)}")
    print(f"* Embed size: {data_size(len(payload))}")

    too_big = f"Data-File too big, maximum possible size: {max_size // 1024} KiB"
    if len(padded) > max_size:
        raise StegoError(too_big)
    modulus = Image.encoded_size(max_size - len(padded), level)
    if modulus == 0:
        raise StegoError(too_big)

    offset = ((_random_u32() + header_span) & 0xFFFFFFFF) % modulus
    header = Header(level=level, offset=offset, size=len(padded), name=input_path.name)
    packed = header.pack()

    image.encode(packed, EncodingLevel.LOW)
    image.encode(padded, level, offset)
    print(f"* Embedded {header.name} into image")

    try:
        image.save(output_path)
    except ImageError as exc:
        raise StegoError("Unable to save image!") from exc

    print(f"* Successfully wrote to {output_path}")
    return header


def extract(image: Image, output_path: str | os.PathLike[str] | None = None) -> Path:
    """Recover the hidden file; without ``output_path`` its stored name is used."""
    print(f"* Image size: {image.width}x{image.height} pixels")

    if Image.encoded_size(HEADER_SIZE, EncodingLevel.LOW) > image.width * image.height * 4:
        raise StegoError("Image is too small to hold a header")
    header = Header.unpack(image.decode(HEADER_SIZE, EncodingLevel.LOW))
    print(f"* Detected embed {header.name}")

    try:
        level = EncodingLevel(header.level)
    except ValueError as exc:
        raise StegoError(f"Unsupported encoding level {header.level}") from exc
    print(f"* Encoding level: {_LEVEL_NAMES[level]}")

    try:
        data = image.decode(header.size, level, header.offset)
    except ValueError as exc:
        raise StegoError("Embedded data exceeds the image") from exc
    if not data or data[-1] > len(data):
        raise StegoError("Invalid padding")
    payload = data[:len(data) - data[-1]]

    target = Path(output_path) if output_path else Path(header.name)
    try:
        target.write_bytes(payload)
    except (OSError, ValueError) as exc:
        raise StegoError(f"Unable to save file '{target}'") from exc

    print(f"* Successfully wrote to {target}")
    return target


def _parse_options(options: list[str], names: dict[str, str]) -> dict[str, str]:
    values: dict[str, str] = {}
    tokens = iter(options)
    for token in tokens:
        key = names.get(token)
        if key is None:
            continue
        value = next(tokens, None)
        if value is not None:
            values[key] = value
    return values


_ENCODE_OPTIONS = {
    "-i": "input", "--input": "input",
    "-e": "embed", "--embed": "embed",
    "-o": "output", "--output": "output",
}
_DECODE_OPTIONS = {
    "-i": "input", "--input": "input",
    "-o": "output", "--output": "output",
}


def _load(path: str) -> Image | None:
    try:
        return Image.open(path)
    except ImageError:
        print(f"ERROR: Failed to load image {path}", file=sys.stderr)
        return None


def main(argv: list[str] | None = None) -> int:
    """Run the command line tool; returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(USAGE, file=sys.stderr)
        return 1

    mode, options = args[0], args[1:]
    if mode == "encode":
        values = _parse_options(options, _ENCODE_OPTIONS)
        if not all(values.get(key) for key in ("input", "embed", "output")):
            print(ENCODE_USAGE, file=sys.stderr)
            return 1
        image = _load(values["input"])
        if image is None:
            return 1
        action = lambda: embed(image, values["embed"], values["output"], DEFAULT_LEVEL)  # noqa: E731
    elif mode == "decode":
        values = _parse_options(options, _DECODE_OPTIONS)
        if not all(values.get(key) for key in ("input", "output")):
            print(DECODE_USAGE, file=sys.stderr)
            return 1
        image = _load(values["input"])
        if image is None:
            return 1
        action = lambda: extract(image, values["output"])  # noqa: E731
    else:
        print(f"Unknown mode: {mode}", file=sys.stderr)
        return 1

    try:
        action()
    except StegoError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0