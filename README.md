# pixelhide

Hide a file inside an image and get it back later.

pixelhide stores the bytes of a file in the low bits of an image's RGBA
channel bytes. A 60-byte header (signature `HIDE`, format version 1,
encoding level, flags, payload offset, payload size, the file name and
twelve reserved zero bytes, little-endian) is written at the very start of
the pixel data, one bit per channel byte. The payload is padded to a
multiple of 16 bytes (always at least one padding byte, each holding the
padding length) and written at a random offset. The result is always saved
as PNG, whatever the output file's extension, since lossy formats would
destroy the hidden bits. Input images may be in any format Pillow reads.

## Installation

```
pip install pixelhide
```

## Command line

Embed a file into an image:

```
pixelhide encode -i cover.png -e secret.txt -o stego.png
```

Recover it:

```
pixelhide decode -i stego.png -o recovered.txt
```

The long forms `--input`, `--embed` and `--output` are accepted as well;
all options shown are required. Encoding prints the image size, the
encoding level, the largest payload the image can carry and the size of
the file being embedded, and refuses a file that does not fit. The file
name stored in the header may be at most 32 bytes. The command line always
uses the `LOW` level (one bit per channel byte). On any error a message
goes to standard error and the exit status is 1; on success it is 0.

## Library use

```python
from pixelhide.image import Image, EncodingLevel

img = Image.open("cover.png")
img.encode(b"hello", EncodingLevel.LOW, 0)
assert img.decode(5, EncodingLevel.LOW, 0) == b"hello"
img.save("out.png")
```

- `Image(width, height, pixels=None)` wraps raw RGBA bytes;
  `Image.open(path)` and `Image.from_bytes(data)` load encoded images,
  `save(path)` writes PNG. Failures to read or write raise `ImageError`.
- `EncodingLevel.LOW`, `MED` and `HIGH` hide 1, 2 or 4 bits per channel
  byte. `Image.encoded_size(size, level)` gives the channel bytes a payload
  of `size` bytes occupies: eight per byte at `LOW`, four at `MED`, two at
  `HIGH`. `encode` and `decode` raise `ValueError` when the data does not
  fit.
- `pixelhide.cli.embed(image, input_path, output_path, level)` and
  `extract(image, output_path=None)` do what the two commands do and raise
  `StegoError` on failure; `extract` without an output path writes to the
  file name stored in the header. `Header.pack()` and `Header.unpack(data)`
  convert the header to and from its 60-byte form.

The package also carries small self-contained primitives:

- `pixelhide.crc32`: `CRC32` (`update`, `checksum`) and `crc32(data)`.
- `pixelhide.sha256`: `SHA256` (`update`, `digest`, `hexdigest`),
  `hmac_sha256(data, key)` and
  `pbkdf2_hmac_sha256(password, salt, length, rounds)`.
- `pixelhide.aes`: `AES(key, iv)`, AES-256 with a 32-byte key and 16-byte
  IV, offering `encrypt_block`, `decrypt_block`, `cbc_encrypt` and
  `cbc_decrypt` (data must be a multiple of 16 bytes; the IV carries over
  between calls).
- `pixelhide.utils`: `data_size`, `rotl`, `rotr`.
- `pixelhide.parser.ArgumentParser`, a small command-line parser with
  options, positional arguments and subcommands, built on
  `pixelhide.argument.Argument` and the number parsing in
  `pixelhide.numparse`.

## What it does not do

The hidden file is stored as is: the `pixelhide` command neither encrypts
nor compresses it, and takes no password. Anyone who knows the format can
read it back. The AES, SHA-256 and PBKDF2 helpers are there for use from
Python code, but the command does not apply them. The command also offers
no way to choose the `MED` or `HIGH` encoding level.