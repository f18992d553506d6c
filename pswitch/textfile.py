"""Read and rewrite text files keeping their byte-order mark and encoding."""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass

from pswitch.errors import ProjectParseError

# UTF-32 LE must be tested before UTF-16 LE, their marks share a prefix.
_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

_XML_DECLARATION_RE = re.compile(rb"""\A\s*<\?xml[^>]*?\bencoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']""")


def declared_encoding(data: bytes) -> str:
    """Encoding named by the XML declaration, or UTF-8 without one."""
    match = _XML_DECLARATION_RE.match(data)
    if match is None:
        return "utf-8"
    return match.group(1).decode("ascii")


@dataclass
class TextFile:
    path: str
    encoding: str
    bom: bytes
    text: str

    @classmethod
    def read(cls, path: str) -> TextFile:
        """Read a file, detecting its encoding from the byte-order mark.

        Files without a mark use the encoding of their XML declaration,
        UTF-8 if there is none, and are written back without a mark.
        Line endings are left as they are on disk.

        Raises ``ProjectParseError`` if the content does not decode.
        """
        with open(path, "rb") as f:
            data = f.read()

        bom, encoding = b"", None
        for mark, name in _BOMS:
            if data.startswith(mark):
                bom, encoding = mark, name
                break
        if encoding is None:
            encoding = declared_encoding(data)

        try:
            text = data[len(bom):].decode(encoding)
        except LookupError as e:
            raise ProjectParseError(path, f"unknown encoding '{encoding}'") from e
        except UnicodeDecodeError as e:
            raise ProjectParseError(path, f"not valid {encoding} text: {e.reason} at byte {e.start}") from e
        return cls(path, encoding, bom, text)

    def write(self, text: str | None = None) -> None:
        if text is not None:
            self.text = text
        # Characters the file's encoding lacks become character references
        data = self.text.encode(self.encoding, "xmlcharrefreplace")
        with open(self.path, "wb") as f:
            f.write(self.bom + data)
