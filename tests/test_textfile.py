"""Tests for encoding-preserving text file rewrites."""

from __future__ import annotations

import codecs

import pytest

from pswitch.errors import ProjectParseError
from pswitch.textfile import TextFile, declared_encoding


class TestTextFile:
    def test_utf8_without_bom(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes("<Project>ø</Project>".encode("utf-8"))

        tf = TextFile.read(str(path))
        assert tf.encoding == "utf-8"
        assert tf.bom == b""
        assert tf.text == "<Project>ø</Project>"

        tf.write("<Project>å</Project>")
        assert path.read_bytes() == "<Project>å</Project>".encode("utf-8")

    def test_utf8_bom_is_kept(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes(codecs.BOM_UTF8 + b"<Project />")

        tf = TextFile.read(str(path))
        assert tf.text == "<Project />"

        tf.write("<Project></Project>")
        assert path.read_bytes() == codecs.BOM_UTF8 + b"<Project></Project>"

    def test_utf16_le(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes(codecs.BOM_UTF16_LE + "<Project />".encode("utf-16-le"))

        tf = TextFile.read(str(path))
        assert tf.encoding == "utf-16-le"
        assert tf.text == "<Project />"

        tf.write()
        assert path.read_bytes() == codecs.BOM_UTF16_LE + "<Project />".encode("utf-16-le")

    def test_utf32_le_not_mistaken_for_utf16(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes(codecs.BOM_UTF32_LE + "<P/>".encode("utf-32-le"))

        tf = TextFile.read(str(path))
        assert tf.encoding == "utf-32-le"
        assert tf.text == "<P/>"

    def test_line_endings_untouched(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes(b"<Project>\r\n  <ItemGroup />\r\n</Project>\r\n")

        tf = TextFile.read(str(path))
        assert "\r\n" in tf.text

        tf.write(tf.text)
        assert path.read_bytes() == b"<Project>\r\n  <ItemGroup />\r\n</Project>\r\n"

    def test_xml_declaration_names_the_encoding(self, tmp_path):
        path = tmp_path / "a.csproj"
        data = '<?xml version="1.0" encoding="iso-8859-1"?>\n<Project>Société</Project>'.encode("iso-8859-1")
        path.write_bytes(data)

        tf = TextFile.read(str(path))
        assert tf.encoding == "iso-8859-1"
        assert tf.text.endswith("<Project>Société</Project>")

        tf.write()
        assert path.read_bytes() == data

    def test_characters_outside_the_encoding_become_references(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes(b"<?xml version='1.0' encoding='ascii'?><Project />")

        tf = TextFile.read(str(path))
        tf.write(tf.text.replace("<Project />", "<Project>é</Project>"))
        assert path.read_bytes().endswith(b"<Project>&#233;</Project>")

    def test_undecodable_bytes(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes(b"<Project>Soci\xe9t\xe9</Project>")

        with pytest.raises(ProjectParseError) as exc:
            TextFile.read(str(path))
        assert exc.value.path == str(path)
        assert "utf-8" in exc.value.reason

    def test_unknown_declared_encoding(self, tmp_path):
        path = tmp_path / "a.csproj"
        path.write_bytes(b'<?xml version="1.0" encoding="x-no-such-codec"?><Project />')

        with pytest.raises(ProjectParseError, match="unknown encoding"):
            TextFile.read(str(path))


class TestDeclaredEncoding:
    def test_without_declaration(self):
        assert declared_encoding(b"<Project />") == "utf-8"

    def test_declaration_without_encoding(self):
        assert declared_encoding(b'<?xml version="1.0"?><Project />') == "utf-8"

    def test_single_quotes_and_leading_whitespace(self):
        assert declared_encoding(b"\n <?xml version='1.0' encoding='windows-1252'?>") == "windows-1252"
