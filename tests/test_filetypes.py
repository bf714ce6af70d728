"""Tests for file type sniffing."""

from resource_health.filetypes import PDF, sniff_file_type


class TestSniffFileType:
    def test_detects_pdf(self):
        """PDF signature is recognized."""
        assert sniff_file_type(b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n1 0 obj") == PDF

    def test_detects_png(self):
        """PNG is recognized so mismatches can be reported."""
        file_type = sniff_file_type(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")
        assert file_type.ext == "png"
        assert file_type.mime == "image/png"

    def test_detects_html(self):
        """HTML error pages are recognized."""
        file_type = sniff_file_type(b"\n  <!DOCTYPE html><html><body>Not found</body></html>")
        assert file_type.ext == "html"

    def test_unknown_content(self):
        """Unknown content yields None."""
        assert sniff_file_type(b"just some text") is None

    def test_empty_content(self):
        """Empty content yields None."""
        assert sniff_file_type(b"") is None

    def test_pdf_marker_must_lead(self):
        """The signature only counts at offset zero."""
        assert sniff_file_type(b"garbage %PDF-1.4") is None
