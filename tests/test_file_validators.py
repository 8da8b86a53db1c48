"""Tests for file validation utilities.

Tests cover:
- Magic number validation for every accepted format
- Extension and MIME type mapping
- ZIP file safety checks against zip bombs
"""

import io
import zipfile

import pytest

from cv_architect.utils.file_validators import (
    detect_file_type,
    file_extension,
    get_file_type_from_mime,
    is_legacy_doc,
    validate_file_signature,
    validate_zip_safety,
)


@pytest.fixture
def sample_docx_bytes() -> bytes:
    """Return valid DOCX (ZIP) file bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("word/document.xml", "<document>Test</document>")
    return buffer.getvalue()


class TestValidateFileSignature:
    """Test magic number validation."""

    @pytest.mark.parametrize(
        ("data", "file_type"),
        [
            (b"%PDF-1.7\n%\xe2\xe3", "pdf"),
            (b"PK\x03\x04\x14\x00", "docx"),
            (b"\x89PNG\r\n\x1a\n\x00\x00", "png"),
            (b"\xff\xd8\xff\xe0\x00\x10JFIF", "jpeg"),
            (b"RIFF\x24\x00\x00\x00WEBPVP8 ", "webp"),
        ],
    )
    def test_valid_signatures(self, data: bytes, file_type: str) -> None:
        assert validate_file_signature(data, file_type) is True

    def test_executable_spoofed_as_pdf_fails(self) -> None:
        assert validate_file_signature(b"MZ\x90\x00" + b"\x00" * 100, "pdf") is False

    def test_riff_that_is_not_webp_fails(self) -> None:
        """A WAV file is also RIFF, but not WEBP."""
        assert validate_file_signature(b"RIFF\x24\x00\x00\x00WAVEfmt ", "webp") is False

    def test_empty_file_fails(self) -> None:
        assert validate_file_signature(b"", "pdf") is False
        assert validate_file_signature(b"", "webp") is False


class TestFileTypeMapping:
    """Test extension and MIME type mapping."""

    def test_mime_with_parameters(self) -> None:
        assert get_file_type_from_mime("application/pdf; charset=binary") == "pdf"

    def test_non_standard_jpeg_mime(self) -> None:
        assert get_file_type_from_mime("image/jpg") == "jpeg"

    def test_unknown_mime(self) -> None:
        assert get_file_type_from_mime("text/plain") is None
        assert get_file_type_from_mime(None) is None

    def test_extension_wins_over_mime(self) -> None:
        """Browsers often report DOCX as octet-stream."""
        assert detect_file_type("cv.docx", "application/octet-stream") == "docx"

    def test_falls_back_to_mime_without_extension(self) -> None:
        assert detect_file_type("scan", "image/png") == "png"

    def test_file_extension_is_lower_cased(self) -> None:
        assert file_extension("CV.PDF") == ".pdf"
        assert file_extension("README") is None
        assert file_extension(None) is None

    def test_legacy_doc_detection(self) -> None:
        assert is_legacy_doc("cv.doc", None) is True
        assert is_legacy_doc("cv", "application/msword") is True
        assert is_legacy_doc("cv.docx", None) is False


class TestValidateZipSafety:
    """Test ZIP bomb protection."""

    def test_valid_zip_passes(self, sample_docx_bytes: bytes) -> None:
        validate_zip_safety(sample_docx_bytes)

    def test_corrupted_zip_fails(self) -> None:
        with pytest.raises(ValueError, match="Invalid ZIP file structure"):
            validate_zip_safety(b"PK\x03\x04" + b"\x00" * 100)

    def test_high_compression_ratio_fails(self) -> None:
        """Highly repetitive content compresses far beyond the allowed ratio."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("word/document.xml", "A" * (2 * 1024 * 1024))

        with pytest.raises(ValueError, match="Suspicious compression ratio"):
            validate_zip_safety(buffer.getvalue())

    def test_excessive_uncompressed_size_fails(self) -> None:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as zf:
            zf.writestr("word/document.xml", b"\x00" * (2 * 1024 * 1024))

        with pytest.raises(ValueError, match="exceeds limit"):
            validate_zip_safety(buffer.getvalue(), max_uncompressed_mb=1)
