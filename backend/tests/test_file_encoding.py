"""Tests for upload validation and data-URL encoding"""
import pytest

from backend.app.core.errors import FileRejected, ValidationFailed
from backend.app.services.file_encoding import (
    PHOTO,
    RESUME,
    UploadedFile,
    data_url_mime,
    decode_data_url,
    encode_data_url,
    is_data_url,
    validate_upload,
)

MB = 1024 * 1024


def test_photo_over_5mb_rejected():
    upload = UploadedFile("big.png", "image/png", b"\0" * (5 * MB + 1))
    with pytest.raises(FileRejected) as exc:
        validate_upload(PHOTO, upload)
    assert str(exc.value) == "Photo must be less than 5MB"


def test_photo_exactly_5mb_allowed():
    validate_upload(PHOTO, UploadedFile("ok.jpg", "image/jpeg", b"\0" * (5 * MB)))


def test_resume_over_5mb_rejected():
    upload = UploadedFile("cv.pdf", "application/pdf", b"\0" * (5 * MB + 1))
    with pytest.raises(FileRejected) as exc:
        validate_upload(RESUME, upload)
    assert str(exc.value) == "Resume must be less than 5MB"


def test_photo_wrong_type_rejected():
    with pytest.raises(FileRejected) as exc:
        validate_upload(PHOTO, UploadedFile("a.gif", "image/gif", b"GIF89a"))
    assert str(exc.value) == "Only JPG, JPEG, PNG allowed"


def test_resume_wrong_type_rejected():
    with pytest.raises(FileRejected) as exc:
        validate_upload(RESUME, UploadedFile("cv.txt", "text/plain", b"hello"))
    assert str(exc.value) == "Only PDF, DOC, DOCX allowed for resume"


def test_docx_resume_allowed():
    mime = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    validate_upload(RESUME, UploadedFile("cv.docx", mime, b"PK\x03\x04"))


def test_unknown_kind_is_validation_error():
    with pytest.raises(ValidationFailed):
        validate_upload("video", UploadedFile("a.mp4", "video/mp4", b"x"))


def test_encode_data_url_shape():
    url = encode_data_url(UploadedFile("a.png", "image/png", b"hi"))
    assert url == "data:image/png;base64,aGk="
    assert is_data_url(url)
    assert data_url_mime(url) == "image/png"


def test_encode_over_cap_rejected_with_file_name():
    upload = UploadedFile("photo.png", "image/png", b"\0" * 700_000)
    with pytest.raises(FileRejected) as exc:
        encode_data_url(upload, max_chars=900_000)
    assert str(exc.value) == 'File "photo.png" is too large. Please upload a smaller file.'
    assert exc.value.file_name == "photo.png"


def test_decode_strips_prefix_and_accepts_bare_base64():
    assert decode_data_url("data:application/pdf;base64,JVBERi0=") == b"%PDF-"
    assert decode_data_url("JVBERi0=") == b"%PDF-"


def test_decode_empty_rejected():
    with pytest.raises(ValidationFailed):
        decode_data_url("")


def test_data_url_mime_default_for_plain_url():
    assert data_url_mime("https://example.com/cv.pdf", "application/pdf") == "application/pdf"
