import pytest

from app.core.errors import BadRequest
from app.services.upload_validation import FileMeta, file_extension, is_allowed_type, validate_upload


@pytest.mark.parametrize("name", ["a.pdf", "a.DOC", "a.docx", "a.txt", "a.zip", "a.jpg", "a.jpeg", "a.png"])
def test_allowed_extensions(name):
    assert is_allowed_type(FileMeta(file_name=name, content_type="application/octet-stream"))


@pytest.mark.parametrize(
    "content_type",
    [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain; charset=utf-8",
        "application/zip",
        "image/jpeg",
        "image/png",
    ],
)
def test_allowed_content_types(content_type):
    assert is_allowed_type(FileMeta(file_name="upload.bin", content_type=content_type))


@pytest.mark.parametrize(
    "meta",
    [
        FileMeta(file_name="setup.exe", content_type="application/x-msdownload"),
        FileMeta(file_name="script.sh", content_type=None),
        FileMeta(file_name="archive.tar.gz", content_type="application/gzip"),
        FileMeta(file_name="pdf", content_type="application/octet-stream"),
    ],
)
def test_rejected_types(meta):
    assert not is_allowed_type(meta)


def test_file_extension():
    assert file_extension("Report.Final.PDF") == "pdf"
    assert file_extension("README") == ""


def test_validate_upload_size_limit():
    meta = FileMeta(file_name="a.txt", content_type="text/plain")
    validate_upload(b"x" * 10, meta, max_bytes=10)
    with pytest.raises(BadRequest) as exc:
        validate_upload(b"x" * 11, meta, max_bytes=10)
    assert "too large" in exc.value.reason


@pytest.mark.parametrize("data, meta", [(None, None), (b"x", None), (b"", FileMeta(file_name="a.txt"))])
def test_validate_upload_requires_content(data, meta):
    with pytest.raises(BadRequest):
        validate_upload(data, meta)
