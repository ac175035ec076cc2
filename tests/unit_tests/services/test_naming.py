import re

import pytest

from ebooks_api.services.naming import (
    MAX_FILE_NAME_LENGTH,
    build_object_path,
    get_extension,
    is_allowed_extension,
    sanitize_file_name,
)

SAFE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


@pytest.mark.parametrize(
    "file_name",
    [
        "report.pdf",
        "my report (final).pdf",
        "a__b___c.pdf",
        "문법 교재 2권.epub",
        "../../etc/passwd.pdf",
        "tab\tnew\nline\x00.pdf",
        "emoji 📚 book.epub",
        "___",
        "x" * 600 + ".pdf",
        "?" * 300,
    ],
)
def test_sanitize_file_name_output_is_safe(file_name):
    safe_name = sanitize_file_name(file_name)
    assert SAFE_NAME_PATTERN.match(safe_name)
    assert "__" not in safe_name
    assert len(safe_name) <= MAX_FILE_NAME_LENGTH


def test_sanitize_file_name_examples():
    assert sanitize_file_name("report.pdf") == "report.pdf"
    assert sanitize_file_name("my report (final).pdf") == "my_report_final_.pdf"
    assert sanitize_file_name("a  b.PDF") == "a_b.PDF"
    assert sanitize_file_name("Level-2_grammar.v1.epub") == "Level-2_grammar.v1.epub"


def test_sanitize_file_name_truncates_stem_and_keeps_extension():
    assert sanitize_file_name("a" * 1000 + ".pdf") == "a" * 251 + ".pdf"
    assert sanitize_file_name("a" * 250 + ".exe" + "b" * 20 + ".PDF") == "a" * 250 + "..PDF"


def test_sanitize_file_name_without_extension_is_cut_to_255_characters():
    assert sanitize_file_name("a" * 1000) == "a" * 255


@pytest.mark.parametrize(
    "file_name, allowed",
    [
        ("book.pdf", True),
        ("book.PDF", True),
        ("book.epub", True),
        ("book.EPub", True),
        ("book.tar.pdf", True),
        ("book.docx", False),
        ("book.pdf.exe", False),
        ("book", False),
        (".pdf", False),
        ("book.", False),
        ("pdf", False),
    ],
)
def test_is_allowed_extension(file_name, allowed):
    assert is_allowed_extension(file_name) is allowed


def test_get_extension_keeps_case():
    assert get_extension("Book.PDF") == ".PDF"
    assert get_extension("archive.tar.epub") == ".epub"
    assert get_extension("noext") == ""


def test_build_object_path_uses_owner_as_first_segment():
    file_id, object_path = build_object_path("u1", "report.pdf")
    assert re.match(r"^u1/[0-9a-f-]+\.pdf$", object_path)
    assert object_path == f"u1/{file_id}.pdf"


def test_build_object_path_uses_id_factory():
    file_id, object_path = build_object_path("u1", "notes.epub", id_factory=lambda: "fixed-id")
    assert file_id == "fixed-id"
    assert object_path == "u1/fixed-id.epub"


def test_build_object_path_generates_unique_ids():
    paths = {build_object_path("u1", "report.pdf")[1] for _ in range(100)}
    assert len(paths) == 100


def test_build_object_path_keeps_extension_of_long_names():
    _, object_path = build_object_path("u1", "a" * 250 + ".exe" + "b" * 20 + ".pdf")
    assert re.match(r"^u1/[0-9a-f-]+\.pdf$", object_path)
