"""Tests for file metadata validation."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from vault_keeper.schemas.file_schemas import FileCreate, FileUpdate, base_name


class TestFileCreate:
    def test_file_name_is_base_name(self):
        metadata = FileCreate(title="report", fname="/var/data/report.pdf")

        assert metadata.file_name == "report.pdf"

    def test_unicode_alphanumeric_title(self):
        assert FileCreate(title="отчёт2024", fname="a.txt").title == "отчёт2024"

    @pytest.mark.parametrize("title", ["", "my report", "report.pdf", "a/b"])
    def test_title_must_be_alphanumeric(self, title):
        with pytest.raises(PydanticValidationError):
            FileCreate(title=title, fname="a.txt")

    @pytest.mark.parametrize("fname", ["", "   ", "/var/data/"])
    def test_fname_must_name_a_file(self, fname):
        with pytest.raises(PydanticValidationError):
            FileCreate(title="report", fname=fname)


@pytest.mark.parametrize(
    "path,expected",
    [("a.txt", "a.txt"), ("/x/y/a.txt", "a.txt"), ("C:\\x\\a.txt", "a.txt"), ("x/", "")],
)
def test_base_name(path, expected):
    assert base_name(path) == expected


class TestFileUpdate:
    def test_fname_without_base_name_rejected(self):
        with pytest.raises(PydanticValidationError):
            FileUpdate(fname="dir/")

    @pytest.mark.parametrize("fname", [None, ""])
    def test_absent_or_empty_fname_allowed(self, fname):
        assert FileUpdate(fname=fname).fname == fname

    def test_path_accepted(self):
        assert FileUpdate(fname="C:\\docs\\cv.pdf").fname == "C:\\docs\\cv.pdf"
