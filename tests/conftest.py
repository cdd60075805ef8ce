"""
Shared fixtures: small .docx-shaped archives built in tmp_path.
"""
from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Dict

import pytest

from docx_vars.config import DocxVarsConfig

DOCUMENT_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document><w:body>'
    '<w:p><w:r><w:t>Dear ${NAME},</w:t></w:r></w:p>'
    '<w:p><w:r><w:t>${</w:t></w:r><w:r><w:t>CITY</w:t></w:r><w:r><w:t>}</w:t></w:r></w:p>'
    '<w:p><w:r><w:t>Unfilled: ${MISSING}</w:t></w:r></w:p>'
    '</w:body></w:document>'
)

FOOTER_XML = '<w:ftr><w:p><w:r><w:t>Page for ${NAME}</w:t></w:r></w:p></w:ftr>'
HEADER_XML = '<w:hdr><w:p><w:r><w:t>${COMPANY}</w:t></w:r></w:p></w:hdr>'


def build_archive(path: Path, entries: Dict[str, str]) -> Path:
    """Write ``entries`` (name -> text) as a deflated zip archive."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, text in entries.items():
            archive.writestr(name, text)
    return path


def read_entry(path: Path, name: str) -> str:
    with zipfile.ZipFile(path) as archive:
        return archive.read(name).decode("utf-8")


@pytest.fixture
def config(tmp_path) -> DocxVarsConfig:
    return DocxVarsConfig(work_dir=tmp_path / "work")


@pytest.fixture
def template(tmp_path) -> Path:
    return build_archive(tmp_path / "template.docx", {
        "[Content_Types].xml": '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types"/>',
        "word/document.xml": DOCUMENT_XML,
        "word/footer1.xml": FOOTER_XML,
        "word/header1.xml": HEADER_XML,
        "word/styles.xml": "<w:styles/>",
    })
