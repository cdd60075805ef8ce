"""
Unit tests: DocxSession load/save lifecycle and part discovery.
"""
from __future__ import annotations

import zipfile

import pytest

from docx_vars.config import DocxVarsConfig
from docx_vars.core.document_model import PartRole
from docx_vars.session.archive_session import DocxSession, SessionStateError

from ..conftest import DOCUMENT_XML, FOOTER_XML, HEADER_XML, build_archive, read_entry


class TestDiscovery:

    def test_numbered_footers_in_index_order(self, tmp_path, config):
        path = build_archive(tmp_path / "multi.docx", {
            "word/document.xml": DOCUMENT_XML,
            "word/footer2.xml": "<w:ftr>two</w:ftr>",
            "word/footer1.xml": "<w:ftr>one</w:ftr>",
        })
        with DocxSession(path, config=config) as session:
            assert [p.local_name for p in session.documents] == ["word/document.xml"]
            assert [p.local_name for p in session.footers] == ["word/footer1.xml", "word/footer2.xml"]
            assert session.headers == []

    def test_unsuffixed_then_zero_then_numbers(self, tmp_path, config):
        path = build_archive(tmp_path / "hdr.docx", {
            "word/header3.xml": "<h>3</h>",
            "word/header.xml": "<h>-</h>",
            "word/header0.xml": "<h>0</h>",
        })
        with DocxSession(path, config=config) as session:
            assert [p.local_name for p in session.headers] == [
                "word/header.xml", "word/header0.xml", "word/header3.xml",
            ]
            assert all(p.role is PartRole.HEADER for p in session.headers)

    def test_empty_entries_are_skipped(self, tmp_path, config):
        path = build_archive(tmp_path / "empty.docx", {
            "word/document.xml": DOCUMENT_XML,
            "word/footer1.xml": "",
        })
        with DocxSession(path, config=config) as session:
            assert session.footers == []

    def test_probe_limit_bounds_discovery(self, tmp_path):
        path = build_archive(tmp_path / "limit.docx", {
            "word/footer1.xml": "<f>1</f>",
            "word/footer5.xml": "<f>5</f>",
        })
        config = DocxVarsConfig(work_dir=tmp_path / "work", probe_limit=3)
        with DocxSession(path, config=config) as session:
            assert [p.local_name for p in session.footers] == ["word/footer1.xml"]

    def test_part_text_preview(self, template, config):
        with DocxSession(template, config=config) as session:
            assert session.get_text()["word/header1.xml"] == "${COMPANY}"


class TestLoad:

    def test_missing_file(self, tmp_path, config):
        with pytest.raises(FileNotFoundError):
            DocxSession(tmp_path / "nope.docx", config=config)

    def test_not_an_archive(self, tmp_path, config):
        path = tmp_path / "plain.docx"
        path.write_text("not a zip")
        with pytest.raises(zipfile.BadZipFile):
            DocxSession(path, config=config)
        assert list((tmp_path / "work").iterdir()) == []

    def test_working_copy_is_private(self, template, config):
        with DocxSession(template, config=config) as session:
            assert session.working_path != template
            assert session.working_path.parent == config.work_dir
            assert session.working_path.name.endswith(".temp.docx")

    def test_two_sessions_get_distinct_working_copies(self, template, config):
        with DocxSession(template, config=config) as first, DocxSession(template, config=config) as second:
            assert first.working_path != second.working_path


class TestSave:

    def test_save_to_destination(self, tmp_path, template, config):
        destination = tmp_path / "out.docx"
        with DocxSession(template, config=config) as session:
            session.set_values({"NAME": "Ada", "CITY": "London", "COMPANY": "ACME"})
            result = session.save(destination)

        assert result == destination
        document = read_entry(destination, "word/document.xml")
        assert "Dear Ada," in document
        assert "<w:t>London</w:t>" in document
        assert "${MISSING}" in document
        assert read_entry(destination, "word/footer1.xml") == FOOTER_XML.replace("${NAME}", "Ada")
        assert read_entry(destination, "word/header1.xml") == HEADER_XML.replace("${COMPANY}", "ACME")

    def test_source_is_untouched(self, tmp_path, template, config):
        before = template.read_bytes()
        with DocxSession(template, config=config) as session:
            session.set_value("NAME", "Ada")
            session.save(tmp_path / "out.docx")
        assert template.read_bytes() == before

    def test_save_without_path_returns_working_copy(self, template, config):
        with DocxSession(template, config=config) as session:
            session.set_value("COMPANY", "ACME")
            result = session.save()
            assert result == session.working_path
            assert "ACME" in read_entry(result, "word/header1.xml")

    def test_other_entries_preserved(self, tmp_path, template, config):
        destination = tmp_path / "out.docx"
        with DocxSession(template, config=config) as session:
            session.save(destination)

        with zipfile.ZipFile(template) as source, zipfile.ZipFile(destination) as saved:
            assert saved.namelist() == source.namelist()
            assert saved.read("word/styles.xml") == source.read("word/styles.xml")
            assert saved.getinfo("word/document.xml").compress_type == zipfile.ZIP_DEFLATED

    def test_save_twice(self, tmp_path, template, config):
        with DocxSession(template, config=config) as session:
            session.set_value("NAME", "Ada")
            session.save(tmp_path / "first.docx")
            session.clean_tag_vars()
            session.save(tmp_path / "second.docx")

        assert "${MISSING}" in read_entry(tmp_path / "first.docx", "word/document.xml")
        assert "Unfilled: MISSING" in read_entry(tmp_path / "second.docx", "word/document.xml")

    def test_save_to_working_path_skips_copy(self, template, config):
        with DocxSession(template, config=config) as session:
            session.set_value("COMPANY", "ACME")
            working_path = session.working_path
            result = session.save(str(working_path))
            assert result == working_path
            assert "ACME" in read_entry(working_path, "word/header1.xml")
        assert working_path.exists()
        assert list(config.work_dir.iterdir()) == [working_path]

    def test_save_before_load(self, config):
        with pytest.raises(SessionStateError):
            DocxSession(config=config).save()


class TestSubstitutionScopes:

    def test_document_only(self, template, config):
        with DocxSession(template, config=config) as session:
            session.set_value_document("NAME", "Ada")
            assert "Ada" in session.documents[0].current_text
            assert "${NAME}" in session.footers[0].current_text

    def test_footer_only(self, template, config):
        with DocxSession(template, config=config) as session:
            session.set_value_footer("NAME", "Ada")
            assert "${NAME}" in session.documents[0].current_text
            assert session.footers[0].current_text == "Page for Ada"

    def test_header_only(self, template, config):
        with DocxSession(template, config=config) as session:
            assert session.set_value_header("${COMPANY}", "ACME") == 1
            assert session.headers[0].current_text == "ACME"

    def test_split_placeholder_then_cleanup(self, template, config):
        with DocxSession(template, config=config) as session:
            session.set_value("CITY", "Paris")
            assert "${Paris}" in session.documents[0].current_text
            session.clean_tag_vars()
            assert "Paris" in session.documents[0].current_text
            assert "${" not in session.documents[0].current_text

    def test_unresolved_and_changes(self, template, config):
        with DocxSession(template, config=config) as session:
            assert session.unresolved_placeholders() == ["NAME", "MISSING", "COMPANY"]
            session.set_value("NAME", "Ada")
            changes = session.get_changes()
            assert [c.local_name for c in changes] == ["word/document.xml", "word/footer1.xml"]
            assert session.restore_original() == 2
            assert session.get_changes() == []

    def test_substitution_on_empty_session(self, config):
        session = DocxSession(config=config)
        assert session.set_value("A", "1") == 0


class TestClose:

    def test_close_resets_state(self, template, config):
        session = DocxSession(template, config=config)
        session.close()
        assert not session.is_loaded
        assert session.source_path is None
        assert session.working_path is None
        assert len(session.repository) == 0

    def test_reuse_after_close(self, tmp_path, template, config):
        other = build_archive(tmp_path / "other.docx", {"word/document.xml": "<w:t>${X}</w:t>"})
        session = DocxSession(template, config=config)
        session.close()
        session.load(other)
        assert [p.local_name for p in session.list_parts()] == ["word/document.xml"]
        session.close()


class TestWorkingCopyCleanup:

    def test_load_only_session_leaves_nothing(self, template, config):
        with DocxSession(template, config=config) as session:
            assert session.working_path.exists()
        assert list(config.work_dir.iterdir()) == []

    def test_save_to_destination_leaves_nothing(self, tmp_path, template, config):
        for index in range(3):
            with DocxSession(template, config=config) as session:
                session.set_value("NAME", "Ada")
                session.save(tmp_path / f"out{index}.docx")
        assert list(config.work_dir.iterdir()) == []
        assert (tmp_path / "out2.docx").exists()

    def test_returned_working_copy_is_kept(self, template, config):
        with DocxSession(template, config=config) as session:
            result = session.save()
        assert result.exists()
        assert list(config.work_dir.iterdir()) == [result]

    def test_reload_removes_previous_copy(self, tmp_path, template, config):
        session = DocxSession(template, config=config)
        first = session.working_path
        session.load(template)
        assert not first.exists()
        assert list(config.work_dir.iterdir()) == [session.working_path]
        session.close()
