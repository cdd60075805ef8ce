"""
Archive session for placeholder editing of .docx files.

A session copies the source archive to a private working file, tokenizes
its document, header and footer parts, lets callers substitute
placeholders, and writes the recompiled parts back on save. The source
file itself is never modified.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import time
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import uuid4

from ..config import DocxVarsConfig
from ..converters.fragment_compiler import FragmentCompiler
from ..core.document_model import Part, PartRepository, PartRole
from ..engine.substitution import SubstitutionEngine
from ..tracking.change_tracker import ChangeRecord, collect_changes, restore_original

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# Probe order within one suffix
PROBE_ROLES = (PartRole.DOCUMENT, PartRole.FOOTER, PartRole.HEADER)


class SessionStateError(RuntimeError):
    """Raised when an operation needs a loaded archive and there is none."""


@dataclass
class SessionState:
    """Everything a session holds for one loaded archive."""

    source_path: Optional[Path] = None
    working_path: Optional[Path] = None
    archive: Optional[zipfile.ZipFile] = None
    working_path_returned: bool = False
    repository: PartRepository = field(default_factory=PartRepository)


class DocxSession:
    """
    Loads one .docx archive, edits its placeholders and saves it.

    A session is single-threaded and owns one working copy at a time; use
    one session per archive. ``close()`` resets it for reuse.
    """

    def __init__(self, path: Optional[PathLike] = None, config: Optional[DocxVarsConfig] = None):
        self.config = config or DocxVarsConfig()
        self.engine = SubstitutionEngine(strict_arguments=self.config.strict_arguments)
        self.compiler = FragmentCompiler(
            encoding=self.config.encoding,
            preserve_leading_text=self.config.preserve_leading_text,
        )
        self.state = SessionState()

        if path is not None:
            self.load(path)

    def __enter__(self) -> DocxSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- state ---------------------------------------------------------

    @property
    def repository(self) -> PartRepository:
        return self.state.repository

    @property
    def documents(self) -> List[Part]:
        return self.state.repository.documents

    @property
    def footers(self) -> List[Part]:
        return self.state.repository.footers

    @property
    def headers(self) -> List[Part]:
        return self.state.repository.headers

    @property
    def source_path(self) -> Optional[Path]:
        return self.state.source_path

    @property
    def working_path(self) -> Optional[Path]:
        return self.state.working_path

    @property
    def is_loaded(self) -> bool:
        return self.state.archive is not None

    # -- lifecycle -----------------------------------------------------

    def load(self, path: PathLike) -> None:
        """
        Copy ``path`` to a working file and tokenize its parts.

        Raises:
            FileNotFoundError: if the source does not exist
            zipfile.BadZipFile: if the source is not a zip archive
        """
        if self.is_loaded:
            logger.debug(f"Closing {self.state.source_path} before loading {path}")
            self.close()

        source_path = Path(path)
        working_path = self._new_working_path()

        shutil.copyfile(source_path, working_path)
        try:
            archive = zipfile.ZipFile(working_path, "r")
        except (zipfile.BadZipFile, OSError):
            working_path.unlink(missing_ok=True)
            raise

        self.state.source_path = source_path
        self.state.working_path = working_path
        self.state.archive = archive

        self._discover_parts()
        logger.info(
            f"Loaded {source_path}: {len(self.documents)} document(s), "
            f"{len(self.headers)} header(s), {len(self.footers)} footer(s)"
        )

    def save(self, path: Optional[PathLike] = None) -> Path:
        """
        Write every part back into the working archive.

        Returns the working file's path, or ``path`` when given, after
        copying the working file there.
        """
        if not self.is_loaded:
            raise SessionStateError("No archive is loaded; call load() first")

        working_path = self.state.working_path
        replacements = {
            part.local_name: self.compiler.compile_bytes(part)
            for part in self.repository.all_parts()
        }

        self.state.archive.close()
        try:
            self._rewrite_archive(working_path, replacements)
        finally:
            self.state.archive = zipfile.ZipFile(working_path, "r")

        logger.info(f"Saved {len(replacements)} part(s) to {working_path}")

        if path is None:
            self.state.working_path_returned = True
            return working_path

        destination = Path(path)
        if destination.resolve() == working_path.resolve():
            self.state.working_path_returned = True
        else:
            shutil.copyfile(working_path, destination)
            logger.info(f"Copied {working_path} to {destination}")
        return destination

    def close(self) -> None:
        """
        Reset the session for a new run.

        The working copy is deleted unless save() returned it as the result.
        """
        if self.state.archive is not None:
            self.state.archive.close()
        working_path = self.state.working_path
        if working_path is not None and not self.state.working_path_returned:
            working_path.unlink(missing_ok=True)
            logger.debug(f"Removed working copy {working_path}")
        self.state.repository.clear()
        self.state = SessionState()

    # -- substitution --------------------------------------------------

    def set_value(self, search: Any, replace: Any) -> int:
        """Replace a placeholder in the document, footers and headers."""
        return self.engine.substitute(self.repository.all_parts(), search, replace)

    def set_values(self, values: Mapping[str, str]) -> int:
        """Replace every placeholder of ``values`` everywhere."""
        return self.engine.substitute_many(self.repository.all_parts(), values)

    def set_value_document(self, search: Any, replace: Any) -> int:
        return self.engine.substitute(self.documents, search, replace)

    def set_value_footer(self, search: Any, replace: Any) -> int:
        return self.engine.substitute(self.footers, search, replace)

    def set_value_header(self, search: Any, replace: Any) -> int:
        return self.engine.substitute(self.headers, search, replace)

    def clean_tag_vars(self) -> int:
        """Strip leftover ``${`` and ``}`` so unfilled placeholders show their name only."""
        return self.engine.clean_tag_vars(self.repository.all_parts())

    # -- inspection ----------------------------------------------------

    def list_parts(self) -> List[Part]:
        return self.repository.all_parts()

    def get_text(self) -> Dict[str, str]:
        """Plain text of every part as loaded, keyed by local name."""
        return {part.local_name: part.text for part in self.repository.all_parts()}

    def unresolved_placeholders(self) -> List[str]:
        return self.engine.find_placeholders(self.repository.all_parts())

    def get_changes(self) -> List[ChangeRecord]:
        return collect_changes(self.repository.all_parts())

    def restore_original(self) -> int:
        """Undo every substitution made since load."""
        return restore_original(self.repository.all_parts())

    # -- internals -----------------------------------------------------

    def _new_working_path(self) -> Path:
        work_dir = Path(self.config.work_dir or tempfile.gettempdir())
        work_dir.mkdir(parents=True, exist_ok=True)
        name = f"{self.config.temp_prefix}{int(time.time())}-{uuid4().hex[:8]}.temp.docx"
        return work_dir / name

    def _discover_parts(self) -> None:
        """Probe ``<base>.xml`` then ``<base>0.xml`` .. for every role."""
        archive = self.state.archive
        names = set(archive.namelist())
        suffixes: List[Any] = [""] + list(range(self.config.probe_limit))

        for suffix in suffixes:
            for role in PROBE_ROLES:
                local_name = role.local_name_for(suffix)
                if local_name not in names:
                    continue
                xml = archive.read(local_name).decode(self.config.encoding)
                if not xml:
                    continue
                self.repository.add(role, Part.from_xml(local_name, role, xml))
                logger.debug(f"Discovered {role.value} part {local_name}")

    @staticmethod
    def _rewrite_archive(working_path: Path, replacements: Dict[str, bytes]) -> None:
        """Copy every entry, swapping in replaced parts, then replace the file."""
        rewrite_path = working_path.with_name(working_path.name + ".rewrite")
        try:
            with zipfile.ZipFile(working_path, "r") as source, \
                    zipfile.ZipFile(rewrite_path, "w") as target:
                written = set()
                for info in source.infolist():
                    if info.filename in written:
                        continue
                    if info.filename in replacements:
                        data = replacements[info.filename]
                    else:
                        data = source.read(info)
                    target.writestr(info, data)
                    written.add(info.filename)
                for local_name, data in replacements.items():
                    if local_name not in written:
                        target.writestr(local_name, data, compress_type=zipfile.ZIP_DEFLATED)
            os.replace(rewrite_path, working_path)
        except BaseException:
            if rewrite_path.exists():
                rewrite_path.unlink()
            raise
