"""Type declaration files shared by every render in the process.

Declarations are read from a JSON array of ``{"path": ..., "code": ...}``
entries and registered once. There is no invalidation: declarations that
change on disk are only picked up by a new process.
"""

import asyncio
import json
import logging
from pathlib import Path

from pydantic import BaseModel, TypeAdapter

from annotated_snippets.core.languages import is_analyzable_filename
from annotated_snippets.core.ports.analyzer import DocumentRegistry

logger = logging.getLogger(__name__)

_DECLARATION_SUFFIX = ".d.ts"


class DeclarationFile(BaseModel):
    path: str
    code: str


_DECLARATION_FILES = TypeAdapter(list[DeclarationFile])


def is_declaration_file(filename: str) -> bool:
    return filename.endswith(_DECLARATION_SUFFIX)


def module_specifier_for(path: str) -> str:
    """Derive the import specifier a declaration file provides, e.g. ``node_modules/ui/index.d.ts`` -> ``ui``."""
    specifier = path.replace("\\", "/")
    specifier = specifier.removeprefix("./")
    if "node_modules/" in specifier:
        specifier = specifier.rsplit("node_modules/", 1)[1]
    specifier = specifier.removeprefix("@types/")
    for suffix in ("/index" + _DECLARATION_SUFFIX, _DECLARATION_SUFFIX):
        if specifier.endswith(suffix):
            specifier = specifier[: -len(suffix)]
            break
    return specifier


class TypeDeclarationLoader:
    """Register declaration files into a registry once per process.

    The first caller starts the load, concurrent callers await the same
    in-flight task and later callers get the cached result. A failed load
    is not cached.
    """

    def __init__(self, registry: DocumentRegistry, path: Path) -> None:
        self._registry = registry
        self._path = path
        self._task: asyncio.Task[int] | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def loaded(self) -> bool:
        return self._task is not None and self._task.done() and not self._task.cancelled()

    async def load(self) -> int:
        """Return the number of declaration files registered."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._load())
        task = self._task
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._task is task:
                self._task = None
            raise

    async def _load(self) -> int:
        if not self._path.exists():
            logger.warning("Type declarations not found at %s; rendering without them", self._path)
            return 0

        text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        files = _DECLARATION_FILES.validate_python(json.loads(text))

        count = 0
        for declaration in files:
            if not is_analyzable_filename(declaration.path):
                logger.debug("Skipping non-script declaration %s", declaration.path)
                continue
            self._registry.register(declaration.path, declaration.code, overwrite=True)
            count += 1

        logger.info("Loaded %d type declaration file(s) from %s", count, self._path)
        return count
