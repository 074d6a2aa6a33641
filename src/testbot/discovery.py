"""Discovery and loading of test_* modules."""

from __future__ import annotations

import importlib.util
import logging
import re
import sys
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from testbot.errors import ModuleLoadError


logger = logging.getLogger(__name__)

RE_FILE_NAME = re.compile(r"^test_([A-Za-z0-9]*)\.py$")

Source = Callable[[], Iterator["ModuleDescriptor"]]


@dataclass(frozen=True)
class ModuleDescriptor:
    """A loadable test module and its display name."""

    path: Path
    name: str


def _describe(path: Path) -> ModuleDescriptor | None:
    match = RE_FILE_NAME.match(path.name)
    if match is None:
        return None
    return ModuleDescriptor(path=path, name=match.group(1))


def file_source(path: Path | str) -> Source:
    """Source yielding ``path`` itself when it is an existing test_* file."""
    path = Path(path)

    def source() -> Iterator[ModuleDescriptor]:
        if not path.is_file():
            logger.debug("Skipping %s: not a file", path)
            return
        descriptor = _describe(path)
        if descriptor is not None:
            yield descriptor

    return source


def directory_source(path: Path | str) -> Source:
    """Source yielding every test_* file directly inside ``path``, sorted by name."""
    path = Path(path)

    def source() -> Iterator[ModuleDescriptor]:
        if not path.is_dir():
            logger.debug("Skipping %s: not a directory", path)
            return
        for entry in sorted(path.iterdir()):
            if not entry.is_file():
                continue
            descriptor = _describe(entry)
            if descriptor is not None:
                yield descriptor

    return source


def source_for(path: Path | str) -> Source:
    """Pick a file or directory source for a command-line path."""
    path = Path(path).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    if path.suffix == ".py":
        return file_source(path)
    return directory_source(path)


def discover(paths: Iterable[Path | str] | None = None) -> list[ModuleDescriptor]:
    """Collect module descriptors from ``paths`` in argument order.

    Args:
        paths: Files or directories. Defaults to the current directory.

    Example:
        modules = discover()  # Current directory
        modules = discover(["test_math.py", "./more_tests/"])
    """
    paths = list(paths or [])
    sources = [source_for(p) for p in paths] if paths else [directory_source(Path.cwd())]

    modules: list[ModuleDescriptor] = []
    for source in sources:
        modules.extend(source())
    logger.debug("Discovered %d module(s)", len(modules))
    return modules


def _module_name(path: Path) -> str:
    return f"testbot_module_{path.stem}_{abs(hash(path.resolve())):x}"


def load_module(path: Path | str) -> ModuleType:
    """Dynamically load a Python module from path."""
    path = Path(path)
    name = _module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load module from {path}"
        raise ModuleLoadError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module
