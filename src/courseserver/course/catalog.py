"""
=============================================================================
LESSON CATALOG
=============================================================================

Loads every lesson from disk once, renders it to HTML once, and answers
content and navigation queries for the course pages.

=============================================================================
ON-DISK LAYOUT
=============================================================================

    lessons/
    ├── fundamentals/              ← module  (directory name)
    │   ├── introduction.md        ← lesson  (file stem)
    │   ├── sockets.md
    │   └── ...
    ├── building-blocks/
    │   └── ...
    └── my-extra-module/           ← unknown modules are served too,
        └── notes.md                 after the known ones

=============================================================================
ORDERING
=============================================================================

Directory listings come back in arbitrary order, so discovery sorts them
by name. Then the course outline imposes the real order:

    discovered:  http-basics, introduction, notes, sockets
    outline:     introduction, sockets, http-basics, threading
                 ─────────────────────────────────────────────
    result:      introduction, sockets, http-basics, notes
                                                     └── unknown, appended

The same rule orders modules.

=============================================================================
CONCURRENCY
=============================================================================

load() runs once, in HTTPServer.__init__, before any worker thread exists.
It builds new dicts and only assigns them at the end, so a catalog is
never observed half-loaded. After that every method is a read, and the
catalog is shared by all workers without a lock.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from . import outline
from .markdown import render, extract_title, extract_tags


logger = logging.getLogger(__name__)


MODULE_NOT_FOUND = "<h2>Module Not Found</h2><p>This module is not available.</p>"
LESSON_NOT_FOUND = "<h2>Lesson Not Found</h2><p>This lesson is not available.</p>"


@dataclass(frozen=True)
class Lesson:
    """
    One lesson file, parsed and rendered.

    Attributes:
        module: Module (directory) name.
        name: Lesson name (file stem).
        title: First "# " heading, or "Untitled Lesson".
        content: Raw Markdown.
        html: Rendered HTML fragment, computed at load time.
        tags: Every "#word" token in the Markdown.
    """

    module: str
    name: str
    title: str
    content: str
    html: str
    tags: FrozenSet[str] = frozenset()


@dataclass
class Module:
    """
    A module and its lessons.

    Invariant: every name in lesson_names has an entry in lessons.
    """

    name: str
    lesson_names: List[str] = field(default_factory=list)
    lessons: Dict[str, Lesson] = field(default_factory=dict)

    @property
    def first_lesson(self) -> str:
        # An empty module still links somewhere sensible
        return self.lesson_names[0] if self.lesson_names else "introduction"


class LessonCatalog:
    """
    All modules and lessons under one lessons directory.

    Usage:
        catalog = LessonCatalog("lessons")
        if not catalog.load():
            ...  # fall back to the outline

        html = catalog.content("fundamentals", "sockets")
        nav = catalog.navigation("fundamentals", "sockets")
    """

    def __init__(self, lessons_dir: Union[str, Path], site_title: str = "Server Development Course"):
        self.lessons_dir = Path(lessons_dir)
        self.site_title = site_title

        self._modules: Dict[str, Module] = {}
        self._module_order: List[str] = []
        self._loaded = False

    # =========================================================================
    # LOADING
    # =========================================================================

    def load(self) -> bool:
        """
        Scan the lessons directory and render every lesson.

        Returns:
            False if the directory doesn't exist or can't be listed,
            True otherwise (even if it holds no lessons).
        """
        root = self.lessons_dir
        if not root.is_dir():
            logger.warning(f"Lessons directory not found: {root}")
            return False

        modules: Dict[str, Module] = {}
        try:
            for module_dir in sorted(root.iterdir()):
                if module_dir.is_dir():
                    modules[module_dir.name] = self._load_module(module_dir)
        except OSError as e:
            logger.error(f"Error loading lessons from {root}: {e}")
            return False

        order = outline.canonical_sort(list(modules), outline.module_order())

        self._modules = modules
        self._module_order = order
        self._loaded = True

        logger.info(
            f"Loaded {len(modules)} modules with {self.lesson_count} lessons from {root}"
        )
        return True

    def _load_module(self, module_dir: Path) -> Module:
        module = Module(name=module_dir.name)
        discovered: List[str] = []

        for path in sorted(module_dir.iterdir()):
            if path.suffix != ".md" or not path.is_file():
                continue

            lesson = self._load_lesson(module.name, path)
            if lesson is not None:
                discovered.append(lesson.name)
                module.lessons[lesson.name] = lesson

        module.lesson_names = outline.canonical_sort(
            discovered, outline.lesson_order(module.name)
        )
        return module

    def _load_lesson(self, module: str, path: Path) -> Optional[Lesson]:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read lesson {path}: {e}")
            return None

        return Lesson(
            module=module,
            name=path.stem,
            title=extract_title(content),
            content=content,
            html=render(content),
            tags=extract_tags(content),
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def module_order(self) -> List[str]:
        return list(self._module_order)

    @property
    def lesson_count(self) -> int:
        return sum(len(module.lesson_names) for module in self._modules.values())

    def get_module(self, name: str) -> Optional[Module]:
        return self._modules.get(name)

    def get_lesson(self, module: str, lesson: str) -> Optional[Lesson]:
        entry = self._modules.get(module)
        if entry is None:
            return None
        return entry.lessons.get(lesson)

    def has_lesson(self, module: str, lesson: str) -> bool:
        return self.get_lesson(module, lesson) is not None

    def lesson_index(self) -> Dict[str, List[str]]:
        """module → lesson names, both in canonical order."""
        return {
            name: list(self._modules[name].lesson_names)
            for name in self._module_order
        }

    def content(self, module: str, lesson: str) -> str:
        """
        The rendered HTML of a lesson.

        Unknown module or lesson gives a short "Not Found" fragment instead.
        """
        entry = self._modules.get(module)
        if entry is None:
            return MODULE_NOT_FOUND

        found = entry.lessons.get(lesson)
        if found is None:
            return LESSON_NOT_FOUND

        return found.html

    def previous_next(self, module: str, lesson: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Names of the lessons before and after `lesson` in its module.

        (None, None) if the module or lesson is unknown; None at either end.
        """
        entry = self._modules.get(module)
        if entry is None or lesson not in entry.lesson_names:
            return (None, None)

        names = entry.lesson_names
        index = names.index(lesson)
        previous = names[index - 1] if index > 0 else None
        following = names[index + 1] if index + 1 < len(names) else None
        return (previous, following)

    def _lesson_title(self, module: str, lesson: str) -> str:
        # Outline title first, then the lesson's own heading, then the name
        title = outline.lesson_title(lesson)
        if title != lesson:
            return title
        found = self.get_lesson(module, lesson)
        return found.title if found else lesson

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def navigation(self, module: str, current_lesson: str) -> str:
        """
        The navigation panel for a course page.

        ┌───────────────────────────────────────────────────────────────┐
        │  <h2>site title</h2>   Home → Course → module                 │  nav-header
        ├───────────────────────────────────────────────────────────────┤
        │  [Fundamentals] [Building Blocks] [...]                       │  module-tabs
        ├───────────────────────────────────────────────────────────────┤
        │  Module: Fundamentals                                         │  module-navigation
        │    • Introduction   • Socket Programming (active) ...         │
        ├───────────────────────────────────────────────────────────────┤
        │  ← Previous                                       Next →      │  lesson-navigation
        └───────────────────────────────────────────────────────────────┘

        Returns "" for a module that isn't in the catalog, so the caller
        can fall back to its own list.
        """
        entry = self._modules.get(module)
        if entry is None:
            return ""

        parts = [
            '<div class="course-navigation">',
            '<div class="nav-header">',
            f"<h2>{self.site_title}</h2>",
            '<div class="breadcrumb">',
            '<a href="/">Home</a> → ',
            '<a href="/#course-overview">Course</a> → ',
            f'<span class="current-module">{module}</span>',
            "</div>",
            "</div>",
        ]

        # Module tabs
        parts.append('<div class="module-tabs"><ul>')
        for name in self._module_order:
            active = ' class="active"' if name == module else ""
            first = self._modules[name].first_lesson
            parts.append(
                f'<li{active}><a href="/course/{name}/{first}">'
                f"{outline.module_title(name)}</a></li>"
            )
        parts.append("</ul></div>")

        # Lessons of the current module
        parts.append('<div class="module-navigation">')
        parts.append(f"<h3>Module: {outline.module_title(module)}</h3>")
        parts.append('<ul class="lesson-list">')
        for name in entry.lesson_names:
            active = ' class="active"' if name == current_lesson else ""
            parts.append(
                f'<li{active}><a href="/course/{module}/{name}">'
                f"{self._lesson_title(module, name)}</a></li>"
            )
        parts.append("</ul></div>")

        # Previous / next
        previous, following = self.previous_next(module, current_lesson)
        parts.append('<div class="lesson-navigation">')
        if previous:
            parts.append(
                f'<a href="/course/{module}/{previous}" class="nav-btn prev-btn">← Previous</a>'
            )
        if following:
            parts.append(
                f'<a href="/course/{module}/{following}" class="nav-btn next-btn">Next →</a>'
            )
        parts.append("</div>")

        parts.append("</div>")
        return "".join(parts)


def discover_lessons_dir(cwd: Optional[Path] = None) -> Path:
    """
    Find the lessons directory when none is configured.

    Tries, in order:
        ./lessons   ../lessons   ../../lessons

    relative to the working directory, and returns the first one that
    exists. If none does, returns ../lessons (load() will then report it
    missing).
    """
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    candidates = [
        cwd / "lessons",
        cwd.parent / "lessons",
        cwd.parent.parent / "lessons",
    ]

    for candidate in candidates:
        if candidate.is_dir():
            logger.info(f"Found lessons directory: {candidate}")
            return candidate

    fallback = cwd.parent / "lessons"
    logger.info(f"Using fallback lessons directory: {fallback}")
    return fallback
