"""
Course content: Markdown lessons on disk turned into HTML pages.

    outline.py    fixed module/lesson order and display titles
    markdown.py   render(markdown) -> html
    catalog.py    LessonCatalog: load, content, navigation
    pages.py      site template and course page composition
"""

from .markdown import render, extract_title, extract_tags
from .catalog import Lesson, Module, LessonCatalog, discover_lessons_dir
from .pages import render_page, course_page
from . import outline

__all__ = [
    "render",
    "extract_title",
    "extract_tags",
    "Lesson",
    "Module",
    "LessonCatalog",
    "discover_lessons_dir",
    "render_page",
    "course_page",
    "outline",
]
