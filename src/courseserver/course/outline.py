"""
Course outline: the fixed table of modules and lessons.

This is the one place that knows the course structure independently of
what is on disk:

- canonical module order and lesson order (used to sort what the catalog
  discovers)
- display titles for modules and lessons
- the module list shown on the home page
- the fallback module/lesson index used when no lessons could be loaded

Anything found on disk that isn't listed here is still served; it just
sorts after the known entries and is shown under its file name.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class LessonOutline:
    name: str
    title: str


@dataclass(frozen=True)
class ModuleOutline:
    name: str
    title: str
    description: str
    lessons: Tuple[LessonOutline, ...]

    @property
    def lesson_names(self) -> List[str]:
        return [lesson.name for lesson in self.lessons]

    @property
    def first_lesson(self) -> str:
        return self.lessons[0].name if self.lessons else "introduction"


COURSE_OUTLINE: Tuple[ModuleOutline, ...] = (
    ModuleOutline(
        name="fundamentals",
        title="Fundamentals",
        description="Socket programming, HTTP basics, threading concepts",
        lessons=(
            LessonOutline("introduction", "Introduction"),
            LessonOutline("sockets", "Socket Programming"),
            LessonOutline("http-basics", "HTTP Protocol Basics"),
            LessonOutline("threading", "Multi-threading & Concurrency"),
        ),
    ),
    ModuleOutline(
        name="building-blocks",
        title="Building Blocks",
        description="Server class design, route handling, request parsing",
        lessons=(
            LessonOutline("server-class", "Server Class Architecture"),
            LessonOutline("route-handling", "Route Handling & Middleware"),
            LessonOutline("request-parsing", "Request Parsing & Validation"),
            LessonOutline("response-generation", "Response Generation & Headers"),
        ),
    ),
    ModuleOutline(
        name="advanced-features",
        title="Advanced Features",
        description="Database integration, authentication, error handling",
        lessons=(
            LessonOutline("database-integration", "Database Integration"),
            LessonOutline("authentication", "Authentication & Security"),
            LessonOutline("error-handling", "Error Handling & Logging"),
            LessonOutline("performance", "Performance Optimization"),
        ),
    ),
    ModuleOutline(
        name="deployment",
        title="Deployment & Production",
        description="Production setup, monitoring, scaling, security",
        lessons=(
            LessonOutline("production-setup", "Production Setup"),
            LessonOutline("monitoring", "Monitoring & Observability"),
            LessonOutline("scaling", "Scaling & Load Balancing"),
            LessonOutline("security", "Security Best Practices"),
        ),
    ),
)

_MODULES: Dict[str, ModuleOutline] = {module.name: module for module in COURSE_OUTLINE}

# Lesson titles are looked up by lesson name alone, across all modules
_LESSON_TITLES: Dict[str, str] = {
    lesson.name: lesson.title
    for module in COURSE_OUTLINE
    for lesson in module.lessons
}


def get_module(name: str) -> Optional[ModuleOutline]:
    return _MODULES.get(name)


def module_order() -> List[str]:
    return [module.name for module in COURSE_OUTLINE]


def lesson_order(module: str) -> List[str]:
    """Canonical lesson order for a module ([] if the module is unknown)."""
    outline = get_module(module)
    return outline.lesson_names if outline else []


def module_title(name: str) -> str:
    """Display title, or the name itself for modules not in the outline."""
    outline = get_module(name)
    return outline.title if outline else name


def lesson_title(name: str) -> str:
    """Display title, or the name itself for lessons not in the outline."""
    return _LESSON_TITLES.get(name, name)


def fallback_index() -> Dict[str, List[str]]:
    """module → lesson names, straight from the outline."""
    return {module.name: module.lesson_names for module in COURSE_OUTLINE}


def canonical_sort(names: List[str], order: List[str]) -> List[str]:
    """
    Put names in canonical order.

    Names listed in `order` come first, in that order. The rest follow in
    the order they were given.

        >>> canonical_sort(["b", "x", "a"], ["a", "b", "c"])
        ['a', 'b', 'x']
    """
    present = set(names)
    known = [name for name in order if name in present]
    listed = set(order)
    extra = [name for name in names if name not in listed]
    return known + extra
