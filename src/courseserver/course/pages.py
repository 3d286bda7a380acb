"""
Full HTML pages: the site template and the course page built inside it.

Plain string concatenation, no templating engine. The template pulls in
/css/style.css and /js/app.js from the static tree and Prism from a CDN
for syntax highlighting of the ``language-*`` code blocks.
"""

from typing import Dict, List

from .catalog import LessonCatalog


PRISM_BASE = "https://cdnjs.cloudflare.com/ajax/libs/prism/1.29.0"


def render_page(title: str, content: str, site_title: str = "Server Development Course") -> str:
    """Wrap an HTML fragment in the site template."""
    return (
        "<!DOCTYPE html>"
        '<html lang="en">'
        "<head>"
        '<meta charset="UTF-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        f"<title>{title}</title>"
        '<link rel="stylesheet" href="/css/style.css">'
        f'<link rel="stylesheet" href="{PRISM_BASE}/themes/prism.min.css">'
        "</head>"
        "<body>"
        '<nav class="navbar">'
        '<div class="nav-container">'
        f'<h1 class="nav-title">{site_title}</h1>'
        '<ul class="nav-menu">'
        '<li><a href="/">Home</a></li>'
        '<li><a href="/course/fundamentals/introduction">Course</a></li>'
        '<li><a href="/api/users">API</a></li>'
        '<li><a href="/health">Health</a></li>'
        "</ul>"
        "</div>"
        "</nav>"
        '<main class="main-content">'
        f"{content}"
        "</main>"
        '<footer class="footer">'
        f"<p>&copy; {site_title}</p>"
        "</footer>"
        f'<script src="{PRISM_BASE}/components/prism-core.min.js"></script>'
        f'<script src="{PRISM_BASE}/plugins/autoloader/prism-autoloader.min.js"></script>'
        '<script src="/js/app.js"></script>'
        "</body>"
        "</html>"
    )


def fallback_navigation(index: Dict[str, List[str]], module: str, current_lesson: str) -> str:
    """
    Bare lesson list used when the catalog has no navigation for a module.

    Lessons are shown by name; "" if the module isn't in the index either.
    """
    lessons = index.get(module)
    if lessons is None:
        return ""

    items = []
    for name in lessons:
        active = ' class="active"' if name == current_lesson else ""
        items.append(f'<li{active}><a href="/course/{module}/{name}">{name}</a></li>')

    return (
        '<div class="course-navigation">'
        f"<h2>Module: {module}</h2>"
        f'<ul class="lesson-list">{"".join(items)}</ul>'
        "</div>"
    )


def course_page(
    catalog: LessonCatalog,
    index: Dict[str, List[str]],
    module: str,
    lesson: str,
    site_title: str = "Server Development Course",
) -> str:
    """
    Build the page for /course/<module>/<lesson>.

    `index` is the module → lessons map the server trusts: the catalog's
    own index when lessons loaded, otherwise the outline's fallback lists.

        lesson in catalog          → rendered lesson + catalog navigation
        module not in index        → "Module Not Found" page
        lesson not in index        → "Lesson Not Found" page
        listed but not on disk     → placeholder + navigation

    Every case is a complete page; the HTTP status is 200 for all of them.
    """
    if catalog.has_lesson(module, lesson):
        content = catalog.content(module, lesson)
    elif module not in index:
        return render_page(
            "Module Not Found",
            "<h2>Module Not Found</h2><p>The requested module does not exist.</p>",
            site_title,
        )
    elif lesson not in index[module]:
        return render_page(
            "Lesson Not Found",
            "<h2>Lesson Not Found</h2><p>The requested lesson does not exist.</p>",
            site_title,
        )
    else:
        content = f"<h2>{lesson}</h2><p>Lesson content is not available.</p>"

    navigation = catalog.navigation(module, lesson)
    if not navigation:
        navigation = fallback_navigation(index, module, lesson)

    body = f'{navigation}<div class="lesson-content">{content}</div>'
    return render_page(f"{site_title} - {module} - {lesson}", body, site_title)
