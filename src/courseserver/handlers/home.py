"""
The home page body (GET /).

The handler returns a fragment; the server wraps it in the site template
because the path is "/".
"""

from typing import Dict

from ..course import outline


FEATURES = [
    ("Hands-On Learning", "Build a real HTTP server step by step with interactive examples"),
    ("Network Programming", "Master socket programming, HTTP protocol, and server architecture"),
    ("Concurrency", "Accept loops, worker pools and graceful shutdown"),
    ("Production Ready", "Build scalable, maintainable servers suitable for real-world use"),
]


class HomeHandler:
    """Renders the landing page: hero, feature cards, module list."""

    def __init__(self, site_title: str):
        self.site_title = site_title

    def _modules_html(self) -> str:
        items = []
        for number, module in enumerate(outline.COURSE_OUTLINE, start=1):
            items.append(
                '<div class="module-item">'
                f"<h3>{number}. {module.title}</h3>"
                f"<p>{module.description}</p>"
                f'<a href="/course/{module.name}/{module.first_lesson}" class="module-link">Start Module →</a>'
                "</div>"
            )
        return "".join(items)

    def render(self) -> str:
        features = "".join(
            f'<div class="feature-card"><h3>{title}</h3><p>{text}</p></div>'
            for title, text in FEATURES
        )
        first = outline.COURSE_OUTLINE[0]

        return (
            '<div class="hero-section">'
            f"<h1>Learn {self.site_title}</h1>"
            '<p class="hero-subtitle">Build production-ready HTTP servers from scratch using only sockets and the standard library</p>'
            '<div class="hero-buttons">'
            f'<a href="/course/{first.name}/{first.first_lesson}" class="btn btn-primary">Start Learning</a>'
            '<a href="/api/users" class="btn btn-secondary">View API</a>'
            "</div>"
            "</div>"
            f'<div class="features-grid">{features}</div>'
            '<div class="course-overview" id="course-overview">'
            "<h2>Course Modules</h2>"
            f'<div class="module-list">{self._modules_html()}</div>'
            "</div>"
        )

    def __call__(self, body: str, headers: Dict[str, str]) -> str:
        return self.render()
