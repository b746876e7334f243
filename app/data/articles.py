"""
Static reading lists used for wrong-answer suggestions

Ids may contain a ``{level}`` placeholder that is filled with the quiz level
when a suggestion is produced.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from app.models.enums import ArticleProvider


@dataclass(frozen=True)
class ArticleEntry:
    id: str
    title: str
    url: str
    provider: ArticleProvider
    estimated_reading_time_minutes: int
    subject: str


@dataclass(frozen=True)
class ArticleTables:
    by_topic_slug: Mapping[str, Tuple[ArticleEntry, ...]]
    by_subject: Mapping[str, Tuple[ArticleEntry, ...]]


_MDN = ArticleProvider.MDN
_FCC = ArticleProvider.FREECODECAMP
_W3 = ArticleProvider.W3SCHOOLS
_BLOG = ArticleProvider.BLOG


TOPIC_ARTICLES = {
    "html-forms": (
        ArticleEntry(
            "mdn-html-forms",
            "HTML Forms - MDN Web Docs",
            "https://developer.mozilla.org/en-US/docs/Web/HTML/Element/form",
            _MDN, 15, "HTML",
        ),
        ArticleEntry(
            "fcc-html-forms",
            "Learn HTML Forms - FreeCodeCamp",
            "https://www.freecodecamp.org/learn/2022/responsive-web-design/"
            "learn-html-forms-by-building-a-registration-form/",
            _FCC, 30, "HTML",
        ),
    ),
    "css-flexbox": (
        ArticleEntry(
            "mdn-flexbox",
            "CSS Flexbox - MDN Web Docs",
            "https://developer.mozilla.org/en-US/docs/Web/CSS/CSS_Flexible_Box_Layout",
            _MDN, 20, "CSS",
        ),
        ArticleEntry(
            "fcc-flexbox",
            "Learn CSS Flexbox - FreeCodeCamp",
            "https://www.freecodecamp.org/news/flexbox-the-ultimate-css-flex-cheatsheet/",
            _FCC, 25, "CSS",
        ),
    ),
    "js-closures": (
        ArticleEntry(
            "mdn-closures",
            "Closures - MDN Web Docs",
            "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Closures",
            _MDN, 15, "JavaScript",
        ),
        ArticleEntry(
            "fcc-closures",
            "Understanding JavaScript Closures - FreeCodeCamp",
            "https://www.freecodecamp.org/news/javascript-closures-explained/",
            _FCC, 20, "JavaScript",
        ),
    ),
    "angular-signals": (
        ArticleEntry(
            "angular-signals-docs",
            "Angular Signals - Official Documentation",
            "https://angular.dev/guide/signals",
            _BLOG, 30, "Angular",
        ),
        ArticleEntry(
            "angular-signals-blog",
            "Understanding Angular Signals - Angular Blog",
            "https://blog.angular.io/introducing-angular-signals-4a5b4a8c3c5a",
            _BLOG, 25, "Angular",
        ),
    ),
}


SUBJECT_ARTICLES = {
    "HTML": (
        ArticleEntry(
            "mdn-html-{level}-1",
            "HTML: HyperText Markup Language - MDN",
            "https://developer.mozilla.org/en-US/docs/Web/HTML",
            _MDN, 20, "HTML",
        ),
        ArticleEntry(
            "fcc-html-{level}-1",
            "Learn HTML - FreeCodeCamp",
            "https://www.freecodecamp.org/learn/2022/responsive-web-design/",
            _FCC, 40, "HTML",
        ),
        ArticleEntry(
            "w3-html-{level}-1",
            "HTML Tutorial - W3Schools",
            "https://www.w3schools.com/html/",
            _W3, 30, "HTML",
        ),
    ),
    "CSS": (
        ArticleEntry(
            "mdn-css-{level}-1",
            "CSS: Cascading Style Sheets - MDN",
            "https://developer.mozilla.org/en-US/docs/Web/CSS",
            _MDN, 25, "CSS",
        ),
        ArticleEntry(
            "fcc-css-{level}-1",
            "Learn CSS - FreeCodeCamp",
            "https://www.freecodecamp.org/news/css-basics-everything-you-need-to-know/",
            _FCC, 35, "CSS",
        ),
        ArticleEntry(
            "w3-css-{level}-1",
            "CSS Tutorial - W3Schools",
            "https://www.w3schools.com/css/",
            _W3, 30, "CSS",
        ),
    ),
    "JavaScript": (
        ArticleEntry(
            "mdn-js-{level}-1",
            "JavaScript - MDN Web Docs",
            "https://developer.mozilla.org/en-US/docs/Web/JavaScript",
            _MDN, 30, "JavaScript",
        ),
        ArticleEntry(
            "fcc-js-{level}-1",
            "Learn JavaScript - FreeCodeCamp",
            "https://www.freecodecamp.org/learn/javascript-algorithms-and-data-structures/",
            _FCC, 50, "JavaScript",
        ),
        ArticleEntry(
            "w3-js-{level}-1",
            "JavaScript Tutorial - W3Schools",
            "https://www.w3schools.com/js/",
            _W3, 40, "JavaScript",
        ),
    ),
    "Angular": (
        ArticleEntry(
            "angular-docs-{level}-1", "Angular Documentation", "https://angular.dev",
            _BLOG, 45, "Angular",
        ),
        ArticleEntry(
            "angular-tutorial-{level}-1",
            "Angular Tutorial - Official Guide",
            "https://angular.dev/tutorials/first-app",
            _BLOG, 60, "Angular",
        ),
    ),
    "React": (
        ArticleEntry(
            "react-docs-{level}-1", "React Documentation", "https://react.dev",
            _BLOG, 40, "React",
        ),
        ArticleEntry(
            "react-tutorial-{level}-1", "Learn React - Official Tutorial", "https://react.dev/learn",
            _BLOG, 50, "React",
        ),
    ),
    "NextJS": (
        ArticleEntry(
            "nextjs-docs-{level}-1", "Next.js Documentation", "https://nextjs.org/docs",
            _BLOG, 50, "NextJS",
        ),
        ArticleEntry(
            "nextjs-learn-{level}-1", "Learn Next.js", "https://nextjs.org/learn",
            _BLOG, 60, "NextJS",
        ),
    ),
    "NestJS": (
        ArticleEntry(
            "nestjs-docs-{level}-1", "NestJS Documentation", "https://docs.nestjs.com",
            _BLOG, 45, "NestJS",
        ),
        ArticleEntry(
            "nestjs-overview-{level}-1", "NestJS Overview", "https://docs.nestjs.com/first-steps",
            _BLOG, 30, "NestJS",
        ),
    ),
    "NodeJS": (
        ArticleEntry(
            "nodejs-docs-{level}-1", "Node.js Documentation", "https://nodejs.org/docs",
            _BLOG, 40, "NodeJS",
        ),
        ArticleEntry(
            "nodejs-guide-{level}-1", "The Node.js Guide", "https://nodejs.org/en/docs/guides/",
            _BLOG, 50, "NodeJS",
        ),
    ),
}


def load_article_tables() -> ArticleTables:
    """Read-only view of the built-in reading lists"""
    return ArticleTables(
        by_topic_slug=MappingProxyType(dict(TOPIC_ARTICLES)),
        by_subject=MappingProxyType(dict(SUBJECT_ARTICLES)),
    )
