"""
Article suggestion lookup for wrongly answered questions
"""

import time
from functools import lru_cache
from typing import Callable, List, Optional

from app.data.articles import ArticleEntry, ArticleTables, load_article_tables
from app.models.enums import ArticleProvider
from app.schemas.quizzes import ArticleRecommendation


class ArticleSuggestionService:
    """
    Resolves reading suggestions for a question, in priority order:
    the question's own learning resources, its topic slug, its subject,
    then a single generic MDN pointer.
    """

    def __init__(self, tables: ArticleTables, clock: Callable[[], float] = time.time):
        self.tables = tables
        self.clock = clock

    def suggest(self, question, subject: str, level: str) -> List[ArticleRecommendation]:
        resources = getattr(question, "learning_resources", None)
        if resources:
            return self._from_learning_resources(resources)

        topic_slug: Optional[str] = getattr(question, "topic_slug", None)
        if topic_slug and topic_slug in self.tables.by_topic_slug:
            return self._from_entries(self.tables.by_topic_slug[topic_slug], level)

        return self.by_subject(subject, level)

    def by_subject(self, subject: str, level: str) -> List[ArticleRecommendation]:
        entries = self.tables.by_subject.get(subject)
        if entries:
            return self._from_entries(entries, level)

        return [
            ArticleRecommendation(
                id=f"generic-{subject.lower()}-{level}-1",
                title=f"Learn {subject} - General Resources",
                url="https://developer.mozilla.org",
                provider=ArticleProvider.MDN,
                estimated_reading_time_minutes=30,
                subject=subject,
                level=level,
            )
        ]

    def _from_learning_resources(self, resources) -> List[ArticleRecommendation]:
        stamp = int(self.clock() * 1000)
        recommendations = []
        for index, resource in enumerate(resources):
            recommendations.append(
                ArticleRecommendation(
                    id=_field(resource, "id") or f"article-{stamp}-{index}",
                    title=_field(resource, "title"),
                    url=_field(resource, "url"),
                    provider=_field(resource, "provider") or ArticleProvider.BLOG,
                    estimated_reading_time_minutes=_field(
                        resource, "estimatedReadingTimeMinutes", "estimated_reading_time_minutes"
                    ),
                    subject=_field(resource, "subject"),
                    level=_field(resource, "level"),
                )
            )
        return recommendations

    @staticmethod
    def _from_entries(entries, level: str) -> List[ArticleRecommendation]:
        return [_recommendation(entry, level) for entry in entries]


def _recommendation(entry: ArticleEntry, level: str) -> ArticleRecommendation:
    return ArticleRecommendation(
        id=entry.id.format(level=level),
        title=entry.title,
        url=entry.url,
        provider=entry.provider,
        estimated_reading_time_minutes=entry.estimated_reading_time_minutes,
        subject=entry.subject,
        level=level,
    )


def _field(resource: dict, *keys):
    for key in keys:
        value = resource.get(key)
        if value is not None:
            return value
    return None


@lru_cache
def get_article_service() -> ArticleSuggestionService:
    """Process-wide suggestion service built from the static tables"""
    return ArticleSuggestionService(load_article_tables())
