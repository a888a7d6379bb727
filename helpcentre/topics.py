"""Topics of a product: configs, article lists and the bulk reconcile.

A product's topics are stored as one folder per topic under
``products/<product>/topics/``. The product's ``topicIds`` field records
their order and is rewritten from the desired list on every reconcile.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .documents import DocumentStore
from .errors import ContentError, NotFound, PartialFailure, ValidationError
from .paths import TOPIC_DOCUMENTS, ContentPaths
from .products import ProductRepository
from .slugs import slugify

logger = logging.getLogger(__name__)

ARTICLE_TYPES = ("article", "subtopic")


def resolve_article(article: dict[str, Any], topics: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Return `article` with the title and description it should display.

    Subtopic entries without their own title borrow the referenced topic's.
    A subtopic pointing at a topic that does not exist is flagged with
    ``missingReference`` rather than raising.
    """
    resolved = dict(article)
    if article.get("type") != "subtopic" or article.get("title"):
        return resolved
    topic = next((t for t in topics if t.get("id") == article.get("id")), None)
    if topic is None:
        resolved["title"] = None
        resolved["missingReference"] = True
        return resolved
    resolved["title"] = topic.get("title")
    if not article.get("description"):
        resolved["description"] = topic.get("description")
    return resolved


def resolve_articles(articles: Iterable[dict[str, Any]], topics: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    topics = list(topics)
    return [resolve_article(a, topics) for a in articles if isinstance(a, dict)]


def _clean_article(article: Any, index: int) -> dict[str, Any]:
    if not isinstance(article, dict):
        raise ValidationError(f"Article {index + 1} must be an object.")
    if not str(article.get("id") or "").strip():
        raise ValidationError(f"Article {index + 1} needs an `id`.")
    article_type = article.get("type")
    if article_type is not None and article_type not in ARTICLE_TYPES:
        raise ValidationError(f"Article {index + 1} has an invalid type.")
    cleaned = dict(article)
    if article_type == "subtopic":
        # Inherited fields are left out so later topic edits show through.
        for field in ("title", "description"):
            if not cleaned.get(field):
                cleaned.pop(field, None)
    return cleaned


class TopicRepository:
    def __init__(self, documents: DocumentStore, paths: ContentPaths, products: ProductRepository) -> None:
        self.documents = documents
        self.paths = paths
        self.products = products

    def list(self, group_id: str, product_folder_id: str) -> list[dict[str, Any]]:
        product = self.products.get(group_id, product_folder_id)
        topics: list[dict[str, Any]] = []
        for topic_folder in product.get("topicIds") or []:
            try:
                config = self.documents.read(self.paths.topic_config(group_id, product_folder_id, topic_folder))
            except ContentError as exc:
                logger.error("%s", PartialFailure("topic", topic_folder, exc))
                continue
            topics.append({**config, "productId": product.get("id")})
        return topics

    def get(self, group_id: str, product_folder_id: str, topic_folder_id: str) -> dict[str, Any]:
        try:
            return self.documents.read(self.paths.topic_config(group_id, product_folder_id, topic_folder_id))
        except NotFound as exc:
            raise NotFound("Topic not found") from exc

    def reconcile(self, group_id: str, product_folder_id: str, support_hubs: list[Any]) -> list[str]:
        """Make the product's topic folders match `support_hubs` exactly.

        Folders missing from the desired list are deleted along with their
        articles; desired topics are written in order, keeping any existing
        articles document; finally ``topicIds`` is replaced. There is no
        rollback if a step fails part way.
        """
        product = self.products.get(group_id, product_folder_id)
        product_topics = [
            t for t in support_hubs if isinstance(t, dict) and t.get("productId") == product.get("id")
        ]
        desired_slugs: list[str] = []
        for index, topic in enumerate(product_topics):
            topic_id = topic.get("id")
            if not isinstance(topic_id, str) or not slugify(topic_id):
                raise ValidationError(f"Topic {index + 1} needs an `id` with at least one letter or digit.")
            desired_slugs.append(slugify(topic_id))

        topics_dir = self.paths.topics_dir(group_id, product_folder_id)
        self.documents.ensure_dir(topics_dir)
        for existing in self.documents.list_dirs(topics_dir):
            if existing not in desired_slugs:
                self.documents.remove_tree(topics_dir / existing)
                logger.info("Deleted topic folder: %s", existing)

        for topic, topic_folder in zip(product_topics, desired_slugs):
            self.documents.ensure_dir(self.paths.topic_dir(group_id, product_folder_id, topic_folder))
            config = {k: v for k, v in topic.items() if k != "productId"}
            self.documents.write(self.paths.topic_config(group_id, product_folder_id, topic_folder), config)
            self.documents.create_if_absent(self.paths.topic_articles(group_id, product_folder_id, topic_folder), [])

        product["topicIds"] = desired_slugs
        self.documents.write(self.paths.product_config(group_id, product_folder_id), product)
        return desired_slugs

    def articles(self, group_id: str, product_folder_id: str, topic_folder_id: str) -> list[dict[str, Any]]:
        self.get(group_id, product_folder_id, topic_folder_id)
        try:
            return self.documents.read(self.paths.topic_articles(group_id, product_folder_id, topic_folder_id))
        except NotFound:
            return []

    def replace_articles(
        self, group_id: str, product_folder_id: str, topic_folder_id: str, articles: Any
    ) -> list[dict[str, Any]]:
        if not isinstance(articles, list):
            raise ValidationError("Expected `articles` to be a JSON list.")
        cleaned = [_clean_article(a, i) for i, a in enumerate(articles)]
        self.get(group_id, product_folder_id, topic_folder_id)
        self.documents.write(self.paths.topic_articles(group_id, product_folder_id, topic_folder_id), cleaned)
        return cleaned

    def resolved_articles(self, group_id: str, product_folder_id: str, topic_folder_id: str) -> list[dict[str, Any]]:
        return resolve_articles(
            self.articles(group_id, product_folder_id, topic_folder_id),
            self.list(group_id, product_folder_id),
        )

    def document(self, group_id: str, product_folder_id: str, topic_folder_id: str, kind: str) -> list[Any]:
        if kind not in TOPIC_DOCUMENTS:
            raise NotFound(f"Unknown topic document: {kind}")
        return self.documents.read(self.paths.topic_document(group_id, product_folder_id, topic_folder_id, kind))
