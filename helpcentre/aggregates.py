"""Country-facing reads that merge many documents into one response."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Hashable

from .cache import ReadCache
from .documents import DocumentStore
from .errors import ContentError, NotFound, PartialFailure
from .filters import applies_to_country, filter_by_country, filter_scoped, sort_banners, sort_by_date_desc
from .groups import GroupRepository
from .paths import TOPIC_DOCUMENTS, ContentPaths
from .topics import TopicRepository, resolve_articles

logger = logging.getLogger(__name__)


class AggregationReader:
    def __init__(
        self,
        documents: DocumentStore,
        paths: ContentPaths,
        groups: GroupRepository,
        topics: TopicRepository,
        *,
        default_group: str = "uki",
        cache: ReadCache | None = None,
    ) -> None:
        self.documents = documents
        self.paths = paths
        self.groups = groups
        self.topic_repo = topics
        self.default_group = default_group
        self.cache = cache or ReadCache(max_entries=0)

    def _cached(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        return self.cache.get_or_load(key, loader)

    def _load(self, kind: str, item_id: str, path: Path) -> Any | None:
        try:
            return self.documents.read(path)
        except ContentError as exc:
            logger.error("%s", PartialFailure(kind, item_id, exc))
            return None

    def group_for_country(self, country: str) -> str:
        code = str(country or "").lower()

        def load() -> str:
            for folder, config in self.groups.iter_configs():
                for entry in config.get("countries") or []:
                    if isinstance(entry, dict) and str(entry.get("code") or "").lower() == code:
                        return folder
            logger.warning("Country %s not found in any group, defaulting to '%s'", country, self.default_group)
            return self.default_group

        return self._cached(("group", code), load)

    def _group(self, country: str) -> tuple[str, dict[str, Any]]:
        group_id = self.group_for_country(country)
        return group_id, self.documents.read(self.paths.group_config(group_id))

    def _products(self, group_id: str, group: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
        loaded = []
        for folder in group.get("productIds") or []:
            product = self._load("product", folder, self.paths.product_config(group_id, folder))
            if isinstance(product, dict):
                loaded.append((folder, product))
        return loaded

    def _product_topics(self, group_id: str, folder: str, product: dict[str, Any]) -> list[dict[str, Any]]:
        topics = []
        for topic_folder in product.get("topicIds") or []:
            topic = self._load("topic", topic_folder, self.paths.topic_config(group_id, folder, topic_folder))
            if isinstance(topic, dict):
                topics.append({**topic, "productId": product.get("id")})
        return topics

    def products(self, country: str) -> dict[str, Any]:
        def load() -> dict[str, Any]:
            group_id, group = self._group(country)
            products = [p for _, p in self._products(group_id, group)]
            return {
                "products": filter_by_country(products, country),
                "quickAccessCards": filter_by_country(group.get("quickAccessCards") or [], country),
            }

        return self._cached(("products", country.lower()), load)

    def product(self, country: str, product_id: str) -> dict[str, Any]:
        group_id, group = self._group(country)
        for _, product in self._products(group_id, group):
            if product.get("id") != product_id:
                continue
            if not applies_to_country(product, country):
                raise NotFound("Product not available for this country")
            return product
        raise NotFound("Product not found")

    def topics(self, country: str) -> dict[str, Any]:
        def load() -> dict[str, Any]:
            group_id, group = self._group(country)
            all_topics: list[dict[str, Any]] = []
            for folder, product in self._products(group_id, group):
                all_topics.extend(self._product_topics(group_id, folder, product))
            return {"supportHubs": filter_by_country(all_topics, country)}

        return self._cached(("topics", country.lower()), load)

    def product_topics(self, country: str, product_folder_id: str) -> dict[str, Any]:
        group_id = self.group_for_country(country)
        product = self.documents.read(self.paths.product_config(group_id, product_folder_id))
        topics = self._product_topics(group_id, product_folder_id, product)
        return {"topics": filter_by_country(topics, country)}

    def topic_articles(
        self, country: str, product_folder_id: str, topic_folder_id: str, *, resolve: bool = False
    ) -> list[dict[str, Any]]:
        group_id = self.group_for_country(country)
        try:
            articles = self.documents.read(self.paths.topic_articles(group_id, product_folder_id, topic_folder_id))
        except NotFound:
            return []
        articles = filter_by_country(articles, country)
        if resolve:
            articles = resolve_articles(articles, self.topic_repo.list(group_id, product_folder_id))
        return articles

    def topic_document(self, country: str, product_folder_id: str, topic_folder_id: str, kind: str) -> list[Any]:
        if kind not in TOPIC_DOCUMENTS:
            raise NotFound(f"Unknown topic document: {kind}")
        group_id = self.group_for_country(country)
        path = self.paths.topic_document(group_id, product_folder_id, topic_folder_id, kind)
        try:
            return filter_by_country(self.documents.read(path), country)
        except NotFound:
            return []

    def articles(self, country: str) -> dict[str, Any]:
        def load() -> dict[str, Any]:
            group_id, group = self._group(country)
            all_articles: dict[str, dict[str, list[Any]]] = {}
            for folder, product in self._products(group_id, group):
                if not isinstance(product.get("topicIds"), list):
                    continue
                by_topic = all_articles.setdefault(product.get("id"), {})
                for topic_folder in product["topicIds"]:
                    try:
                        topic = self.documents.read(self.paths.topic_config(group_id, folder, topic_folder))
                        articles = self.documents.read(self.paths.topic_articles(group_id, folder, topic_folder))
                    except ContentError:
                        logger.debug("No articles found for topic %s", topic_folder)
                        continue
                    by_topic[topic.get("id", topic_folder)] = filter_by_country(articles, country)
            return {"articles": all_articles}

        return self._cached(("articles", country.lower()), load)

    def _release_notes(self, group_id: str, folder: str, country: str) -> list[dict[str, Any]]:
        notes = self.documents.read(self.paths.release_notes(group_id, folder))
        return sort_by_date_desc(filter_by_country(notes, country) if isinstance(notes, list) else [])

    def release_notes(self, country: str) -> dict[str, Any]:
        def load() -> dict[str, Any]:
            group_id, group = self._group(country)
            by_product: dict[str, list[dict[str, Any]]] = {}
            for folder, product in self._products(group_id, group):
                try:
                    notes = self._release_notes(group_id, folder, country)
                except ContentError:
                    logger.debug("No release notes found for product %s", folder)
                    continue
                if notes:
                    by_product[product.get("id")] = notes
            return {"releaseNotes": by_product}

        return self._cached(("release-notes", country.lower()), load)

    def product_release_notes(self, country: str, product_id: str) -> dict[str, Any]:
        group_id, group = self._group(country)
        for folder, product in self._products(group_id, group):
            if product.get("id") != product_id:
                continue
            try:
                notes = self._release_notes(group_id, folder, country)
            except NotFound:
                logger.debug("No release notes found for product %s", folder)
                notes = []
            return {"releaseNotes": {product_id: notes}}
        return {"releaseNotes": {product_id: []}}

    def _group_records(self, country: str, kind: str, key: str) -> list[dict[str, Any]]:
        group_id = self.group_for_country(country)
        try:
            data = self.documents.read(self.paths.group_document(group_id, kind))
        except NotFound:
            return []
        records = data.get(key) if isinstance(data, dict) else None
        return filter_by_country(records or [], country)

    def contact(self, country: str) -> dict[str, Any]:
        return {"contactMethods": self._group_records(country, "contact", "contactMethods")}

    def incidents(
        self,
        country: str,
        *,
        product_id: str | None = None,
        topic_id: str | None = None,
        path: str | None = None,
        active_only: bool = False,
    ) -> dict[str, Any]:
        banners = self._group_records(country, "incidents", "banners")
        if product_id or topic_id or path is not None or active_only:
            banners = sort_banners(
                filter_scoped(banners, product_id=product_id, topic_id=topic_id, path=path, active_only=active_only)
            )
        return {"banners": banners}

    def popups(
        self,
        country: str,
        *,
        product_id: str | None = None,
        topic_id: str | None = None,
        path: str | None = None,
        active_only: bool = False,
    ) -> dict[str, Any]:
        popups = self._group_records(country, "popups", "popups")
        if product_id or topic_id or path is not None or active_only:
            popups = filter_scoped(popups, product_id=product_id, topic_id=topic_id, path=path, active_only=active_only)
        return {"popups": popups}
