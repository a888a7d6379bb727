from __future__ import annotations

import logging
from typing import Any

from .documents import DocumentStore
from .errors import Conflict, ContentError, NotFound, PartialFailure, ValidationError
from .groups import GroupRepository, value_or_default
from .paths import ContentPaths
from .slugs import require_slug

logger = logging.getLogger(__name__)

PRODUCT_TYPES = ("cloud", "desktop")
DEFAULT_PERSONAS = ["customer", "accountant"]


class ProductRepository:
    def __init__(self, documents: DocumentStore, paths: ContentPaths, groups: GroupRepository) -> None:
        self.documents = documents
        self.paths = paths
        self.groups = groups

    def get(self, group_id: str, product_folder_id: str) -> dict[str, Any]:
        try:
            return self.documents.read(self.paths.product_config(group_id, product_folder_id))
        except NotFound as exc:
            raise NotFound("Product not found") from exc

    def list(self, group_id: str) -> list[dict[str, Any]]:
        group = self.groups.get(group_id)
        products: list[dict[str, Any]] = []
        for folder in group.get("productIds") or []:
            try:
                products.append({**self.get(group_id, folder), "folderId": folder})
            except ContentError as exc:
                logger.error("%s", PartialFailure("product", folder, exc))
        return products

    def create(self, group_id: str, data: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        if not data.get("id") or not data.get("name"):
            raise ValidationError("Product ID and name are required")
        product_type = data.get("type") or "cloud"
        if product_type not in PRODUCT_TYPES:
            raise ValidationError(f"Product type must be one of: {', '.join(PRODUCT_TYPES)}")
        folder = require_slug(data["id"], "Product ID")
        if not self.groups.exists(group_id):
            raise NotFound("Group not found")
        product_dir = self.paths.product_dir(group_id, folder)
        if product_dir.exists():
            raise Conflict("Product already exists")

        config = {
            "id": data["id"],
            "name": data["name"],
            "description": data.get("description") or "",
            "type": product_type,
            "personas": value_or_default(data, "personas", list(DEFAULT_PERSONAS)),
            "categories": value_or_default(data, "categories", []),
            "countries": value_or_default(data, "countries", []),
            "icon": data.get("icon") or "",
            "knowledgebase_collection": data.get("knowledgebase_collection") or "",
            "topicIds": [],
        }
        self.documents.ensure_dir(self.paths.topics_dir(group_id, folder))
        self.documents.write(self.paths.product_config(group_id, folder), config)
        self.documents.write(self.paths.release_notes(group_id, folder), [])
        self.groups.add_product_id(group_id, folder)
        logger.info("Created product %s in group %s", folder, group_id)
        return folder, config

    def update(self, group_id: str, product_folder_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        # Shallow merge: list values in the patch replace the stored ones.
        try:
            return self.documents.merge(self.paths.product_config(group_id, product_folder_id), patch)
        except NotFound as exc:
            raise NotFound("Product not found") from exc

    def delete(self, group_id: str, product_folder_id: str) -> None:
        removed = self.documents.remove_tree(self.paths.product_dir(group_id, product_folder_id))
        self.groups.remove_product_id(group_id, product_folder_id)
        if removed:
            logger.info("Deleted product %s from group %s", product_folder_id, group_id)

    def release_notes(self, group_id: str, product_folder_id: str) -> list[dict[str, Any]]:
        self.get(group_id, product_folder_id)
        try:
            return self.documents.read(self.paths.release_notes(group_id, product_folder_id))
        except NotFound:
            return []

    def replace_release_notes(self, group_id: str, product_folder_id: str, notes: Any) -> list[dict[str, Any]]:
        if not isinstance(notes, list) or not all(isinstance(n, dict) for n in notes):
            raise ValidationError("Expected release notes to be a JSON list of objects.")
        self.get(group_id, product_folder_id)
        self.documents.write(self.paths.release_notes(group_id, product_folder_id), notes)
        return notes

    def articles(self, group_id: str, product_folder_id: str) -> dict[str, dict[str, list[Any]]]:
        """All articles of a product, indexed by product id then topic id."""
        product = self.get(group_id, product_folder_id)
        by_topic: dict[str, list[Any]] = {}
        for topic_folder in product.get("topicIds") or []:
            try:
                topic = self.documents.read(self.paths.topic_config(group_id, product_folder_id, topic_folder))
                articles = self.documents.read(self.paths.topic_articles(group_id, product_folder_id, topic_folder))
            except ContentError as exc:
                logger.error("%s", PartialFailure("articles for topic", topic_folder, exc))
                continue
            by_topic[topic.get("id", topic_folder)] = articles
        return {product.get("id", product_folder_id): by_topic}
