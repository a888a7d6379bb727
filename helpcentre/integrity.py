from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from .documents import DocumentStore
from .errors import ContentError
from .groups import GroupRepository
from .paths import ContentPaths

logger = logging.getLogger(__name__)


def _compare(indexed: list[str], on_disk: list[str]) -> dict[str, list[str]]:
    counts = Counter(indexed)
    return {
        "missing": [i for i in dict.fromkeys(indexed) if i not in on_disk],
        "unindexed": [d for d in on_disk if d not in counts],
        "duplicates": sorted(i for i, n in counts.items() if n > 1),
    }


def _is_clean(diff: dict[str, list[str]]) -> bool:
    return not any(diff.values())


def _rebuild(indexed: list[str], on_disk: list[str]) -> list[str]:
    kept = [i for i in dict.fromkeys(indexed) if i in on_disk]
    return kept + [d for d in on_disk if d not in kept]


class IndexAuditor:
    """Checks the `productIds`/`topicIds` indices against the folders on disk."""

    def __init__(self, documents: DocumentStore, paths: ContentPaths, groups: GroupRepository) -> None:
        self.documents = documents
        self.paths = paths
        self.groups = groups

    def _product_folders(self, group_id: str) -> list[str]:
        products_dir = self.paths.products_dir(group_id)
        return [d for d in self.documents.list_dirs(products_dir) if (products_dir / d / "config.json").is_file()]

    def verify(self, group_id: str) -> dict[str, Any]:
        group = self.groups.get(group_id)
        products = _compare(list(group.get("productIds") or []), self._product_folders(group_id))
        topics: dict[str, dict[str, list[str]]] = {}
        for folder in self._product_folders(group_id):
            try:
                product = self.documents.read(self.paths.product_config(group_id, folder))
            except ContentError as exc:
                logger.error("Cannot verify topics of %s: %s", folder, exc)
                continue
            topic_dirs = self.documents.list_dirs(self.paths.topics_dir(group_id, folder))
            topics[folder] = _compare(list(product.get("topicIds") or []), topic_dirs)
        consistent = _is_clean(products) and all(_is_clean(d) for d in topics.values())
        return {"groupId": group_id, "products": products, "topics": topics, "consistent": consistent}

    def repair(self, group_id: str) -> dict[str, Any]:
        """Rebuild both indices from the directory tree.

        Ids that still have a folder keep their position; folders nobody
        indexed are appended in name order.
        """
        rewritten: list[str] = []
        group = self.groups.get(group_id)
        product_folders = self._product_folders(group_id)
        product_ids = _rebuild(list(group.get("productIds") or []), product_folders)
        if product_ids != group.get("productIds"):
            group["productIds"] = product_ids
            config_path = self.paths.group_config(group_id)
            self.documents.write(config_path, group)
            rewritten.append(self.documents.relative(config_path))

        for folder in product_folders:
            config_path = self.paths.product_config(group_id, folder)
            try:
                product = self.documents.read(config_path)
            except ContentError as exc:
                logger.error("Cannot repair topics of %s: %s", folder, exc)
                continue
            topic_dirs = self.documents.list_dirs(self.paths.topics_dir(group_id, folder))
            topic_ids = _rebuild(list(product.get("topicIds") or []), topic_dirs)
            if topic_ids != product.get("topicIds"):
                product["topicIds"] = topic_ids
                self.documents.write(config_path, product)
                rewritten.append(self.documents.relative(config_path))

        if rewritten:
            logger.info("Repaired indices in group %s: %s", group_id, ", ".join(rewritten))
        report = self.verify(group_id)
        report["rewritten"] = rewritten
        return report
