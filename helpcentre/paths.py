from __future__ import annotations

from pathlib import Path

from .slugs import safe_segment

GROUP_DOCUMENTS = {
    "incidents": "banners",
    "popups": "popups",
    "contact": "contactMethods",
}
TOPIC_DOCUMENTS = ("videos", "training")


class ContentPaths:
    """Maps positions in the content tree to files under the content root."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def groups_dir(self) -> Path:
        return self.root / "groups"

    def group_dir(self, group_id: str) -> Path:
        return self.groups_dir / safe_segment(group_id, "group ID")

    def group_config(self, group_id: str) -> Path:
        return self.group_dir(group_id) / "config.json"

    def group_document(self, group_id: str, kind: str) -> Path:
        return self.group_dir(group_id) / f"{kind}.json"

    def products_dir(self, group_id: str) -> Path:
        return self.group_dir(group_id) / "products"

    def product_dir(self, group_id: str, product_folder_id: str) -> Path:
        return self.products_dir(group_id) / safe_segment(product_folder_id, "product ID")

    def product_config(self, group_id: str, product_folder_id: str) -> Path:
        return self.product_dir(group_id, product_folder_id) / "config.json"

    def release_notes(self, group_id: str, product_folder_id: str) -> Path:
        return self.product_dir(group_id, product_folder_id) / "release-notes.json"

    def topics_dir(self, group_id: str, product_folder_id: str) -> Path:
        return self.product_dir(group_id, product_folder_id) / "topics"

    def topic_dir(self, group_id: str, product_folder_id: str, topic_folder_id: str) -> Path:
        return self.topics_dir(group_id, product_folder_id) / safe_segment(topic_folder_id, "topic ID")

    def topic_config(self, group_id: str, product_folder_id: str, topic_folder_id: str) -> Path:
        return self.topic_dir(group_id, product_folder_id, topic_folder_id) / "config.json"

    def topic_articles(self, group_id: str, product_folder_id: str, topic_folder_id: str) -> Path:
        return self.topic_dir(group_id, product_folder_id, topic_folder_id) / "articles.json"

    def topic_document(self, group_id: str, product_folder_id: str, topic_folder_id: str, kind: str) -> Path:
        return self.topic_dir(group_id, product_folder_id, topic_folder_id) / f"{kind}.json"
