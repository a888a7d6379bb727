from __future__ import annotations

from pathlib import Path

from .aggregates import AggregationReader
from .cache import ReadCache
from .documents import DocumentStore
from .groups import GroupRepository
from .integrity import IndexAuditor
from .paths import ContentPaths
from .products import ProductRepository
from .topics import TopicRepository


class ContentStore:
    """Wires the repositories for one content root together."""

    def __init__(self, root: Path, *, default_group: str = "uki", cache_entries: int = 256) -> None:
        self.root = Path(root)
        self.cache = ReadCache(max_entries=cache_entries)
        self.paths = ContentPaths(self.root)
        self.documents = DocumentStore(self.root, cache=self.cache)
        self.groups = GroupRepository(self.documents, self.paths)
        self.products = ProductRepository(self.documents, self.paths, self.groups)
        self.topics = TopicRepository(self.documents, self.paths, self.products)
        self.auditor = IndexAuditor(self.documents, self.paths, self.groups)
        self.reader = AggregationReader(
            self.documents,
            self.paths,
            self.groups,
            self.topics,
            default_group=default_group,
            cache=self.cache,
        )

    def invalidate(self) -> None:
        self.cache.invalidate()
