from __future__ import annotations

import logging
from typing import Any, Iterator

from .documents import BACKUP_SINGLE, DocumentStore
from .errors import Conflict, ContentError, NotFound, ValidationError
from .paths import GROUP_DOCUMENTS, ContentPaths
from .slugs import require_slug

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {"GBP": "£", "EUR": "€", "USD": "$"}


def value_or_default(data: dict[str, Any], key: str, default: Any) -> Any:
    """`data[key]` unless it is absent or null; empty values are kept."""
    value = data.get(key)
    return default if value is None else value


class GroupRepository:
    """Region group configs and the documents shared by a whole group."""

    def __init__(self, documents: DocumentStore, paths: ContentPaths) -> None:
        self.documents = documents
        self.paths = paths

    def iter_configs(self) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield (folder id, config) for every readable group, by folder name."""
        for folder in self.documents.list_dirs(self.paths.groups_dir):
            config_path = self.paths.group_config(folder)
            if not config_path.exists():
                continue
            try:
                config = self.documents.read(config_path)
            except ContentError as exc:
                logger.error("Error reading group config for %s: %s", folder, exc)
                continue
            if isinstance(config, dict):
                yield folder, config

    def list(self) -> list[dict[str, Any]]:
        return [{**config, "folderId": folder} for folder, config in self.iter_configs()]

    def exists(self, group_id: str) -> bool:
        return self.paths.group_config(group_id).is_file()

    def get(self, group_id: str) -> dict[str, Any]:
        path = self.paths.group_config(group_id)
        if not path.exists():
            raise NotFound("Group not found")
        return self.documents.read(path)

    def create(self, data: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        if not data.get("id") or not data.get("name"):
            raise ValidationError("Group ID and name are required")
        folder = require_slug(data["id"], "Group ID")
        if self.paths.group_dir(folder).exists():
            raise Conflict("Group already exists")

        countries = self._validate_countries(data.get("countries") or [], folder)
        config = {
            "id": data["id"],
            "name": data["name"],
            "countries": countries,
            "productIds": [],
            "personas": value_or_default(data, "personas", []),
            "navigation": value_or_default(data, "navigation", {"main": []}),
            "quickAccessCards": value_or_default(data, "quickAccessCards", []),
        }
        self.documents.write(self.paths.group_config(folder), config)
        self.documents.ensure_dir(self.paths.products_dir(folder))
        for kind, key in GROUP_DOCUMENTS.items():
            if self.documents.create_if_absent(self.paths.group_document(folder, kind), {key: []}):
                logger.info("Created %s.json for group %s", kind, folder)
        return folder, config

    def update(self, group_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        if "productIds" in patch:
            raise ValidationError("productIds is maintained by the store and cannot be set directly")
        existing = self.get(group_id)
        merged = {**existing, **patch}
        if "countries" in patch:
            merged["countries"] = self._validate_countries(patch["countries"] or [], group_id)
        self.documents.write(self.paths.group_config(group_id), merged)
        return merged

    def add_product_id(self, group_id: str, product_folder_id: str) -> list[str]:
        config = self.get(group_id)
        product_ids = list(config.get("productIds") or [])
        if product_folder_id not in product_ids:
            product_ids.append(product_folder_id)
        config["productIds"] = product_ids
        self.documents.write(self.paths.group_config(group_id), config)
        return product_ids

    def remove_product_id(self, group_id: str, product_folder_id: str) -> list[str]:
        config = self.get(group_id)
        product_ids = [p for p in config.get("productIds") or [] if p != product_folder_id]
        config["productIds"] = product_ids
        self.documents.write(self.paths.group_config(group_id), config)
        return product_ids

    def document(self, group_id: str, kind: str) -> dict[str, Any]:
        self._check_kind(kind)
        if not self.exists(group_id):
            raise NotFound("Group not found")
        return self.documents.read(self.paths.group_document(group_id, kind))

    def replace_document(self, group_id: str, kind: str, data: Any) -> dict[str, Any]:
        key = self._check_kind(kind)
        if not self.exists(group_id):
            raise NotFound("Group not found")
        if not isinstance(data, dict) or not isinstance(data.get(key), list):
            raise ValidationError(f"Expected `{key}` to be a JSON list.")
        self.documents.write(self.paths.group_document(group_id, kind), data, backup=BACKUP_SINGLE)
        return data

    def _check_kind(self, kind: str) -> str:
        if kind not in GROUP_DOCUMENTS:
            raise NotFound(f"Unknown group document: {kind}")
        return GROUP_DOCUMENTS[kind]

    def _validate_countries(self, countries: Any, group_folder: str) -> list[dict[str, Any]]:
        if not isinstance(countries, list):
            raise ValidationError("Countries must be a JSON list.")
        cleaned: list[dict[str, Any]] = []
        codes: set[str] = set()
        for country in countries:
            if not isinstance(country, dict) or not str(country.get("code") or "").strip():
                raise ValidationError("Every country needs a code.")
            code = str(country["code"]).strip().lower()
            if code in codes:
                raise ValidationError(f"Duplicate country code: {country['code']}")
            codes.add(code)
            entry = dict(country)
            currency = entry.get("currency")
            if currency and not entry.get("currencySymbol"):
                entry["currencySymbol"] = CURRENCY_SYMBOLS.get(currency, currency)
            cleaned.append(entry)

        defaults = [c for c in cleaned if c.get("default")]
        if len(defaults) > 1:
            raise ValidationError("Only one country per group can be the default.")
        if cleaned and not defaults:
            cleaned[0]["default"] = True

        for folder, config in self.iter_configs():
            if folder == group_folder:
                continue
            for other in config.get("countries") or []:
                other_code = str(other.get("code") or "").lower() if isinstance(other, dict) else ""
                if other_code in codes:
                    raise Conflict(f"Country code {other['code']} already belongs to group {folder}")
        return cleaned
