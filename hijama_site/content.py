"""Page documents as exported from the CMS: ``{slug: {"title": ..., "modules": [...]}}``."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from .models import ModuleInstance


class Page(BaseModel):
    slug: str
    title: str = ""
    modules: list[dict[str, Any]] = Field(default_factory=list)

    def find_module(self, key: str, type_tag: str | None = None) -> ModuleInstance | None:
        for raw in self.modules:
            if raw.get("_key") != key:
                continue
            module = ModuleInstance.model_validate(raw)
            if type_tag is None or module.type_tag == type_tag:
                return module
        return None


def load_pages(path: Path) -> dict[str, Page]:
    if not path.exists():
        logger.warning(f"Content file {path} not found; serving no pages")
        return {}
    documents = json.loads(path.read_text(encoding="utf-8"))
    pages = {slug: Page(slug=slug, **doc) for slug, doc in documents.items()}
    logger.info(f"Loaded {len(pages)} page(s) from {path}")
    return pages
