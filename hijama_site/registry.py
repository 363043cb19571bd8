"""Tag -> handler dispatch for page modules."""
from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from loguru import logger
from pydantic import ValidationError

from .exceptions import UnknownModuleType
from .models import ModuleInstance, RenderedModule

ModuleHandler = Callable[[Mapping[str, Any], str], dict[str, Any]]


class ModuleRegistry:
    def __init__(self) -> None:
        self._handlers: dict[str, ModuleHandler] = {}

    def register(self, type_tag: str, handler: ModuleHandler) -> None:
        """Associate a tag with a handler. A later registration replaces an earlier one."""
        if type_tag in self._handlers:
            logger.debug(f"Replacing handler for module type {type_tag!r}")
        self._handlers[type_tag] = handler

    def __contains__(self, type_tag: str) -> bool:
        return type_tag in self._handlers

    @property
    def tags(self) -> list[str]:
        return list(self._handlers)

    def handler_for(self, type_tag: str) -> ModuleHandler:
        try:
            return self._handlers[type_tag]
        except KeyError:
            raise UnknownModuleType(type_tag) from None

    def resolve(self, modules: Iterable[ModuleInstance | Mapping[str, Any]]) -> list[RenderedModule]:
        """Render modules in order; unknown or malformed ones are left out."""
        rendered: list[RenderedModule] = []
        for raw in modules:
            try:
                module = raw if isinstance(raw, ModuleInstance) else ModuleInstance.model_validate(raw)
            except ValidationError:
                logger.warning("Skipping module without _type/_key")
                continue
            try:
                handler = self.handler_for(module.type_tag)
            except UnknownModuleType:
                logger.debug(f"Skipping module {module.key}: no handler for {module.type_tag!r}")
                continue
            try:
                data = handler(module.fields, module.key)
            except ValidationError as exc:
                logger.warning(f"Skipping module {module.key} ({module.type_tag}): {exc.error_count()} invalid field(s)")
                continue
            except Exception:
                logger.exception(f"Handler for {module.type_tag!r} failed on module {module.key}")
                continue
            rendered.append(RenderedModule(key=module.key, type=module.type_tag, data=data))
        return rendered
