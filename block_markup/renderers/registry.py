"""Immutable mapping from block types to converters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from block_markup.models.blocks import BlockType, type_key

from .base import Converter


@dataclass(frozen=True, slots=True)
class _Registration:
    block_type: str
    converter: Converter
    priority: int
    order: int


class ConverterRegistry:
    """Registry of converters keyed by block type.

    ``register`` never mutates; it returns a new registry, so a registry that
    is already shared between callers cannot change underneath them. When
    several converters claim a type the highest priority wins, and among
    equal priorities the most recent registration wins.
    """

    __slots__ = ("_registrations", "_fallback")

    def __init__(
        self,
        registrations: Iterable[_Registration] = (),
        fallback: Converter | None = None,
    ) -> None:
        self._registrations: tuple[_Registration, ...] = tuple(registrations)
        self._fallback = fallback

    @property
    def fallback(self) -> Converter | None:
        return self._fallback

    def register(
        self,
        block_type: BlockType | str,
        converter: Converter,
        *,
        priority: int = 0,
    ) -> ConverterRegistry:
        registration = _Registration(
            block_type=type_key(block_type),
            converter=converter,
            priority=priority,
            order=len(self._registrations),
        )
        return ConverterRegistry((*self._registrations, registration), self._fallback)

    def register_many(
        self,
        converters: Iterable[tuple[BlockType | str, Converter]],
        *,
        priority: int = 0,
    ) -> ConverterRegistry:
        registry = self
        for block_type, converter in converters:
            registry = registry.register(block_type, converter, priority=priority)
        return registry

    def with_fallback(self, converter: Converter) -> ConverterRegistry:
        return ConverterRegistry(self._registrations, converter)

    def find(self, block_type: BlockType | str) -> Converter | None:
        key = type_key(block_type)
        candidates = [
            registration
            for registration in self._registrations
            if registration.block_type == key and registration.converter.supports(key)
        ]
        if not candidates:
            return None
        best = max(candidates, key=lambda registration: (registration.priority, registration.order))
        return best.converter

    def resolve(self, block_type: BlockType | str) -> Converter | None:
        return self.find(block_type) or self._fallback

    def types(self) -> tuple[str, ...]:
        return tuple(sorted({registration.block_type for registration in self._registrations}))

    def __contains__(self, block_type: object) -> bool:
        if not isinstance(block_type, (str, BlockType)):
            return False
        return self.find(block_type) is not None

    def __len__(self) -> int:
        return len(self.types())


@lru_cache(maxsize=1)
def default_registry() -> ConverterRegistry:
    """Registry covering every built-in block type."""
    from .markup.components import DEFAULT_CONVERTERS, FallbackConverter

    return ConverterRegistry(fallback=FallbackConverter()).register_many(DEFAULT_CONVERTERS)


__all__ = ["ConverterRegistry", "default_registry"]
