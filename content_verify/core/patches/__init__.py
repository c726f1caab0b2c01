"""
Positional patch engines.

Provides the shared right-to-left patch algorithm and its legacy and
revised item adapters.
"""

from content_verify.core.models import SchemaVariant
from content_verify.core.settings import ProcessorSettings

from .base_engine import BasePatchEngine, PatchResult
from .legacy_engine import LegacyPatchEngine, byte_to_codepoint_offset
from .revised_engine import RevisedPatchEngine

ENGINE_REGISTRY: dict[SchemaVariant, type[BasePatchEngine]] = {
    SchemaVariant.LEGACY: LegacyPatchEngine,
    SchemaVariant.REVISED: RevisedPatchEngine,
}


def create_engine(variant: SchemaVariant, settings: ProcessorSettings | None = None) -> BasePatchEngine:
    """
    Build the patch engine for a schema variant.

    Raises:
        ValueError: If no engine handles ``variant``
    """
    settings = settings or ProcessorSettings()
    engine_class = ENGINE_REGISTRY.get(variant)
    if not engine_class:
        raise ValueError(f"No patch engine for schema variant: {variant}")

    if engine_class is LegacyPatchEngine:
        return LegacyPatchEngine(
            fallback_enabled=settings.legacy_fallback,
            position_unit=settings.legacy_position_unit,
        )
    return engine_class()


__all__ = [
    "BasePatchEngine",
    "PatchResult",
    "LegacyPatchEngine",
    "RevisedPatchEngine",
    "byte_to_codepoint_offset",
    "ENGINE_REGISTRY",
    "create_engine",
]
