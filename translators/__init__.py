"""Figma node tree to SwiftUI / Jetpack Compose translation engine."""

from translators.base import Target, RenderedNode
from translators.compose_translator import build_compose_registry
from translators.components import ComponentCatalog, ComponentDefinition, ComponentIdentityResolver
from translators.pruning import prune_node
from translators.registry import TranslationContext, Translator, TranslatorKind, TranslatorRegistry
from translators.swiftui_translator import build_swiftui_registry
from translators.tokens import TokenCatalog, TokenMatch, TokenMiss, TokenResolver
from translators.vision_context import VisionContextExtractor, generate_analysis_prompt

__all__ = [
    'Target', 'RenderedNode',
    'TokenCatalog', 'TokenMatch', 'TokenMiss', 'TokenResolver',
    'ComponentCatalog', 'ComponentDefinition', 'ComponentIdentityResolver',
    'TranslationContext', 'Translator', 'TranslatorKind', 'TranslatorRegistry',
    'build_swiftui_registry', 'build_compose_registry',
    'prune_node', 'VisionContextExtractor', 'generate_analysis_prompt',
]
