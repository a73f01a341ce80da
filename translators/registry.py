"""
Translator registry and translation context.

A registry is an immutable, ordered table of translators. The first
translator whose predicate accepts a node renders it; otherwise the
fallback does, and without a fallback the node becomes a warning comment.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Any, Mapping, Optional, Sequence, Tuple

from translators.base import INDENT_UNIT, COMPONENT_TYPES, CONTAINER_TYPES, RenderedNode
from translators.components import ComponentIdentityResolver
from translators.tokens import TokenResolver


class TranslatorKind(str, Enum):
    CONFIGURED_COMPONENT = "configured_component"
    TEXT = "text"
    PLACEHOLDER = "placeholder"
    LAYOUT = "layout"


@dataclass(frozen=True)
class TranslationContext:
    """Everything a translator needs, passed down the recursion unchanged
    except for depth and indentation."""
    registry: 'TranslatorRegistry'
    token_resolver: TokenResolver
    depth: int = 0
    indent_level: int = 0
    components: Mapping[str, Any] = field(default_factory=dict)
    component_sets: Mapping[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        return INDENT_UNIT * self.indent_level

    def child(self, levels: int = 1) -> 'TranslationContext':
        return replace(self, depth=self.depth + 1, indent_level=self.indent_level + levels)

    def indented(self, levels: int = 1) -> 'TranslationContext':
        """Same node, deeper indentation (wrapper layers)."""
        return replace(self, indent_level=self.indent_level + levels)


@dataclass(frozen=True)
class Translator:
    kind: TranslatorKind
    can_handle: Callable[[Dict[str, Any], TranslationContext], bool]
    render: Callable[[Dict[str, Any], TranslationContext], RenderedNode]

    def translate(self, node: Dict[str, Any], context: TranslationContext) -> str:
        return self.render(node, context).text


class TranslatorRegistry:
    """Ordered translator table; registration order is priority."""

    def __init__(self, translators: Sequence[Translator], token_resolver: TokenResolver,
                 fallback: Optional[Translator] = None):
        self._translators: Tuple[Translator, ...] = tuple(translators)
        self._fallback = fallback
        self.token_resolver = token_resolver

    @property
    def translators(self) -> Tuple[Translator, ...]:
        return self._translators

    @property
    def fallback(self) -> Optional[Translator]:
        return self._fallback

    @property
    def kinds(self) -> Tuple[TranslatorKind, ...]:
        return tuple(t.kind for t in self._translators)

    def root_context(self, components: Optional[Mapping[str, Any]] = None,
                     component_sets: Optional[Mapping[str, Any]] = None) -> TranslationContext:
        return TranslationContext(
            registry=self,
            token_resolver=self.token_resolver,
            components=dict(components or {}),
            component_sets=dict(component_sets or {}),
        )

    def select(self, node: Dict[str, Any], context: TranslationContext) -> Optional[Translator]:
        for translator in self._translators:
            if translator.can_handle(node, context):
                return translator
        return self._fallback

    def render(self, node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
        translator = self.select(node, context)
        if translator is None:
            return RenderedNode(lines=(
                f"{context.indent}// Warning: No translator found for node type: "
                f"{node.get('type')} ({node.get('name')})",
            ))
        return translator.render(node, context)

    def translate(self, node: Dict[str, Any],
                  components: Optional[Mapping[str, Any]] = None,
                  component_sets: Optional[Mapping[str, Any]] = None) -> str:
        """Translate a whole tree from its root."""
        return self.render(node, self.root_context(components, component_sets)).text


# ---------------------------------------------------------------------------
# Predicates shared by both targets
# ---------------------------------------------------------------------------

def handles_text(node: Dict[str, Any], context: TranslationContext) -> bool:
    return node.get('type') == 'TEXT'


def handles_component(node: Dict[str, Any], context: TranslationContext) -> bool:
    return node.get('type') in COMPONENT_TYPES


def handles_container(node: Dict[str, Any], context: TranslationContext) -> bool:
    return node.get('type') in CONTAINER_TYPES


def handles_configured(resolver: ComponentIdentityResolver, node: Dict[str, Any],
                       context: TranslationContext) -> bool:
    return resolver.resolve(node, context.components, context.component_sets) is not None
