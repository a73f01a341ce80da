"""
Component catalog models and component identity resolution.

An instance node is matched to a configured definition by, in order:
stable component key, stable component-set key, set name/id (direct or via
the component metadata), and finally the raw componentId or display name.
"""

from typing import Dict, Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from translators.base import Target, COMPONENT_TYPES, display_name, escape_string


class ComponentDefinition(BaseModel):
    """One entry of components.json. Unknown keys are kept for re-saving."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='allow')

    figma_id: Optional[str] = Field(default=None, alias='figmaId')
    figma_key: Optional[str] = Field(default=None, alias='figmaKey')
    figma_component_set_key: Optional[str] = Field(default=None, alias='figmaComponentSetKey')
    figma_file_key: Optional[str] = Field(default=None, alias='figmaFileKey')
    swift_view: Optional[str] = Field(default=None, alias='swiftView')
    compose_composable: Optional[str] = Field(default=None, alias='composeComposable')
    source_file: Optional[str] = Field(default=None, alias='sourceFile')
    kotlin_source_file: Optional[str] = Field(default=None, alias='kotlinSourceFile')
    params: Optional[Dict[str, str]] = None

    def call_name(self, target: Target) -> Optional[str]:
        return self.swift_view if target == Target.SWIFTUI else self.compose_composable

    def source_reference(self, target: Target) -> Optional[str]:
        return self.source_file if target == Target.SWIFTUI else self.kotlin_source_file


class ComponentCatalog(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    handoff_mode: bool = Field(default=True, alias='handoffMode')
    components: Tuple[ComponentDefinition, ...] = ()

    def for_target(self, target: Target) -> List[ComponentDefinition]:
        """Definitions that name a call for the target, in catalog order."""
        return [d for d in self.components if d.call_name(target)]


class ComponentIdentityResolver:
    """Finds the ComponentDefinition for an instance node.

    Args:
        definitions: candidate definitions, in priority order
    """

    def __init__(self, definitions: List[ComponentDefinition]):
        self.definitions = list(definitions)

    def _first(self, predicate) -> Optional[ComponentDefinition]:
        for definition in self.definitions:
            if predicate(definition):
                return definition
        return None

    def _by_legacy_id(self, *values: Optional[str]) -> Optional[ComponentDefinition]:
        candidates = [v for v in values if v]
        if not candidates:
            return None
        return self._first(lambda d: d.figma_id in candidates)

    def resolve(self, node: Dict[str, Any],
                components: Optional[Dict[str, Any]] = None,
                component_sets: Optional[Dict[str, Any]] = None) -> Optional[ComponentDefinition]:
        if node.get('type') not in COMPONENT_TYPES or not self.definitions:
            return None

        components = components or {}
        component_sets = component_sets or {}
        component_id = node.get('componentId')
        metadata = components.get(component_id) or {} if component_id else {}
        set_id = metadata.get('componentSetId')
        set_metadata = component_sets.get(set_id) or {} if set_id else {}

        # 1. Stable component key
        key = metadata.get('key')
        if key:
            match = self._first(lambda d: d.figma_key == key)
            if match:
                return match

        # 2. Stable component-set key
        set_key = set_metadata.get('key')
        if set_key:
            match = self._first(lambda d: d.figma_component_set_key == set_key)
            if match:
                return match

        # 3. The componentId is itself a set id
        direct_set = component_sets.get(component_id) if component_id else None
        if direct_set:
            match = self._by_legacy_id(direct_set.get('name'), component_id)
            if match:
                return match

        # 4. Set reached through the component metadata
        if set_metadata:
            match = self._by_legacy_id(set_metadata.get('name'), set_id)
            if match:
                return match

        # 5. Raw id or display name
        return self._by_legacy_id(component_id, display_name(node))


# ---------------------------------------------------------------------------
# Property values
# ---------------------------------------------------------------------------

MISSING_VALUE = '/* missing */'


def find_property(node: Dict[str, Any], figma_prop: str) -> Optional[Dict[str, Any]]:
    """Look up a component property, tolerating Figma's 'Name#12:3' suffixes."""
    properties = node.get('componentProperties') or {}
    if figma_prop in properties:
        return properties[figma_prop]
    base = figma_prop.split('#', 1)[0]
    for name, prop in properties.items():
        if name.split('#', 1)[0] == base:
            return prop
    return None


def _lower_camel(value: str) -> str:
    words = [w for w in ''.join(c if c.isalnum() else ' ' for c in value).split() if w]
    if not words:
        return value.lower()
    return words[0].lower() + ''.join(w[0].upper() + w[1:].lower() for w in words[1:])


def property_value(prop: Optional[Dict[str, Any]], target: Target) -> str:
    """Render a component property as a literal for the target call."""
    if not prop or 'value' not in prop:
        return MISSING_VALUE
    value = prop['value']
    prop_type = prop.get('type')
    if prop_type == 'BOOLEAN':
        return 'true' if value in (True, 'true', 'True') else 'false'
    if prop_type == 'TEXT':
        return f'"{escape_string(str(value), target)}"'
    if prop_type == 'VARIANT':
        if target == Target.SWIFTUI:
            return f".{_lower_camel(str(value))}"
        return str(value)
    return MISSING_VALUE


INTERACTIVE_PATTERNS = ('button', 'tap', 'click', 'link', 'toggle', 'switch', 'checkbox', 'radio')


def looks_interactive(call_name: str, node_name: str) -> bool:
    haystack = f"{call_name} {node_name}".lower()
    return any(pattern in haystack for pattern in INTERACTIVE_PATTERNS)
