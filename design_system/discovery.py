"""
Library component discovery.

Lists the remote (library) components used in a Figma document and merges
them into a components catalog. The merge only appends: existing entries
are never changed or reordered, and sets already present are skipped.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Any, List, Tuple

from translators.base import Target
from translators.components import ComponentCatalog, ComponentDefinition

KEPT_PROPERTY_TYPES = ('TEXT', 'BOOLEAN', 'VARIANT')
SKIPPED_PROPERTY_TYPES = ('SLOT', 'INSTANCE_SWAP')


@dataclass(frozen=True)
class DiscoveredComponent:
    set_name: str
    set_key: str
    call_name: str
    params: Dict[str, str] = field(default_factory=dict)


def derive_call_name(name: str) -> str:
    """'Primary Button' -> 'PrimaryButton'; variant names ('Size=Large') yield ''."""
    if '=' in name:
        return ''
    return re.sub(r'\s+', '', name)


def derive_param_name(figma_name: str) -> str:
    """'Label#12:0' -> 'label'."""
    base = figma_name.split('#', 1)[0]
    return base[:1].lower() + base[1:]


def _instance_properties(document: Dict[str, Any], components: Dict[str, Any],
                         component_sets: Dict[str, Any]) -> Dict[str, List[Tuple[str, str]]]:
    """Set key (or component key) -> [(figma property, type)] seen on remote instances."""
    found: Dict[str, List[Tuple[str, str]]] = {}
    stack = [document]
    while stack:
        node = stack.pop()
        metadata = components.get(node.get('componentId') or '') or {}
        properties = node.get('componentProperties')
        if node.get('type') == 'INSTANCE' and properties and metadata.get('remote'):
            set_metadata = component_sets.get(metadata.get('componentSetId') or '') or {}
            key = set_metadata.get('key') or metadata.get('key')
            collected = found.setdefault(key, [])
            names = {name for name, _ in collected}
            for name, prop in properties.items():
                prop_type = prop.get('type', '')
                if prop_type in SKIPPED_PROPERTY_TYPES or name in names:
                    continue
                collected.append((name, prop_type))
                names.add(name)
        # Children pushed in reverse to keep document order
        stack.extend(reversed(node.get('children') or []))
    return found


def discover_components(document: Dict[str, Any], components: Dict[str, Any],
                        component_sets: Dict[str, Any]) -> List[DiscoveredComponent]:
    """One entry per remote component set, sorted by set name."""
    components = components or {}
    component_sets = component_sets or {}
    properties = _instance_properties(document, components, component_sets)

    results = []
    seen_keys = set()
    for metadata in components.values():
        if not metadata.get('remote'):
            continue
        set_metadata = component_sets.get(metadata.get('componentSetId') or '') or {}
        set_key = set_metadata.get('key') or metadata.get('key') or ''
        set_name = set_metadata.get('name') or metadata.get('name') or ''

        if set_key in seen_keys:
            continue
        call_name = derive_call_name(set_name)
        if not call_name:
            continue
        seen_keys.add(set_key)

        collected = properties.get(set_key) or properties.get(metadata.get('key')) or []
        params = {
            name: derive_param_name(name) for name, prop_type in collected if prop_type in KEPT_PROPERTY_TYPES
        }
        results.append(DiscoveredComponent(set_name, set_key, call_name, params))

    return sorted(results, key=lambda c: c.set_name.lower())


def merge_components(catalog: ComponentCatalog, discovered: List[DiscoveredComponent],
                     target: Target) -> Tuple[ComponentCatalog, List[str], List[str]]:
    """Append discovered sets missing from the catalog.

    Returns:
        (merged catalog, added set names, skipped set names)
    """
    existing_keys = {d.figma_component_set_key for d in catalog.components if d.figma_component_set_key}
    merged = list(catalog.components)
    added: List[str] = []
    skipped: List[str] = []

    for component in discovered:
        if not component.set_key:
            continue
        if component.set_key in existing_keys:
            skipped.append(component.set_name)
            continue

        entry: Dict[str, Any] = {'figmaComponentSetKey': component.set_key}
        if target == Target.SWIFTUI:
            entry['swiftView'] = component.call_name
            entry['sourceFile'] = f"TODO: Path to {component.call_name}.swift"
        else:
            entry['composeComposable'] = component.call_name
            entry['kotlinSourceFile'] = f"TODO: Path to {component.call_name}.kt"
        if component.params:
            entry['params'] = dict(component.params)

        merged.append(ComponentDefinition.model_validate(entry))
        existing_keys.add(component.set_key)
        added.append(component.set_name)

    return catalog.model_copy(update={'components': tuple(merged)}), added, skipped
