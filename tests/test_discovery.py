"""
Tests for library component discovery and catalog merging
"""
import pytest

from design_system.discovery import (
    DiscoveredComponent, derive_call_name, derive_param_name, discover_components, merge_components,
)
from translators.base import Target
from translators.components import ComponentCatalog


@pytest.fixture
def document(button_instance):
    chip = {
        'id': '6:1', 'name': 'Chip', 'type': 'INSTANCE', 'componentId': '7:1',
        'componentProperties': {
            'Text#3:1': {'type': 'TEXT', 'value': 'New'},
            'Leading#3:2': {'type': 'INSTANCE_SWAP', 'value': '9:9'},
            'Selected': {'type': 'BOOLEAN', 'value': True},
        },
    }
    local = {'id': '6:2', 'name': 'Local', 'type': 'INSTANCE', 'componentId': '8:1',
             'componentProperties': {'Label': {'type': 'TEXT', 'value': 'x'}}}
    return {'id': '0:1', 'name': 'Screen', 'type': 'FRAME',
            'children': [button_instance, {'id': '0:2', 'type': 'FRAME', 'children': [chip, local]}]}


class TestNaming:
    """Call and parameter names derived from Figma names"""

    def test_call_name(self):
        assert derive_call_name('Primary Button') == 'PrimaryButton'
        assert derive_call_name('Size=Large, State=Hover') == ''

    def test_param_name(self):
        assert derive_param_name('Label#12:0') == 'label'
        assert derive_param_name('Style') == 'style'


class TestDiscoverComponents:
    """Remote components only, one entry per set"""

    def test_discovers_remote_sets(self, document, component_metadata):
        components, component_sets = component_metadata
        discovered = discover_components(document, components, component_sets)
        assert [c.set_name for c in discovered] == ['Button', 'Chip']

    def test_set_key_and_params(self, document, component_metadata):
        components, component_sets = component_metadata
        button, chip = discover_components(document, components, component_sets)
        assert button.set_key == 'set-key-button'
        assert button.call_name == 'Button'
        assert button.params == {'Label#1:0': 'label', 'Style': 'style', 'Disabled#2:0': 'disabled'}
        # Component without a set falls back to its own key; swaps are skipped
        assert chip.set_key == 'comp-key-chip'
        assert chip.params == {'Text#3:1': 'text', 'Selected': 'selected'}

    def test_variant_named_component_without_set_skipped(self):
        components = {'1:1': {'key': 'k', 'name': 'Size=Small', 'remote': True}}
        assert discover_components({'type': 'FRAME'}, components, {}) == []

    def test_variants_of_one_set_collapse(self, component_metadata):
        components, component_sets = component_metadata
        components = dict(components)
        components['3:3'] = {'key': 'comp-key-secondary', 'name': 'Style=Secondary',
                             'componentSetId': '3:1', 'remote': True}
        discovered = discover_components({'type': 'FRAME'}, components, component_sets)
        assert [c.set_name for c in discovered].count('Button') == 1


class TestMergeComponents:
    """The merge only appends"""

    def test_appends_new_sets(self, component_catalog):
        discovered = [DiscoveredComponent('Chip', 'comp-key-chip', 'Chip', {'Text#3:1': 'text'})]
        merged, added, skipped = merge_components(component_catalog, discovered, Target.SWIFTUI)
        assert added == ['Chip']
        assert skipped == []
        assert merged.components[:3] == component_catalog.components
        entry = merged.components[-1]
        assert entry.figma_component_set_key == 'comp-key-chip'
        assert entry.swift_view == 'Chip'
        assert entry.source_file == 'TODO: Path to Chip.swift'
        assert entry.params == {'Text#3:1': 'text'}

    def test_compose_entry(self):
        discovered = [DiscoveredComponent('Chip', 'k', 'Chip')]
        merged, _, _ = merge_components(ComponentCatalog(), discovered, Target.COMPOSE)
        entry = merged.components[0]
        assert entry.compose_composable == 'Chip'
        assert entry.kotlin_source_file == 'TODO: Path to Chip.kt'
        assert entry.swift_view is None
        assert entry.params is None

    def test_skips_configured_sets(self, component_catalog):
        discovered = [DiscoveredComponent('Button', 'set-key-button', 'Button')]
        merged, added, skipped = merge_components(component_catalog, discovered, Target.SWIFTUI)
        assert added == []
        assert skipped == ['Button']
        assert merged.components == component_catalog.components

    def test_handoff_mode_preserved(self):
        catalog = ComponentCatalog.model_validate({'handoffMode': False})
        merged, _, _ = merge_components(catalog, [DiscoveredComponent('A', 'a', 'A')], Target.SWIFTUI)
        assert merged.handoff_mode is False
