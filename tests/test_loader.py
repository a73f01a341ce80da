"""
Tests for design-system document loading
"""
import json
import logging

import pytest

from design_system.loader import (
    load_component_file, load_components, load_design_system, load_tokens, load_variable_mapping,
    read_component_file, resolve_root, save_components,
)
from translators.components import ComponentCatalog


def _write(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding='utf-8')


class TestLoadDesignSystem:
    """Each document is optional and failures degrade to empty catalogs."""

    def test_full_root(self, tmp_path):
        _write(tmp_path / 'tokens.json', {'spacing': [{'name': 'S', 'value': 8}]})
        _write(tmp_path / 'components.json', {'handoffMode': False, 'components': [{'figmaId': 'A', 'swiftView': 'A'}]})
        _write(tmp_path / 'variable_mapping.json', {'VariableID:1:1': 'DSColor.primary'})

        system = load_design_system(tmp_path)
        assert system.root == tmp_path
        assert system.tokens.spacing[0].name == 'S'
        assert system.components.handoff_mode is False
        assert system.variable_bindings == {'VariableID:1:1': 'DSColor.primary'}
        assert system.components_path == tmp_path / 'components.json'

    def test_empty_root(self, tmp_path):
        system = load_design_system(tmp_path)
        assert system.tokens.spacing == ()
        assert system.components.components == ()
        assert system.variable_bindings == {}

    def test_invalid_json_logged(self, tmp_path, caplog):
        _write(tmp_path / 'tokens.json', '{not json')
        with caplog.at_level(logging.WARNING, logger='design_system.loader'):
            catalog = load_tokens(tmp_path)
        assert catalog.colors == ()
        assert 'Failed to load tokens.json' in caplog.text

    def test_schema_errors_fall_back(self, tmp_path):
        _write(tmp_path / 'tokens.json', {'colors': [{'name': 'Bad', 'r': 3, 'g': 0, 'b': 0}]})
        _write(tmp_path / 'components.json', {'components': 'nope'})
        assert load_tokens(tmp_path).colors == ()
        assert load_components(tmp_path).components == ()

    def test_mapping_must_be_an_object(self, tmp_path):
        _write(tmp_path / 'variable_mapping.json', ['VariableID:1:1'])
        assert load_variable_mapping(tmp_path) == {}

    def test_resolve_root_expands_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv('HOME', str(tmp_path))
        assert resolve_root('~/ds') == (tmp_path / 'ds').resolve()


class TestSaveComponents:
    """components.json keeps camelCase keys and unknown fields"""

    def test_round_trip_keeps_extra_keys(self, tmp_path):
        original = {
            'handoffMode': True,
            'components': [{'figmaId': 'A', 'swiftView': 'DSA', 'owner': 'design-team'}],
        }
        path = tmp_path / 'nested' / 'components.json'
        save_components(path, ComponentCatalog.model_validate(original))

        assert json.loads(path.read_text(encoding='utf-8')) == original
        assert load_component_file(path).components[0].swift_view == 'DSA'


class TestReadComponentFile:
    """Loading components.json for an update never hides a broken file."""

    def test_missing_file_is_empty(self, tmp_path):
        assert read_component_file(tmp_path / 'components.json').components == ()

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / 'components.json'
        _write(path, '{"components": [')
        with pytest.raises(ValueError, match='Cannot update'):
            read_component_file(path)

    def test_schema_error_raises(self, tmp_path):
        path = tmp_path / 'components.json'
        _write(path, {'components': [{'figmaId': 'Tag', 'params': {'Count': 3}}]})
        with pytest.raises(ValueError, match='Cannot update'):
            read_component_file(path)

    def test_valid_file(self, tmp_path):
        path = tmp_path / 'components.json'
        _write(path, {'handoffMode': False, 'components': [{'figmaId': 'A', 'swiftView': 'DSA'}]})
        catalog = read_component_file(path)
        assert catalog.handoff_mode is False
        assert catalog.components[0].figma_id == 'A'
