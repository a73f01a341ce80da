"""Shared test fixtures for translator tests."""
import pytest

from translators.components import ComponentCatalog
from translators.tokens import TokenCatalog, TokenResolver


@pytest.fixture
def token_catalog():
    """Small design system: spacing, colours, type ramp and radii (with a 'full' sentinel)."""
    return TokenCatalog.model_validate({
        'spacing': [
            {'name': 'DSSpacing.xs', 'value': 4},
            {'name': 'DSSpacing.small', 'value': 8},
            {'name': 'DSSpacing.medium', 'value': 16},
            {'name': 'DSSpacing.large', 'value': 24},
        ],
        'colors': [
            {'name': 'DSColor.primary', 'r': 0, 'g': 0.478, 'b': 1},
            {'name': 'DSColor.textPrimary', 'r': 0, 'g': 0, 'b': 0},
            {'name': 'DSColor.textSecondary', 'r': 0.5, 'g': 0.5, 'b': 0.5},
            {'name': 'DSColor.background', 'r': 1, 'g': 1, 'b': 1},
        ],
        'typography': [
            {'name': 'DSTypography.title', 'fontFamily': 'SF Pro Display', 'fontWeight': 700, 'fontSize': 28},
            {'name': 'DSTypography.headline', 'fontFamily': 'SF Pro Text', 'fontWeight': 600, 'fontSize': 17},
            {'name': 'DSTypography.body', 'fontFamily': 'SF Pro Text', 'fontWeight': 400, 'fontSize': 17},
            {'name': 'DSTypography.caption', 'fontFamily': 'SF Pro Text', 'fontWeight': 400, 'fontSize': 12},
        ],
        'cornerRadius': [
            {'name': 'DSRadius.small', 'value': 4},
            {'name': 'DSRadius.medium', 'value': 8},
            {'name': 'DSRadius.large', 'value': 12},
            {'name': 'DSRadius.full', 'value': 9999},
        ],
    })


@pytest.fixture
def resolver(token_catalog):
    return TokenResolver(token_catalog, {'VariableID:1:2': 'DSColor.primary', 'VariableID:9:9': 'DSColor.brandAccent'})


@pytest.fixture
def component_catalog():
    """Button by set key and by legacy name, Avatar by legacy name only."""
    return ComponentCatalog.model_validate({
        'handoffMode': True,
        'components': [
            {
                'figmaId': 'Button',
                'swiftView': 'LegacyButton',
                'composeComposable': 'LegacyButton',
            },
            {
                'figmaComponentSetKey': 'set-key-button',
                'swiftView': 'DSButton',
                'composeComposable': 'DSButton',
                'sourceFile': 'DS/DSButton.swift',
                'kotlinSourceFile': 'ds/DSButton.kt',
                'params': {'Label': 'title', 'Style': 'style', 'Disabled': 'isDisabled'},
            },
            {
                'figmaId': 'Avatar',
                'swiftView': 'DSAvatar',
                'params': {'Initials': 'initials'},
            },
        ],
    })


@pytest.fixture
def button_instance():
    """Instance of the Button set, variant Style=Primary."""
    return {
        'id': '5:1',
        'name': 'Primary Button',
        'type': 'INSTANCE',
        'componentId': '3:2',
        'componentProperties': {
            'Label#1:0': {'type': 'TEXT', 'value': 'Continue'},
            'Style': {'type': 'VARIANT', 'value': 'Primary'},
            'Disabled#2:0': {'type': 'BOOLEAN', 'value': False},
        },
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 200, 'height': 44},
    }


@pytest.fixture
def component_metadata():
    """(components, componentSets) tables as returned next to a node by the Figma API."""
    components = {
        '3:2': {'key': 'comp-key-primary', 'name': 'Style=Primary', 'componentSetId': '3:1', 'remote': True},
        '7:1': {'key': 'comp-key-chip', 'name': 'Chip', 'remote': True},
        '8:1': {'key': 'comp-key-local', 'name': 'Local Thing', 'remote': False},
    }
    component_sets = {
        '3:1': {'key': 'set-key-button', 'name': 'Button'},
    }
    return components, component_sets


def text_node(characters='Hello', size=17, weight=400, color=None, **extra):
    node = {
        'id': extra.pop('id', 't'),
        'name': extra.pop('name', 'Label'),
        'type': 'TEXT',
        'characters': characters,
        'style': {'fontFamily': 'SF Pro Text', 'fontSize': size, 'fontWeight': weight},
        'fills': [{'type': 'SOLID', 'color': color or {'r': 0, 'g': 0, 'b': 0, 'a': 1}}],
    }
    node.update(extra)
    return node


def frame_node(children=None, name='Frame', **extra):
    node = {
        'id': extra.pop('id', 'f'),
        'name': name,
        'type': 'FRAME',
        'children': children or [],
    }
    node.update(extra)
    return node


def box(x, y, width=10, height=10):
    return {'x': x, 'y': y, 'width': width, 'height': height}
