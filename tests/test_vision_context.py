"""
Tests for vision metadata extraction and the analysis prompt
"""
import pytest

from translators.base import Target
from translators.vision_context import VisionContextExtractor, generate_analysis_prompt

from conftest import box, frame_node, text_node


@pytest.fixture
def card():
    return frame_node(
        [
            text_node('Title', 17, 600),
            text_node('Also a title', 17, 600),
            text_node('Caption that is quite a bit longer than fifty characters in total', 12, 400,
                      {'r': 0.3, 'g': 0.3, 'b': 0.3, 'a': 1}),
        ],
        name='Card', layoutMode='VERTICAL', itemSpacing=8,
        paddingTop=16, paddingBottom=16, componentId='1:9',
        absoluteBoundingBox=box(0, 0, 320, 180),
        fills=[{'type': 'SOLID', 'color': {'r': 1, 'g': 1, 'b': 1, 'a': 1}}],
    )


class TestVisionContextExtractor:
    """Colours, typography and spacing with token matches"""

    def test_shape(self, resolver, card):
        metadata = VisionContextExtractor(resolver).extract(card)
        assert metadata['name'] == 'Card'
        assert metadata['componentId'] == '1:9'
        assert metadata['boundingBox'] == {'width': 320, 'height': 180}

    def test_colors_deduplicated_by_hex_and_usage(self, resolver, card):
        colors = VisionContextExtractor(resolver).extract(card)['colors']
        assert [(c['hex'], c['usage']) for c in colors] == [
            ('#ffffff', 'fill'), ('#000000', 'text'), ('#4d4d4d', 'text'),
        ]
        assert colors[0]['tokenMatch'] == 'DSColor.background'
        assert colors[2]['tokenMatch'] is None

    def test_typography(self, resolver, card):
        typography = VisionContextExtractor(resolver).extract(card)['typography']
        assert [(t['fontSize'], t['fontWeight']) for t in typography] == [(17, 600), (12, 400)]
        assert typography[0]['tokenMatch'] == 'DSTypography.headline'
        assert len(typography[1]['text']) == 50

    def test_spacing(self, resolver, card):
        spacing = VisionContextExtractor(resolver).extract(card)['spacing']
        padding, gap = spacing
        assert padding['type'] == 'padding'
        assert padding['values'] == {'top': 16, 'right': None, 'bottom': 16, 'left': None}
        assert gap == {'type': 'gap', 'values': {'gap': 8}, 'nodeName': 'Card', 'tokenMatch': 'DSSpacing.small'}

    def test_matched_tokens(self, resolver, card):
        tokens = VisionContextExtractor(resolver).extract(card)['tokens']
        assert tokens['colors'] == [
            {'value': '#ffffff', 'token': 'DSColor.background'},
            {'value': '#000000', 'token': 'DSColor.textPrimary'},
        ]
        assert tokens['spacing'] == [{'value': 8, 'token': 'DSSpacing.small'}]
        assert tokens['typography'] == [
            {'size': 17, 'weight': 600, 'token': 'DSTypography.headline'},
            {'size': 12, 'weight': 400, 'token': 'DSTypography.caption'},
        ]


class TestAnalysisPrompt:
    """Prompt text for the vision model"""

    def test_swiftui_prompt(self, resolver, card):
        metadata = VisionContextExtractor(resolver).extract(card)
        prompt = generate_analysis_prompt('Card', metadata)
        assert prompt.startswith('Analyze this Figma design "Card" and generate clean SwiftUI code.')
        assert 'Key colors: DSColor.background, DSColor.textPrimary, #4d4d4d' in prompt
        assert 'Typography: 17pt, 12pt' in prompt
        assert 'Size: 320x180' in prompt
        assert 'VStack, HStack' in prompt

    def test_compose_prompt_without_metadata(self):
        prompt = generate_analysis_prompt('Empty', {}, Target.COMPOSE)
        assert 'Jetpack Compose' in prompt
        assert 'Key colors: none extracted' in prompt
        assert 'Column, Row' in prompt
