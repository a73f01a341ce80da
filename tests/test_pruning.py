"""
Tests for node tree pruning
"""
from translators.pruning import MAX_PRUNE_DEPTH, MAX_TEXT_LENGTH, prune_node

from conftest import box, frame_node, text_node


def _depth(pruned):
    children = pruned.get('children') or []
    return 1 + max((_depth(c) for c in children), default=0)


class TestPruneNode:
    """Identity, bounds, paints and style hints"""

    def test_depth_is_capped(self):
        node = text_node('leaf')
        for level in range(5):
            node = frame_node([node], name=f'level {level}')
        # Six levels in, root plus four levels of children out
        assert _depth(prune_node(node)) == MAX_PRUNE_DEPTH + 1

    def test_bounds_rounded(self):
        pruned = prune_node(frame_node(absoluteBoundingBox=box(10.5, 3.2, 99.49, 20.5)))
        assert pruned['absoluteBoundingBox'] == {'x': 11, 'y': 3, 'width': 99, 'height': 21}

    def test_long_text_truncated(self):
        pruned = prune_node(text_node('a' * 600))
        assert pruned['characters'] == 'a' * MAX_TEXT_LENGTH + '...'
        assert prune_node(text_node('short'))['characters'] == 'short'

    def test_fills_with_tokens(self, resolver):
        pruned = prune_node(text_node('x'), resolver)
        assert pruned['fills'] == ['DSColor.textPrimary (#000000)']
        assert pruned['style']['typographyToken'] == 'DSTypography.body'

    def test_fills_without_resolver(self):
        assert prune_node(text_node('x'))['fills'] == ['#000000']

    def test_gradient(self):
        node = frame_node(fills=[{
            'type': 'GRADIENT_LINEAR',
            'gradientStops': [
                {'position': 0, 'color': {'r': 1, 'g': 0, 'b': 0, 'a': 1}},
                {'position': 0.5, 'color': {'r': 0, 'g': 1, 'b': 0, 'a': 1}},
                {'position': 1, 'color': {'r': 0, 'g': 0, 'b': 1, 'a': 1}},
            ],
        }])
        assert prune_node(node)['fills'] == ['Gradient(#ff0000 -> #0000ff)']

    def test_strokes_and_hidden_paints(self):
        node = frame_node(
            fills=[{'type': 'SOLID', 'visible': False, 'color': {'r': 1, 'g': 0, 'b': 0}}],
            strokes=[{'type': 'SOLID', 'color': {'r': 0, 'g': 0, 'b': 0}}],
        )
        pruned = prune_node(node)
        assert 'fills' not in pruned
        assert pruned['strokes'] == ['#000000']

    def test_hidden_children_dropped(self):
        node = frame_node([text_node('a', id='1'), text_node('b', id='2', visible=False)])
        assert [c['id'] for c in prune_node(node)['children']] == ['1']

    def test_no_empty_entries(self):
        pruned = prune_node({'id': '1', 'name': 'Empty', 'type': 'FRAME', 'layoutMode': 'NONE'})
        assert pruned == {'id': '1', 'name': 'Empty', 'type': 'FRAME'}

    def test_style_hints(self):
        node = frame_node(cornerRadius=8, layoutMode='HORIZONTAL', componentId='4:2')
        pruned = prune_node(node)
        assert pruned['style'] == {'cornerRadius': 8, 'layoutMode': 'HORIZONTAL'}
        assert pruned['componentId'] == '4:2'
