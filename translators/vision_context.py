"""
Flattened design metadata for vision-assisted translation.

Walks a node tree and collects colours, text styles and spacing, each
matched against the token catalog, then builds a short analysis prompt to
send alongside a rendered snapshot.
"""

import json
from typing import Dict, Any, List

from translators.base import Target, ColorValue, is_visible
from translators.tokens import TokenResolver

MAX_PROMPT_COLORS = 5
MAX_PROMPT_TYPE_SIZES = 3
MAX_SAMPLE_TEXT = 50


def _dedupe(items: List[Dict[str, Any]], key) -> List[Dict[str, Any]]:
    seen = set()
    unique = []
    for item in items:
        marker = key(item)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique


class VisionContextExtractor:
    """Collects colour, typography and spacing metadata from a node tree."""

    def __init__(self, resolver: TokenResolver):
        self.resolver = resolver

    def extract(self, node: Dict[str, Any]) -> Dict[str, Any]:
        colors: List[Dict[str, Any]] = []
        typography: List[Dict[str, Any]] = []
        spacing: List[Dict[str, Any]] = []
        self._walk(node, colors, typography, spacing)

        bbox = node.get('absoluteBoundingBox') or {}
        return {
            'name': node.get('name'),
            'componentId': node.get('componentId'),
            'colors': _dedupe(colors, lambda c: (c['hex'], c['usage'])),
            'typography': _dedupe(typography, lambda t: (t['fontSize'], t['fontWeight'])),
            'spacing': _dedupe(spacing, lambda s: json.dumps(s['values'], sort_keys=True)),
            'tokens': self._matched_tokens(colors, typography, spacing),
            'boundingBox': {'width': bbox.get('width', 0), 'height': bbox.get('height', 0)},
        }

    def _walk(self, node: Dict[str, Any], colors: List[Dict[str, Any]],
              typography: List[Dict[str, Any]], spacing: List[Dict[str, Any]]) -> None:
        name = node.get('name')

        for paint in node.get('fills') or []:
            if paint.get('type') != 'SOLID' or not is_visible(paint):
                continue
            color = ColorValue.from_paint(paint)
            result = self.resolver.resolve_color(color)
            colors.append({
                'hex': color.hex,
                'rgba': {'r': color.r, 'g': color.g, 'b': color.b, 'a': color.a},
                'usage': 'text' if node.get('type') == 'TEXT' else 'fill',
                'nodeName': name,
                'tokenMatch': result.token.name if result.success else None,
            })

        style = node.get('style')
        if node.get('type') == 'TEXT' and style and node.get('characters'):
            result = self.resolver.resolve_typography(style)
            typography.append({
                'fontSize': style.get('fontSize', 0),
                'fontWeight': style.get('fontWeight', 400),
                'fontFamily': style.get('fontFamily'),
                'text': node['characters'][:MAX_SAMPLE_TEXT],
                'tokenMatch': result.token.name if result.success else None,
            })

        edges = {side: node.get(f'padding{side.title()}') for side in ('top', 'right', 'bottom', 'left')}
        if any(edges.values()):
            spacing.append({'type': 'padding', 'values': edges, 'nodeName': name, 'tokenMatch': None})

        gap = node.get('itemSpacing')
        if gap and gap > 0:
            result = self.resolver.resolve_spacing(gap)
            spacing.append({
                'type': 'gap',
                'values': {'gap': gap},
                'nodeName': name,
                'tokenMatch': result.token.name if result.success else None,
            })

        for child in node.get('children') or []:
            self._walk(child, colors, typography, spacing)

    @staticmethod
    def _matched_tokens(colors: List[Dict[str, Any]], typography: List[Dict[str, Any]],
                        spacing: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
        """First occurrence of every matched token, per category."""
        matched_colors = _dedupe([c for c in colors if c['tokenMatch']], lambda c: c['tokenMatch'])
        matched_type = _dedupe([t for t in typography if t['tokenMatch']], lambda t: t['tokenMatch'])
        matched_spacing = _dedupe([s for s in spacing if s['tokenMatch']], lambda s: s['tokenMatch'])
        return {
            'colors': [{'value': c['hex'], 'token': c['tokenMatch']} for c in matched_colors],
            'spacing': [
                {'value': s['values'].get('gap') or s['values'].get('top') or 0, 'token': s['tokenMatch']}
                for s in matched_spacing
            ],
            'typography': [
                {'size': t['fontSize'], 'weight': t['fontWeight'], 'token': t['tokenMatch']}
                for t in matched_type
            ],
        }


def generate_analysis_prompt(node_name: str, metadata: Dict[str, Any],
                             target: Target = Target.SWIFTUI) -> str:
    """Prompt to pair with the snapshot when asking a vision model for code."""
    framework = 'SwiftUI' if target == Target.SWIFTUI else 'Jetpack Compose'
    containers = 'VStack, HStack' if target == Target.SWIFTUI else 'Column, Row'
    colors = ', '.join(
        c['tokenMatch'] or c['hex'] for c in metadata.get('colors', [])[:MAX_PROMPT_COLORS]
    )
    sizes = ', '.join(
        f"{t['fontSize']:g}pt" for t in metadata.get('typography', [])[:MAX_PROMPT_TYPE_SIZES]
    )
    box = metadata.get('boundingBox') or {}
    return (
        f'Analyze this Figma design "{node_name}" and generate clean {framework} code.\n'
        '\n'
        f'Key colors: {colors or "none extracted"}\n'
        f'Typography: {sizes or "none extracted"}\n'
        f'Size: {box.get("width", 0):g}x{box.get("height", 0):g}\n'
        '\n'
        f'Generate idiomatic {framework} that:\n'
        f"1. Uses semantic containers ({containers}) based on visual structure, not Figma's frame hierarchy\n"
        '2. References design tokens where available\n'
        '3. Avoids unnecessary nesting\n'
        '4. Includes TODO comments for interactive behaviors'
    )
