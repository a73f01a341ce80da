"""
Compact metadata view of a Figma node tree.

Keeps identity, rounded bounds, truncated text, paint summaries and a few
style hints, down to a fixed depth. Used by the metadata tool where a full
translation would cost too much context.
"""

from typing import Dict, Any, List, Optional

from translators.base import ColorValue, color_to_hex, is_visible, round_half_up, visible_children
from translators.tokens import TokenResolver

MAX_PRUNE_DEPTH = 4
MAX_TEXT_LENGTH = 500


def _summarize_paints(paints: Optional[List[Dict[str, Any]]],
                      resolver: Optional[TokenResolver]) -> List[str]:
    """Solid paints as hex (or 'Token (hex)'), gradients as their end stops."""
    summary = []
    for paint in paints or []:
        if not is_visible(paint):
            continue
        paint_type = paint.get('type', '')
        if paint_type == 'SOLID':
            color = ColorValue.from_paint(paint)
            entry = color.hex
            if resolver is not None:
                result = resolver.resolve_color(color)
                if result.success:
                    entry = f"{result.token.name} ({color.hex})"
            summary.append(entry)
        elif paint_type.startswith('GRADIENT'):
            stops = paint.get('gradientStops') or []
            if stops:
                start = color_to_hex(stops[0].get('color') or {})
                end = color_to_hex(stops[-1].get('color') or {})
                summary.append(f"Gradient({start} -> {end})")
    return summary


def _style_hints(node: Dict[str, Any], resolver: Optional[TokenResolver]) -> Dict[str, Any]:
    hints: Dict[str, Any] = {}
    style = node.get('style')
    if style:
        for key in ('fontFamily', 'fontSize', 'fontWeight'):
            if key in style:
                hints[key] = style[key]
        if resolver is not None:
            result = resolver.resolve_typography(style)
            if result.success:
                hints['typographyToken'] = result.token.name
    if node.get('cornerRadius'):
        hints['cornerRadius'] = node['cornerRadius']
    if node.get('layoutMode') and node['layoutMode'] != 'NONE':
        hints['layoutMode'] = node['layoutMode']
    return hints


def prune_node(node: Dict[str, Any], resolver: Optional[TokenResolver] = None,
               depth: int = 0) -> Dict[str, Any]:
    """Prune a node tree for inspection; children stop at MAX_PRUNE_DEPTH."""
    pruned: Dict[str, Any] = {
        'id': node.get('id'),
        'name': node.get('name'),
        'type': node.get('type'),
    }

    bbox = node.get('absoluteBoundingBox')
    if bbox:
        pruned['absoluteBoundingBox'] = {
            key: round_half_up(bbox.get(key, 0)) for key in ('x', 'y', 'width', 'height')
        }

    characters = node.get('characters')
    if characters:
        if len(characters) > MAX_TEXT_LENGTH:
            characters = characters[:MAX_TEXT_LENGTH] + '...'
        pruned['characters'] = characters

    fills = _summarize_paints(node.get('fills'), resolver)
    if fills:
        pruned['fills'] = fills
    strokes = _summarize_paints(node.get('strokes'), resolver)
    if strokes:
        pruned['strokes'] = strokes

    hints = _style_hints(node, resolver)
    if hints:
        pruned['style'] = hints

    if node.get('componentId'):
        pruned['componentId'] = node['componentId']

    if depth < MAX_PRUNE_DEPTH:
        children = visible_children(node)
        if children:
            pruned['children'] = [prune_node(child, resolver, depth + 1) for child in children]

    return pruned
