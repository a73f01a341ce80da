"""
Jetpack Compose translators - Figma node tree to Composable calls.

Mirrors the SwiftUI translators with Row/Column/Box layouts, named
arguments and Modifier chains. Guidance comments follow the argument's
comma so the emitted Kotlin keeps its structure.
"""

from functools import partial
from typing import Dict, Any, List, Optional, Tuple

from translators.base import (
    INDENT_UNIT, Target, ColorValue, Mod, RenderedNode,
    display_name, escape_string, first_solid_fill, format_number,
    round_half_up, sanitize_identifier, weight_name, COMPOSE_WEIGHT_MAP,
)
from translators.components import (
    ComponentCatalog, ComponentIdentityResolver,
    find_property, looks_interactive, property_value,
)
from translators.layout import (
    CrossAlignment, LayoutPlan, Shape, child_offset, fill_axes, padding, plan_layout,
)
from translators.registry import (
    TranslationContext, Translator, TranslatorKind, TranslatorRegistry,
    handles_component, handles_configured, handles_container, handles_text,
)
from translators.tokens import TokenCatalog, TokenResolver

LAYOUT_NAMES = {Shape.ROW: 'Row', Shape.COLUMN: 'Column', Shape.BOX: 'Box'}

ROW_ALIGNMENT = {
    CrossAlignment.START: 'Alignment.Top',
    CrossAlignment.CENTER: 'Alignment.CenterVertically',
    CrossAlignment.END: 'Alignment.Bottom',
}

COLUMN_ALIGNMENT = {
    CrossAlignment.START: 'Alignment.Start',
    CrossAlignment.CENTER: 'Alignment.CenterHorizontally',
    CrossAlignment.END: 'Alignment.End',
    CrossAlignment.BASELINE: 'Alignment.CenterHorizontally',
}

TEXT_ALIGNMENT = {'LEFT': 'TextAlign.Start', 'CENTER': 'TextAlign.Center', 'RIGHT': 'TextAlign.End'}

DEFAULT_FONT_SIZE = 14

PLACEHOLDER_SIZE = (100, 50)

SPACE_BETWEEN_SPACER = 'Spacer(modifier = Modifier.weight(1f))'


# ---------------------------------------------------------------------------
# Call rendering
# ---------------------------------------------------------------------------

def _dp(value: float) -> str:
    return f"{format_number(value)}.dp"


def _call_lines(indent: str, name: str, arguments: List[List[Mod]], opens_block: bool) -> List[str]:
    """Render `Name(arg, ...)` with one argument per line.

    Each argument is a list of lines; continuation lines carry their own
    extra indentation. The comma lands on an argument's last line, before
    any trailing note.
    """
    if not arguments:
        return [f"{indent}{name} {{" if opens_block else f"{indent}{name}()"]

    lines = [f"{indent}{name}("]
    for position, argument in enumerate(arguments):
        for line_no, mod in enumerate(argument):
            code = mod.code
            if line_no == len(argument) - 1 and position < len(arguments) - 1:
                code += ','
            lines.append(f"{indent}{INDENT_UNIT}{Mod(code, mod.note).render()}")
    lines.append(f"{indent}) {{" if opens_block else f"{indent})")
    return lines


def _modifier_argument(mods: List[Mod]) -> List[List[Mod]]:
    if not mods:
        return []
    return [[Mod('modifier = Modifier')] + [Mod(INDENT_UNIT + m.code, m.note) for m in mods]]


# ---------------------------------------------------------------------------
# Modifier builders
# ---------------------------------------------------------------------------

def _raw_color(color: ColorValue) -> str:
    return f"Color(0x{color.argb_hex})"


def _color_reference(paint: Dict[str, Any], resolver: TokenResolver) -> Tuple[str, Optional[str]]:
    result = resolver.resolve_color_with_binding(paint)
    if result.success:
        return result.reference, None
    return _raw_color(ColorValue.from_paint(paint)), result.guidance


def _fill_modifier(fill_width: bool, fill_height: bool) -> Optional[str]:
    if fill_width and fill_height:
        return '.fillMaxSize()'
    if fill_width:
        return '.fillMaxWidth()'
    if fill_height:
        return '.fillMaxHeight()'
    return None


def _self_sizing(node: Dict[str, Any], context: TranslationContext) -> List[Mod]:
    if context.depth > 0:
        return []
    fill = _fill_modifier(*fill_axes(node))
    return [Mod(fill)] if fill else []


def _visual_modifiers(node: Dict[str, Any], resolver: TokenResolver) -> List[Mod]:
    mods: List[Mod] = []

    edges = padding(node)
    if edges:
        top, start, bottom, end = edges
        if top == start == bottom == end:
            result = resolver.resolve_spacing(top)
            if result.success:
                mods.append(Mod(f".padding({result.reference})"))
            else:
                mods.append(Mod(f".padding({_dp(top)})", result.guidance))
        else:
            named = [(label, value) for label, value in
                     (('top', top), ('start', start), ('bottom', bottom), ('end', end)) if value]
            mods.append(Mod(f".padding({', '.join(f'{label} = {_dp(value)}' for label, value in named)})"))

    fill = first_solid_fill(node)
    if fill:
        color, note = _color_reference(fill, resolver)
        mods.append(Mod(f".background({color})", note))

    radius = node.get('cornerRadius')
    if radius:
        result = resolver.resolve_corner_radius(radius)
        if result.success:
            mods.append(Mod(f".clip(RoundedCornerShape({result.reference}))"))
        else:
            mods.append(Mod(f".clip(RoundedCornerShape({_dp(radius)}))", result.guidance))
    elif node.get('clipsContent'):
        mods.append(Mod('.clip(RectangleShape)'))

    opacity = node.get('opacity')
    if opacity is not None and opacity < 1:
        mods.append(Mod(f".alpha({opacity:.2f}f)"))

    return mods


# ---------------------------------------------------------------------------
# Layout translator
# ---------------------------------------------------------------------------

def _offset(child: Dict[str, Any], parent: Dict[str, Any]) -> List[str]:
    offset = child_offset(child, parent)
    if offset is None:
        return []
    return [f".offset(x = {offset[0]:.1f}.dp, y = {offset[1]:.1f}.dp)"]


def _placed_modifiers(child: Dict[str, Any], parent: Dict[str, Any]) -> List[str]:
    fill = _fill_modifier(*fill_axes(child))
    return ([fill] if fill else []) + _offset(child, parent)


def _layout_arguments(plan: LayoutPlan, resolver: TokenResolver) -> List[List[Mod]]:
    if plan.shape == Shape.BOX:
        return [[Mod('contentAlignment = Alignment.TopStart')]]

    arguments = []
    arrangement = 'horizontalArrangement' if plan.shape == Shape.ROW else 'verticalArrangement'
    if plan.spacing is not None:
        result = resolver.resolve_spacing(plan.spacing)
        if result.success:
            arguments.append([Mod(f"{arrangement} = Arrangement.spacedBy({result.reference})")])
        else:
            arguments.append([Mod(f"{arrangement} = Arrangement.spacedBy({_dp(plan.spacing)})",
                                  result.guidance)])

    if plan.shape == Shape.ROW:
        # Baseline rows align each child instead
        if plan.alignment != CrossAlignment.BASELINE:
            arguments.append([Mod(f"verticalAlignment = {ROW_ALIGNMENT[plan.alignment]}")])
    else:
        arguments.append([Mod(f"horizontalAlignment = {COLUMN_ALIGNMENT[plan.alignment]}")])
    return arguments


def _layout_lines(node: Dict[str, Any], plan: LayoutPlan, context: TranslationContext,
                  modifiers: List[Mod]) -> List[str]:
    arguments = _layout_arguments(plan, context.token_resolver) + _modifier_argument(modifiers)
    lines = _call_lines(context.indent, LAYOUT_NAMES[plan.shape], arguments, opens_block=True)

    child_context = context.child()
    for index, child in enumerate(plan.flow):
        rendered = context.registry.render(child, child_context)
        if plan.shape == Shape.BOX:
            extra = _placed_modifiers(child, node)
        else:
            fill = _fill_modifier(*fill_axes(child))
            extra = [fill] if fill else []
        if plan.shape == Shape.ROW and plan.alignment == CrossAlignment.BASELINE:
            extra.append('.alignByBaseline()')
        lines.append(rendered.with_modifiers(*extra).text)
        if plan.space_between and index < len(plan.flow) - 1:
            lines.append(f"{child_context.indent}{SPACE_BETWEEN_SPACER}")

    lines.append(f"{context.indent}}}")
    return lines


def render_layout(node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    """Row / Column / Box, wrapped in a Box when absolute children exist."""
    plan = plan_layout(node)
    indent = context.indent
    visual = _visual_modifiers(node, context.token_resolver)
    sizing = _self_sizing(node, context)

    if not plan.needs_wrapper:
        return RenderedNode(
            lines=tuple(_layout_lines(node, plan, context, sizing + visual)),
            modifier_indent=indent + INDENT_UNIT,
            trailing_comment=node.get('name'),
        )

    arguments = [[Mod('contentAlignment = Alignment.TopStart')]] + _modifier_argument(sizing)
    lines = _call_lines(indent, 'Box', arguments, opens_block=True)
    layer = context.indented()
    lines.extend(_layout_lines(node, plan, layer, visual))

    child_context = layer.child(levels=0)
    for child in plan.absolute:
        rendered = context.registry.render(child, child_context)
        lines.append(rendered.with_modifiers(*_placed_modifiers(child, node)).text)
    lines.append(f"{indent}}}")

    return RenderedNode(
        lines=tuple(lines),
        modifier_indent=indent + INDENT_UNIT,
        trailing_comment=node.get('name'),
    )


# ---------------------------------------------------------------------------
# Text translator
# ---------------------------------------------------------------------------

def render_text(node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    indent = context.indent
    resolver = context.token_resolver
    text = escape_string(node.get('characters') or '', Target.COMPOSE)
    arguments: List[List[Mod]] = [[Mod(f'text = "{text}"')]]

    style = node.get('style') or {}
    if style:
        size = style.get('fontSize', DEFAULT_FONT_SIZE)
        result = resolver.resolve_typography({**style, 'fontSize': size})
        if result.success:
            arguments.append([Mod(f"style = {result.reference}")])
        else:
            weight = weight_name(style.get('fontWeight', 400), COMPOSE_WEIGHT_MAP)
            arguments.append([Mod(f"fontSize = {format_number(size)}.sp")])
            arguments.append([Mod(f"fontWeight = FontWeight.{weight}", result.guidance)])

    fill = first_solid_fill(node)
    if fill:
        color, note = _color_reference(fill, resolver)
        arguments.append([Mod(f"color = {color}", note)])

    alignment = TEXT_ALIGNMENT.get(style.get('textAlignHorizontal'))
    if alignment:
        arguments.append([Mod(f"textAlign = {alignment}")])

    return RenderedNode(
        lines=tuple(_call_lines(indent, 'Text', arguments, opens_block=False)),
        modifier_indent=indent + INDENT_UNIT,
    )


# ---------------------------------------------------------------------------
# Placeholder translator
# ---------------------------------------------------------------------------

def render_placeholder(node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    """Bordered grey Box standing in for a component with no configured definition."""
    indent = context.indent
    name = display_name(node)
    box = node.get('absoluteBoundingBox') or {}
    width = box.get('width') or PLACEHOLDER_SIZE[0]
    height = box.get('height') or PLACEHOLDER_SIZE[1]

    lines = [f'{indent}// HANDOFF: Unknown component "{name}"']
    if node.get('componentId'):
        lines.append(f"{indent}// Figma Component ID: {node['componentId']}")
    lines.append(f"{indent}// TODO: Implement {sanitize_identifier(name)} composable")

    arguments = _modifier_argument([
        Mod(f".size(width = {round_half_up(width)}.dp, height = {round_half_up(height)}.dp)"),
        Mod('.background(Color.LightGray.copy(alpha = 0.2f))'),
        Mod('.border(1.dp, Color.Gray, RoundedCornerShape(4.dp))'),
    ]) + [[Mod('contentAlignment = Alignment.Center')]]
    lines.extend(_call_lines(indent, 'Box', arguments, opens_block=True))

    label = escape_string(name, Target.COMPOSE)
    lines.extend(_call_lines(indent + INDENT_UNIT, 'Text',
                             [[Mod(f'text = "{label}"')], [Mod('color = Color.Gray')]],
                             opens_block=False))
    lines.append(f"{indent}}}")

    return RenderedNode(lines=tuple(lines), modifier_indent=indent + INDENT_UNIT)


# ---------------------------------------------------------------------------
# Configured component translator
# ---------------------------------------------------------------------------

def render_configured(resolver: ComponentIdentityResolver, handoff_mode: bool,
                      node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    indent = context.indent
    definition = resolver.resolve(node, context.components, context.component_sets)
    if definition is None:
        return RenderedNode(lines=(f"{indent}// Error: No Compose definition found for component",))

    call = definition.call_name(Target.COMPOSE)
    arguments = [
        [Mod(f"{param} = {property_value(find_property(node, figma_prop), Target.COMPOSE)}")]
        for figma_prop, param in (definition.params or {}).items()
    ]

    lines = []
    if handoff_mode:
        lines.append(f"{indent}// HANDOFF: {call} from Figma")
        reference = definition.source_reference(Target.COMPOSE)
        if reference:
            lines.append(f"{indent}// Reference: {reference}")
    lines.extend(_call_lines(indent, call, arguments, opens_block=False))
    if handoff_mode and looks_interactive(call, node.get('name', '')):
        lines.append(f"{indent}// TODO: Add onClick or action handler")

    return RenderedNode(lines=tuple(lines), modifier_indent=indent + INDENT_UNIT)


# ---------------------------------------------------------------------------
# Registry factory
# ---------------------------------------------------------------------------

def build_compose_registry(tokens: Optional[TokenCatalog] = None,
                           components: Optional[ComponentCatalog] = None,
                           variable_bindings: Optional[Dict[str, str]] = None,
                           handoff_mode: Optional[bool] = None) -> TranslatorRegistry:
    """Same table as the SwiftUI registry, using `composeComposable` definitions."""
    catalog = components or ComponentCatalog()
    handoff = catalog.handoff_mode if handoff_mode is None else handoff_mode
    layout = Translator(TranslatorKind.LAYOUT, handles_container, render_layout)

    table = []
    definitions = catalog.for_target(Target.COMPOSE)
    if definitions:
        identity = ComponentIdentityResolver(definitions)
        table.append(Translator(
            TranslatorKind.CONFIGURED_COMPONENT,
            partial(handles_configured, identity),
            partial(render_configured, identity, handoff),
        ))
    table.extend([
        Translator(TranslatorKind.TEXT, handles_text, render_text),
        Translator(TranslatorKind.PLACEHOLDER, handles_component, render_placeholder),
        layout,
    ])
    return TranslatorRegistry(table, TokenResolver(tokens, variable_bindings), fallback=layout)
