"""
SwiftUI translators - Figma node tree to SwiftUI views.

Four translators share one registry: configured design-system components,
Text, placeholders for unknown components, and HStack/VStack/ZStack layout.
Every style value goes through the token resolver; misses fall back to raw
values with the resolver's guidance as a trailing comment.
"""

from functools import partial
from typing import Dict, Any, List, Optional, Tuple

from translators.base import (
    INDENT_UNIT, Target, ColorValue, Mod, RenderedNode,
    display_name, escape_string, first_solid_fill, format_number,
    round_half_up, sanitize_identifier, weight_name, SWIFTUI_WEIGHT_MAP,
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

STACK_NAMES = {Shape.ROW: 'HStack', Shape.COLUMN: 'VStack', Shape.BOX: 'ZStack'}

ROW_ALIGNMENT = {
    CrossAlignment.START: '.top',
    CrossAlignment.CENTER: '.center',
    CrossAlignment.END: '.bottom',
    CrossAlignment.BASELINE: '.firstTextBaseline',
}

COLUMN_ALIGNMENT = {
    CrossAlignment.START: '.leading',
    CrossAlignment.CENTER: '.center',
    CrossAlignment.END: '.trailing',
    CrossAlignment.BASELINE: '.center',
}

TEXT_ALIGNMENT = {'LEFT': '.leading', 'CENTER': '.center', 'RIGHT': '.trailing'}

# Points used when a text style carries no fontSize
DEFAULT_FONT_SIZE = 17

PLACEHOLDER_SIZE = (100, 50)


# ---------------------------------------------------------------------------
# Modifier builders
# ---------------------------------------------------------------------------

def _raw_color(color: ColorValue) -> str:
    code = f"Color(red: {color.r:.3f}, green: {color.g:.3f}, blue: {color.b:.3f})"
    if color.a < 1:
        code += f".opacity({color.a:.2f})"
    return code


def _color_reference(paint: Dict[str, Any], resolver: TokenResolver) -> Tuple[str, Optional[str]]:
    """(colour expression, guidance comment or None)."""
    result = resolver.resolve_color_with_binding(paint)
    if result.success:
        return result.reference, None
    return _raw_color(ColorValue.from_paint(paint)), result.guidance


def _fill_frame(fill_width: bool, fill_height: bool) -> Optional[str]:
    if fill_width and fill_height:
        return '.frame(maxWidth: .infinity, maxHeight: .infinity)'
    if fill_width:
        return '.frame(maxWidth: .infinity)'
    if fill_height:
        return '.frame(maxHeight: .infinity)'
    return None


def _self_sizing(node: Dict[str, Any], context: TranslationContext) -> List[str]:
    # Nested nodes get their fill hints from the parent
    if context.depth > 0:
        return []
    frame = _fill_frame(*fill_axes(node))
    return [frame] if frame else []


def _visual_modifiers(node: Dict[str, Any], resolver: TokenResolver) -> List[Mod]:
    """padding, background, corner radius / clip, opacity - in that order."""
    mods: List[Mod] = []

    edges = padding(node)
    if edges:
        top, leading, bottom, trailing = edges
        if top == leading == bottom == trailing:
            result = resolver.resolve_spacing(top)
            if result.success:
                mods.append(Mod(f".padding({result.reference})"))
            else:
                mods.append(Mod(f".padding({format_number(top)})", result.guidance))
        else:
            mods.append(Mod(
                f".padding(EdgeInsets(top: {format_number(top)}, leading: {format_number(leading)}, "
                f"bottom: {format_number(bottom)}, trailing: {format_number(trailing)}))"
            ))

    fill = first_solid_fill(node)
    if fill:
        color, note = _color_reference(fill, resolver)
        mods.append(Mod(f".background({color})", note))

    radius = node.get('cornerRadius')
    if radius:
        result = resolver.resolve_corner_radius(radius)
        if result.success:
            mods.append(Mod(f".cornerRadius({result.reference})"))
        else:
            mods.append(Mod(f".cornerRadius({format_number(radius)})", result.guidance))
    elif node.get('clipsContent'):
        mods.append(Mod('.clipped()'))

    opacity = node.get('opacity')
    if opacity is not None and opacity < 1:
        mods.append(Mod(f".opacity({opacity:.2f})"))

    return mods


# ---------------------------------------------------------------------------
# Layout translator
# ---------------------------------------------------------------------------

def _offset(child: Dict[str, Any], parent: Dict[str, Any]) -> List[str]:
    offset = child_offset(child, parent)
    if offset is None:
        return []
    return [f".offset(x: {offset[0]:.1f}, y: {offset[1]:.1f})"]


def _placed_modifiers(child: Dict[str, Any], parent: Dict[str, Any]) -> List[str]:
    """Fill hints, then the parent-relative offset, for a child of a free box or wrapper layer."""
    frame = _fill_frame(*fill_axes(child))
    return ([frame] if frame else []) + _offset(child, parent)


def _stack_lines(node: Dict[str, Any], plan: LayoutPlan, context: TranslationContext) -> List[str]:
    indent = context.indent
    if plan.shape == Shape.BOX:
        params = ['alignment: .topLeading']
    else:
        table = ROW_ALIGNMENT if plan.shape == Shape.ROW else COLUMN_ALIGNMENT
        params = [f"alignment: {table[plan.alignment]}"]

    note = None
    if plan.spacing is not None:
        result = context.token_resolver.resolve_spacing(plan.spacing)
        if result.success:
            params.append(f"spacing: {result.reference}")
        else:
            params.append(f"spacing: {format_number(plan.spacing)}")
            note = result.guidance

    opening = f"{indent}{STACK_NAMES[plan.shape]}({', '.join(params)}) {{"
    lines = [f"{opening} // {note}" if note else opening]

    child_context = context.child()
    for index, child in enumerate(plan.flow):
        rendered = context.registry.render(child, child_context)
        if plan.shape == Shape.BOX:
            extra = _placed_modifiers(child, node)
        else:
            frame = _fill_frame(*fill_axes(child))
            extra = [frame] if frame else []
        lines.append(rendered.with_modifiers(*extra).text)
        if plan.space_between and index < len(plan.flow) - 1:
            lines.append(f"{child_context.indent}Spacer()")

    lines.append(f"{indent}}}")
    return lines


def render_layout(node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    """HStack / VStack / ZStack, wrapped in a ZStack when absolute children exist."""
    plan = plan_layout(node)
    indent = context.indent
    visual = [mod.render() for mod in _visual_modifiers(node, context.token_resolver)]
    sizing = _self_sizing(node, context)

    if not plan.needs_wrapper:
        return RenderedNode(
            lines=tuple(_stack_lines(node, plan, context)),
            modifier_indent=indent,
            modifiers=tuple(sizing + visual),
            trailing_comment=node.get('name'),
        )

    # Flow layer first, absolute children layered above it
    layer = context.indented()
    lines = [f"{indent}ZStack(alignment: .topLeading) {{"]
    lines.extend(_stack_lines(node, plan, layer))
    lines.extend(f"{layer.indent}{mod}" for mod in visual)

    child_context = layer.child(levels=0)
    for child in plan.absolute:
        rendered = context.registry.render(child, child_context)
        lines.append(rendered.with_modifiers(*_placed_modifiers(child, node)).text)
    lines.append(f"{indent}}}")

    return RenderedNode(
        lines=tuple(lines),
        modifier_indent=indent,
        modifiers=tuple(sizing),
        trailing_comment=node.get('name'),
    )


# ---------------------------------------------------------------------------
# Text translator
# ---------------------------------------------------------------------------

def render_text(node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    indent = context.indent
    resolver = context.token_resolver
    text = escape_string(node.get('characters') or '', Target.SWIFTUI)
    mods: List[Mod] = []

    style = node.get('style') or {}
    if style:
        size = style.get('fontSize', DEFAULT_FONT_SIZE)
        result = resolver.resolve_typography({**style, 'fontSize': size})
        if result.success:
            mods.append(Mod(f".font({result.reference})"))
        else:
            weight = weight_name(style.get('fontWeight', 400), SWIFTUI_WEIGHT_MAP)
            mods.append(Mod(
                f".font(.system(size: {format_number(size)}, weight: {weight}))",
                result.guidance,
            ))

    fill = first_solid_fill(node)
    if fill:
        color, note = _color_reference(fill, resolver)
        mods.append(Mod(f".foregroundColor({color})", note))

    alignment = TEXT_ALIGNMENT.get(style.get('textAlignHorizontal'))
    if alignment:
        mods.append(Mod(f".multilineTextAlignment({alignment})"))

    return RenderedNode(
        lines=(f'{indent}Text("{text}")',),
        modifier_indent=indent + INDENT_UNIT,
        modifiers=tuple(mod.render() for mod in mods),
    )


# ---------------------------------------------------------------------------
# Placeholder translator
# ---------------------------------------------------------------------------

def render_placeholder(node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    """Grey, sized stand-in for a component with no configured definition."""
    indent = context.indent
    name = display_name(node)
    box = node.get('absoluteBoundingBox') or {}
    width = box.get('width') or PLACEHOLDER_SIZE[0]
    height = box.get('height') or PLACEHOLDER_SIZE[1]

    lines = [f'{indent}// HANDOFF: Unknown component "{name}"']
    if node.get('componentId'):
        lines.append(f"{indent}// Figma Component ID: {node['componentId']}")
    lines.append(f"{indent}// TODO: Implement {sanitize_identifier(name)} component")
    lines.append(f"{indent}Color.gray.opacity(0.2)")

    label = escape_string(name, Target.SWIFTUI)
    return RenderedNode(
        lines=tuple(lines),
        modifier_indent=indent + INDENT_UNIT,
        modifiers=(
            f".frame(width: {round_half_up(width)}, height: {round_half_up(height)})",
            f'.overlay(Text("{label}").foregroundColor(.secondary))',
            '.border(Color.gray, width: 1)',
        ),
    )


# ---------------------------------------------------------------------------
# Configured component translator
# ---------------------------------------------------------------------------

def render_configured(resolver: ComponentIdentityResolver, handoff_mode: bool,
                      node: Dict[str, Any], context: TranslationContext) -> RenderedNode:
    indent = context.indent
    definition = resolver.resolve(node, context.components, context.component_sets)
    if definition is None:
        return RenderedNode(lines=(f"{indent}// Error: No definition found for component",))

    call = definition.call_name(Target.SWIFTUI)
    args = [
        f"{param}: {property_value(find_property(node, figma_prop), Target.SWIFTUI)}"
        for figma_prop, param in (definition.params or {}).items()
    ]

    lines = []
    if handoff_mode:
        lines.append(f"{indent}// HANDOFF: {call} from Figma")
        reference = definition.source_reference(Target.SWIFTUI)
        if reference:
            lines.append(f"{indent}// Reference: {reference}")
    lines.append(f"{indent}{call}({', '.join(args)})")
    if handoff_mode and looks_interactive(call, node.get('name', '')):
        lines.append(f"{indent}// TODO: Add action handler")

    return RenderedNode(lines=tuple(lines), modifier_indent=indent + INDENT_UNIT)


# ---------------------------------------------------------------------------
# Registry factory
# ---------------------------------------------------------------------------

def build_swiftui_registry(tokens: Optional[TokenCatalog] = None,
                           components: Optional[ComponentCatalog] = None,
                           variable_bindings: Optional[Dict[str, str]] = None,
                           handoff_mode: Optional[bool] = None) -> TranslatorRegistry:
    """Build the SwiftUI registry.

    Order: configured components (only when the catalog has SwiftUI
    definitions), text, placeholder, layout. Layout is also the fallback.
    """
    catalog = components or ComponentCatalog()
    handoff = catalog.handoff_mode if handoff_mode is None else handoff_mode
    layout = Translator(TranslatorKind.LAYOUT, handles_container, render_layout)

    table = []
    definitions = catalog.for_target(Target.SWIFTUI)
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
