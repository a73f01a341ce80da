"""
Target-independent layout planning for container nodes.

Decides the container shape (row, column or free box), splits children
into flow and absolute layers, and computes offsets, padding and fill hints.
Both the SwiftUI and the Compose layout translators render from a LayoutPlan.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from translators.base import visible_children, round_one_decimal


class Shape(str, Enum):
    ROW = "row"
    COLUMN = "column"
    BOX = "box"


class CrossAlignment(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"
    BASELINE = "baseline"


@dataclass(frozen=True)
class LayoutPlan:
    shape: Shape
    flow: Tuple[Dict[str, Any], ...]
    absolute: Tuple[Dict[str, Any], ...]
    needs_wrapper: bool
    space_between: bool
    alignment: CrossAlignment
    spacing: Optional[float]


def is_absolute(node: Dict[str, Any]) -> bool:
    return node.get('layoutPositioning') == 'ABSOLUTE'


def _boxes_overlap(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    box_a, box_b = a.get('absoluteBoundingBox'), b.get('absoluteBoundingBox')
    if not box_a or not box_b:
        return False
    return (box_a.get('x', 0) < box_b.get('x', 0) + box_b.get('width', 0)
            and box_b.get('x', 0) < box_a.get('x', 0) + box_a.get('width', 0)
            and box_a.get('y', 0) < box_b.get('y', 0) + box_b.get('height', 0)
            and box_b.get('y', 0) < box_a.get('y', 0) + box_a.get('height', 0))


def _any_overlap(children: List[Dict[str, Any]]) -> bool:
    for i, first in enumerate(children):
        for second in children[i + 1:]:
            if _boxes_overlap(first, second):
                return True
    return False


def container_shape(node: Dict[str, Any]) -> Shape:
    """HORIZONTAL -> row, VERTICAL -> column, otherwise column or free box.

    Without auto layout the children are taken as a column unless any of
    them is absolutely positioned, any two overlap, or there are none.
    """
    mode = node.get('layoutMode')
    if mode == 'HORIZONTAL':
        return Shape.ROW
    if mode == 'VERTICAL':
        return Shape.COLUMN
    children = visible_children(node)
    if not children or any(is_absolute(c) for c in children) or _any_overlap(children):
        return Shape.BOX
    return Shape.COLUMN


def cross_alignment(node: Dict[str, Any], shape: Shape) -> CrossAlignment:
    if shape == Shape.BOX:
        return CrossAlignment.START
    value = node.get('counterAxisAlignItems')
    if value == 'CENTER':
        return CrossAlignment.CENTER
    if value == 'MAX':
        return CrossAlignment.END
    if value == 'BASELINE':
        return CrossAlignment.BASELINE if shape == Shape.ROW else CrossAlignment.CENTER
    return CrossAlignment.START


def plan_layout(node: Dict[str, Any]) -> LayoutPlan:
    shape = container_shape(node)
    children = visible_children(node)
    if shape == Shape.BOX:
        flow, absolute = children, []
    else:
        flow = [c for c in children if not is_absolute(c)]
        absolute = [c for c in children if is_absolute(c)]

    space_between = shape != Shape.BOX and node.get('primaryAxisAlignItems') == 'SPACE_BETWEEN'
    spacing = node.get('itemSpacing')
    if space_between or shape == Shape.BOX or not spacing:
        spacing = None

    return LayoutPlan(
        shape=shape,
        flow=tuple(flow),
        absolute=tuple(absolute),
        needs_wrapper=shape != Shape.BOX and bool(absolute),
        space_between=space_between,
        alignment=cross_alignment(node, shape),
        spacing=spacing,
    )


def child_offset(child: Dict[str, Any], parent: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """Child position relative to the parent, or None without both boxes."""
    child_box = child.get('absoluteBoundingBox')
    parent_box = parent.get('absoluteBoundingBox')
    if not child_box or not parent_box:
        return None
    return (
        round_one_decimal(child_box.get('x', 0) - parent_box.get('x', 0)),
        round_one_decimal(child_box.get('y', 0) - parent_box.get('y', 0)),
    )


def fill_axes(node: Dict[str, Any]) -> Tuple[bool, bool]:
    """(fills width, fills height) from the node's sizing hints."""
    return (node.get('layoutSizingHorizontal') == 'FILL',
            node.get('layoutSizingVertical') == 'FILL')


def padding(node: Dict[str, Any]) -> Optional[Tuple[float, float, float, float]]:
    """(top, leading, bottom, trailing), or None when there is no padding."""
    edges = tuple(node.get(key) or 0 for key in ('paddingTop', 'paddingLeft', 'paddingBottom', 'paddingRight'))
    if not any(edges):
        return None
    return edges
