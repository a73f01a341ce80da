"""
Shared helpers for the translators.

Node accessors for raw Figma JSON, number and colour formatting, the
font-weight tables and the RenderedNode value every translator returns.
"""

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Any, List, NamedTuple, Optional, Tuple

INDENT_UNIT = '    '

CONTAINER_TYPES = ('FRAME', 'GROUP', 'COMPONENT', 'INSTANCE')
COMPONENT_TYPES = ('COMPONENT', 'INSTANCE')


class Target(str, Enum):
    """Target UI framework."""
    SWIFTUI = "swiftui"
    COMPOSE = "compose"


# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _channel_to_byte(value: float) -> int:
    """0-1 channel to 0-255, halves rounded up."""
    return max(0, min(255, round_half_up(value * 255)))


@dataclass(frozen=True)
class ColorValue:
    """Figma RGBA colour (0-1 channels)."""
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_paint(cls, paint: Dict[str, Any]) -> 'ColorValue':
        """Build from a SOLID paint; paint opacity multiplies colour alpha."""
        color = paint.get('color') or {}
        alpha = color.get('a', 1) * paint.get('opacity', 1)
        return cls(r=color.get('r', 0), g=color.get('g', 0), b=color.get('b', 0), a=alpha)

    @property
    def hex(self) -> str:
        return '#{:02x}{:02x}{:02x}'.format(
            _channel_to_byte(self.r), _channel_to_byte(self.g), _channel_to_byte(self.b)
        )

    @property
    def argb_hex(self) -> str:
        """Upper-case AARRGGBB, the Compose Color(0x...) literal payload."""
        return '{:02X}{:02X}{:02X}{:02X}'.format(
            _channel_to_byte(self.a), _channel_to_byte(self.r),
            _channel_to_byte(self.g), _channel_to_byte(self.b)
        )


def color_to_hex(color: Dict[str, Any]) -> str:
    """Convert a Figma colour dict to #rrggbb."""
    return ColorValue(r=color.get('r', 0), g=color.get('g', 0), b=color.get('b', 0)).hex


# ---------------------------------------------------------------------------
# Node accessors
# ---------------------------------------------------------------------------

def is_visible(node: Dict[str, Any]) -> bool:
    return node.get('visible', True) is not False


def visible_children(node: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [child for child in node.get('children') or [] if is_visible(child)]


def first_solid_fill(node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """First visible SOLID paint in the node's fills, if any."""
    for fill in node.get('fills') or []:
        if fill.get('type') == 'SOLID' and is_visible(fill):
            return fill
    return None


def display_name(node: Dict[str, Any]) -> str:
    return node.get('componentName') or node.get('name') or ''


def sanitize_identifier(name: str, default: str = 'UnknownComponent') -> str:
    """'primary button / v2' -> 'PrimaryButtonV2'."""
    cleaned = re.sub(r'[^a-zA-Z0-9\s]', '', name or '')
    words = [w for w in cleaned.split() if w]
    return ''.join(w[0].upper() + w[1:] for w in words) or default


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_number(value: float) -> str:
    """8.0 -> '8', 8.5 -> '8.5', 123.45678 -> '123.4568'. Never exponent form."""
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.4f}".rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


def round_one_decimal(value: float) -> float:
    """Round to one decimal place, halves towards +infinity."""
    return math.floor(value * 10 + 0.5) / 10


def escape_string(text: str, target: Target) -> str:
    """Escape text for a double-quoted Swift/Kotlin string literal."""
    escaped = text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
    if target == Target.COMPOSE:
        escaped = escaped.replace('$', '\\$')
    return escaped


# Upper bucket bound -> weight name; first bound >= weight wins
SWIFTUI_WEIGHT_MAP: Dict[int, str] = {
    100: '.ultraLight', 200: '.thin', 300: '.light', 400: '.regular', 500: '.medium',
    600: '.semibold', 700: '.bold', 800: '.heavy', 900: '.black',
}

COMPOSE_WEIGHT_MAP: Dict[int, str] = {
    100: 'Thin', 200: 'ExtraLight', 300: 'Light', 400: 'Normal', 500: 'Medium',
    600: 'SemiBold', 700: 'Bold', 800: 'ExtraBold', 900: 'Black',
}


def weight_name(weight: float, table: Dict[int, str]) -> str:
    for bound in sorted(table):
        if weight <= bound:
            return table[bound]
    return table[max(table)]


# ---------------------------------------------------------------------------
# Rendered output
# ---------------------------------------------------------------------------

class Mod(NamedTuple):
    """One line of emitted code with an optional trailing note comment."""
    code: str
    note: Optional[str] = None

    def render(self) -> str:
        return f"{self.code} // {self.note}" if self.note else self.code


@dataclass(frozen=True)
class RenderedNode:
    """A translated node: body lines plus trailing modifiers composed last.

    Parents add behaviour to any child (fill sizing, offsets) by appending
    modifiers instead of editing the child's text.
    """
    lines: Tuple[str, ...]
    modifier_indent: str = ''
    modifiers: Tuple[str, ...] = field(default_factory=tuple)
    trailing_comment: Optional[str] = None

    def with_modifiers(self, *modifiers: str) -> 'RenderedNode':
        return replace(self, modifiers=self.modifiers + tuple(modifiers))

    @property
    def text(self) -> str:
        out = list(self.lines) + [f"{self.modifier_indent}{mod}" for mod in self.modifiers]
        if self.trailing_comment and out:
            out[-1] += f" // {self.trailing_comment}"
        return '\n'.join(out)
