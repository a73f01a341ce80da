"""
Design token catalog and resolver.

Maps raw Figma values (spacing, colours, text styles, corner radii) to the
nearest design-system token. A miss is a normal result carrying guidance and
the closest candidates; resolution never raises.
"""

import math
from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from translators.base import ColorValue

SPACING_TOLERANCE = 2      # px
COLOR_TOLERANCE = 0.05     # per channel, 0-1 range
FONT_SIZE_TOLERANCE = 1    # pt
FULL_RADIUS_SENTINEL = 9999
MAX_SUGGESTIONS = 2

# Float slack so that e.g. |0.5 - 0.55| still counts as within 0.05
_EPSILON = 1e-9


# ============================================================================
# Catalog models
# ============================================================================

class _Token(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')


class SpacingToken(_Token):
    name: str
    value: float


class CornerRadiusToken(_Token):
    name: str
    value: float


class ColorToken(_Token):
    name: str
    r: float = Field(..., ge=0, le=1)
    g: float = Field(..., ge=0, le=1)
    b: float = Field(..., ge=0, le=1)
    a: Optional[float] = Field(default=None, ge=0, le=1)
    hex: Optional[str] = Field(default=None, pattern=r'^#[0-9a-fA-F]{6}$')

    @property
    def hex_value(self) -> str:
        return ColorValue(self.r, self.g, self.b).hex


class TypographyToken(_Token):
    name: str
    font_family: str = Field(..., alias='fontFamily')
    font_weight: int = Field(..., alias='fontWeight')
    font_size: float = Field(..., alias='fontSize')
    line_height: Optional[float] = Field(default=None, alias='lineHeight')
    letter_spacing: Optional[float] = Field(default=None, alias='letterSpacing')


class TokenCatalog(_Token):
    """Ordered token collections as read from tokens.json."""
    spacing: Tuple[SpacingToken, ...] = ()
    colors: Tuple[ColorToken, ...] = ()
    typography: Tuple[TypographyToken, ...] = ()
    corner_radius: Tuple[CornerRadiusToken, ...] = Field(default=(), alias='cornerRadius')


# ============================================================================
# Resolution results
# ============================================================================

@dataclass(frozen=True)
class TokenMatch:
    token: Any
    reference: str
    success: bool = True


@dataclass(frozen=True)
class TokenMiss:
    raw_value: str
    message: str
    closest_matches: Tuple[Tuple[str, str], ...] = ()
    success: bool = False

    @property
    def guidance(self) -> str:
        """Message plus suggestions, ready to drop into a trailing comment."""
        if not self.closest_matches:
            return self.message
        closest = ', '.join(f"{name} ({value})" for name, value in self.closest_matches)
        return f"{self.message} Closest: {closest}"


TokenResolution = Union[TokenMatch, TokenMiss]


# ============================================================================
# Resolver
# ============================================================================

def _rgb_distance(token: ColorToken, color: ColorValue) -> float:
    return math.sqrt((token.r - color.r) ** 2 + (token.g - color.g) ** 2 + (token.b - color.b) ** 2)


def _px(value: float) -> str:
    return f"{value:g}px"


class TokenResolver:
    """Nearest-token lookup against a TokenCatalog.

    Args:
        catalog: token collections; treated as read-only
        variable_bindings: Figma variable id -> token name
    """

    def __init__(self, catalog: Optional[TokenCatalog] = None,
                 variable_bindings: Optional[Dict[str, str]] = None):
        self.catalog = catalog or TokenCatalog()
        self.variable_bindings = dict(variable_bindings or {})

    # -- spacing / radius ----------------------------------------------------

    def resolve_spacing(self, value: float) -> TokenResolution:
        ranked = sorted(self.catalog.spacing, key=lambda t: abs(t.value - value))
        if ranked and abs(ranked[0].value - value) <= SPACING_TOLERANCE + _EPSILON:
            return TokenMatch(ranked[0], ranked[0].name)
        return TokenMiss(
            raw_value=_px(value),
            message=f"⚠️ No DS spacing token found for {_px(value)}.",
            closest_matches=tuple((t.name, _px(t.value)) for t in ranked[:MAX_SUGGESTIONS]),
        )

    def resolve_corner_radius(self, value: float) -> TokenResolution:
        ranked = sorted(self.catalog.corner_radius, key=lambda t: abs(t.value - value))
        if ranked and abs(ranked[0].value - value) <= SPACING_TOLERANCE + _EPSILON:
            return TokenMatch(ranked[0], ranked[0].name)
        finite = [t for t in ranked if t.value < FULL_RADIUS_SENTINEL]
        return TokenMiss(
            raw_value=_px(value),
            message=f"⚠️ No DS radius token found for {_px(value)}.",
            closest_matches=tuple((t.name, _px(t.value)) for t in finite[:MAX_SUGGESTIONS]),
        )

    # -- colour ----------------------------------------------------------------

    def _closest_colors(self, color: ColorValue) -> Tuple[Tuple[str, str], ...]:
        ranked = sorted(self.catalog.colors, key=lambda t: _rgb_distance(t, color))
        return tuple((t.name, t.hex_value) for t in ranked[:MAX_SUGGESTIONS])

    def resolve_color(self, color: Union[ColorValue, Dict[str, Any]]) -> TokenResolution:
        if isinstance(color, dict):
            color = ColorValue(color.get('r', 0), color.get('g', 0), color.get('b', 0), color.get('a', 1))
        limit = COLOR_TOLERANCE + _EPSILON
        for token in self.catalog.colors:
            if (abs(token.r - color.r) <= limit and abs(token.g - color.g) <= limit
                    and abs(token.b - color.b) <= limit):
                return TokenMatch(token, token.name)
        return TokenMiss(
            raw_value=color.hex,
            message=f"⚠️ No DS color token found for {color.hex}.",
            closest_matches=self._closest_colors(color),
        )

    def resolve_color_with_binding(self, paint: Dict[str, Any]) -> TokenResolution:
        """Resolve a SOLID paint, letting a bound variable win over its literal colour."""
        color = ColorValue.from_paint(paint)
        binding = (paint.get('boundVariables') or {}).get('color') or {}
        variable_id = binding.get('id')
        if not variable_id:
            return self.resolve_color(color)

        token_name = self.variable_bindings.get(variable_id)
        if token_name is None:
            return TokenMiss(
                raw_value=color.hex,
                message=f"⚠️ Variable {variable_id} not mapped. Add to variable_mapping.json.",
                closest_matches=self._closest_colors(color),
            )
        for token in self.catalog.colors:
            if token.name == token_name:
                return TokenMatch(token, token.name)
        # Known through the binding only
        synthesized = ColorToken(name=token_name, r=color.r, g=color.g, b=color.b)
        return TokenMatch(synthesized, token_name)

    # -- typography ----------------------------------------------------------

    def resolve_typography(self, style: Dict[str, Any]) -> TokenResolution:
        size = style.get('fontSize', 0)
        weight = style.get('fontWeight', 400)
        for token in self.catalog.typography:
            if token.font_weight == weight and abs(token.font_size - size) <= FONT_SIZE_TOLERANCE + _EPSILON:
                return TokenMatch(token, token.name)

        ranked = sorted(
            self.catalog.typography,
            key=lambda t: abs(t.font_size - size) + abs(t.font_weight - weight) / 100,
        )
        return TokenMiss(
            raw_value=f"{style.get('fontFamily', '')} {weight:g} {size:g}pt".strip(),
            message=f"⚠️ No DS typography token found for {size:g}pt weight {weight:g}.",
            closest_matches=tuple(
                (t.name, f"{t.font_size:g}pt weight {t.font_weight}") for t in ranked[:MAX_SUGGESTIONS]
            ),
        )
