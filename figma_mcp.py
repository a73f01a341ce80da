#!/usr/bin/env python3
"""
Figma Design-System Translator - MCP server.

Translates Figma node trees into SwiftUI or Jetpack Compose code that
references a project's design system (tokens and components). Tools:
- figma_to_swiftui / figma_to_compose: full translation
- figma_get_metadata: pruned node tree for cheap inspection
- figma_vision_translate: recompressed snapshot plus metadata and prompt
- figma_discover_components: merge library components into components.json

Configuration comes from environment variables: FIGMA_ACCESS_TOKEN,
DESIGN_SYSTEM_ROOT, DESIGN_SYSTEM_ROOT_COMPOSE, USE_MOCK_FIGMA and
FIGMA_MOCK_FIXTURE.
"""

import base64
import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any

import httpx
from pydantic import BaseModel, Field, field_validator, ConfigDict
from mcp.server.fastmcp import FastMCP

from design_system.discovery import discover_components, merge_components
from design_system.image_processor import MIME_TYPE, image_size, optimize_for_cli
from design_system.loader import (
    DesignSystem, load_design_system, read_component_file, resolve_root, save_components,
)
from translators.base import Target
from translators.compose_translator import build_compose_registry
from translators.pruning import prune_node
from translators.swiftui_translator import build_swiftui_registry
from translators.tokens import TokenResolver
from translators.vision_context import VisionContextExtractor, generate_analysis_prompt

# ============================================================================
# Constants
# ============================================================================

FIGMA_API_BASE = "https://api.figma.com/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_DESIGN_SYSTEM_ROOT = "./sample-config"
DEFAULT_MOCK_FIXTURE = "./sample-config/sample_node.json"

logger = logging.getLogger("figma_mcp")

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("figma_ds_translator")

# ============================================================================
# Pydantic Input Models
# ============================================================================


class FigmaNodeInput(BaseModel):
    """Input model for node operations."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key or full URL (figma.com/design/FILE_KEY/...)",
        min_length=1,
        max_length=200
    )
    node_id: str = Field(
        ...,
        description="Node ID (e.g., '1:2' or '1-2')",
        min_length=1
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        # Extract file key from URL if full URL provided
        if 'figma.com' in v:
            match = re.search(r'figma\.com/(?:design|file)/([a-zA-Z0-9]+)', v)
            if match:
                return match.group(1)
            raise ValueError("Could not extract file key from Figma URL")
        return v

    @field_validator('node_id')
    @classmethod
    def normalize_node_id(cls, v: str) -> str:
        # Convert 1-2 format to 1:2
        return v.replace('-', ':')


class FigmaTranslateInput(FigmaNodeInput):
    """Input model for code translation."""
    handoff_mode: Optional[bool] = Field(
        default=None,
        description="Override components.json handoffMode: add provenance and TODO comments"
    )


class FigmaVisionInput(FigmaNodeInput):
    """Input model for snapshot + metadata export."""
    scale: int = Field(
        default=2,
        description="Export scale factor (1 to 4)",
        ge=1,
        le=4
    )


class FigmaDiscoverInput(FigmaNodeInput):
    """Input model for component discovery."""
    target: Target = Field(
        default=Target.SWIFTUI,
        description="Design system to update: 'swiftui' or 'compose'"
    )
    config_path: Optional[str] = Field(
        default=None,
        description="components.json to update (defaults to the target's design-system root)"
    )


# ============================================================================
# Configuration
# ============================================================================

def _get_figma_token() -> str:
    """Get Figma API token from environment."""
    token = os.environ.get("FIGMA_ACCESS_TOKEN") or os.environ.get("FIGMA_TOKEN")
    if not token:
        raise ValueError(
            "Figma API token not found. Set FIGMA_ACCESS_TOKEN or FIGMA_TOKEN environment variable, "
            "or set USE_MOCK_FIGMA=true to translate the fixture in FIGMA_MOCK_FIXTURE."
        )
    return token


def _use_mock_figma() -> bool:
    return os.environ.get("USE_MOCK_FIGMA", "false").strip().lower() == "true"


def _design_system_root(target: Target) -> Path:
    root = os.environ.get("DESIGN_SYSTEM_ROOT") or DEFAULT_DESIGN_SYSTEM_ROOT
    if target == Target.COMPOSE:
        root = os.environ.get("DESIGN_SYSTEM_ROOT_COMPOSE") or root
    return resolve_root(root)


# Current design system per target; replaced whole on reload
_design_systems: Dict[Target, DesignSystem] = {}


def _get_design_system(target: Target) -> DesignSystem:
    root = _design_system_root(target)
    system = _design_systems.get(target)
    if system is None or system.root != root:
        system = _reload_design_system(target)
    return system


def _reload_design_system(target: Target) -> DesignSystem:
    system = load_design_system(_design_system_root(target))
    _design_systems[target] = system
    return system


# ============================================================================
# Figma Access
# ============================================================================

@dataclass(frozen=True)
class NodeTree:
    """A fetched node with the component metadata tables of its response."""
    document: Dict[str, Any]
    components: Dict[str, Any]
    component_sets: Dict[str, Any]


async def _make_figma_request(
    endpoint: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Make authenticated request to Figma API."""
    token = _get_figma_token()

    async with httpx.AsyncClient() as client:
        response = await client.request(
            method=method,
            url=f"{FIGMA_API_BASE}/{endpoint}",
            headers={"X-Figma-Token": token},
            params=params,
            timeout=DEFAULT_TIMEOUT
        )
        response.raise_for_status()
        return response.json()


def _node_tree_from_response(data: Dict[str, Any], node_id: str) -> NodeTree:
    """Accepts a /files/:key/nodes response or a bare {document, ...} object."""
    if 'nodes' in data:
        nodes = data.get('nodes') or {}
        entry = nodes.get(node_id)
        if entry is None and _use_mock_figma() and nodes:
            entry = next(iter(nodes.values()))
    else:
        entry = data
    if not entry or not entry.get('document'):
        raise ValueError(f"Node '{node_id}' not found. Check the node ID.")
    return NodeTree(
        document=entry['document'],
        components=entry.get('components') or {},
        component_sets=entry.get('componentSets') or {},
    )


def _load_mock_node_tree(node_id: str) -> NodeTree:
    path = resolve_root(os.environ.get("FIGMA_MOCK_FIXTURE") or DEFAULT_MOCK_FIXTURE)
    logger.info(f"Serving node {node_id} from mock fixture {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return _node_tree_from_response(json.load(f), node_id)


async def _fetch_node_tree(file_key: str, node_id: str) -> NodeTree:
    if _use_mock_figma():
        return _load_mock_node_tree(node_id)
    data = await _make_figma_request(f"files/{file_key}/nodes", params={"ids": node_id})
    return _node_tree_from_response(data, node_id)


async def _fetch_node_image(file_key: str, node_id: str, scale: int) -> bytes:
    """Render a node to PNG and download it."""
    if _use_mock_figma():
        raise ValueError("Image export is not available with USE_MOCK_FIGMA=true.")
    data = await _make_figma_request(
        f"images/{file_key}",
        params={"ids": node_id, "format": "png", "scale": scale}
    )
    url = (data.get('images') or {}).get(node_id)
    if not url:
        raise ValueError(f"Figma did not render node '{node_id}'. Check the node ID.")

    async with httpx.AsyncClient() as client:
        response = await client.get(url, timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()
        return response.content


def _handle_api_error(e: Exception) -> str:
    """Format API errors for user-friendly messages."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 401:
            return "Error: Invalid Figma API token. Check your FIGMA_ACCESS_TOKEN environment variable."
        elif status == 403:
            return "Error: Access denied. You don't have permission to view this file."
        elif status == 404:
            return "Error: File or node not found. Check the file key and node ID."
        elif status == 429:
            return "Error: Rate limit exceeded. Please wait before making more requests."
        return f"Error: Figma API returned status {status}"
    elif isinstance(e, httpx.TimeoutException):
        return "Error: Request timed out. The file might be too large."
    elif isinstance(e, ValueError):
        return f"Error: {str(e)}"
    return f"Error: {type(e).__name__}: {str(e)}"


# ============================================================================
# Tools
# ============================================================================

async def _translate(params: FigmaTranslateInput, target: Target) -> str:
    tree = await _fetch_node_tree(params.file_key, params.node_id)
    system = _get_design_system(target)
    build = build_swiftui_registry if target == Target.SWIFTUI else build_compose_registry
    registry = build(system.tokens, system.components, system.variable_bindings, params.handoff_mode)
    return registry.translate(tree.document, tree.components, tree.component_sets)


@mcp.tool(
    name="figma_to_swiftui",
    annotations={
        "title": "Translate Figma Node to SwiftUI",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_to_swiftui(params: FigmaTranslateInput) -> str:
    """
    Translate a Figma node into SwiftUI code using the configured design system.

    Auto-layout frames become HStack/VStack, free-form frames ZStack. Spacing,
    colours, fonts and radii reference design tokens when one is close enough;
    otherwise the raw value is emitted with a comment naming the nearest tokens.
    Configured library components become calls to their SwiftUI views; unknown
    components become sized placeholders with a TODO.

    Args:
        params: FigmaTranslateInput containing:
            - file_key (str): Figma file key or URL
            - node_id (str): Node ID to translate
            - handoff_mode (Optional[bool]): Override provenance/TODO comments

    Returns:
        str: SwiftUI source
    """
    logger.info(f"figma_to_swiftui file={params.file_key} node={params.node_id}")
    try:
        return await _translate(params, Target.SWIFTUI)
    except Exception as e:
        logger.error(f"figma_to_swiftui failed: {e}")
        return _handle_api_error(e)


@mcp.tool(
    name="figma_to_compose",
    annotations={
        "title": "Translate Figma Node to Jetpack Compose",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_to_compose(params: FigmaTranslateInput) -> str:
    """
    Translate a Figma node into Jetpack Compose code using the Compose design system.

    Same rules as figma_to_swiftui with Row/Column/Box layouts and Modifier
    chains. Uses DESIGN_SYSTEM_ROOT_COMPOSE when set.

    Args:
        params: FigmaTranslateInput containing:
            - file_key (str): Figma file key or URL
            - node_id (str): Node ID to translate
            - handoff_mode (Optional[bool]): Override provenance/TODO comments

    Returns:
        str: Kotlin Compose source
    """
    logger.info(f"figma_to_compose file={params.file_key} node={params.node_id}")
    try:
        return await _translate(params, Target.COMPOSE)
    except Exception as e:
        logger.error(f"figma_to_compose failed: {e}")
        return _handle_api_error(e)


@mcp.tool(
    name="figma_get_metadata",
    annotations={
        "title": "Get Pruned Node Metadata",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_get_metadata(params: FigmaNodeInput) -> str:
    """
    Get a compact view of a node tree: ids, names, rounded bounds, text,
    fill/stroke colours (with matching token names) and style hints, four
    levels deep. Much cheaper than a full translation.

    Args:
        params: FigmaNodeInput containing:
            - file_key (str): Figma file key or URL
            - node_id (str): Node ID to inspect

    Returns:
        str: JSON of the pruned tree
    """
    logger.info(f"figma_get_metadata file={params.file_key} node={params.node_id}")
    try:
        tree = await _fetch_node_tree(params.file_key, params.node_id)
        system = _get_design_system(Target.SWIFTUI)
        resolver = TokenResolver(system.tokens, system.variable_bindings)
        return json.dumps(prune_node(tree.document, resolver), indent=2)
    except Exception as e:
        logger.error(f"figma_get_metadata failed: {e}")
        return _handle_api_error(e)


@mcp.tool(
    name="figma_vision_translate",
    annotations={
        "title": "Get Snapshot and Metadata for Vision Translation",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_vision_translate(params: FigmaVisionInput) -> str:
    """
    Export a node snapshot (WebP, at most 512px) together with flattened
    colour/typography/spacing metadata and a suggested analysis prompt.

    Args:
        params: FigmaVisionInput containing:
            - file_key (str): Figma file key or URL
            - node_id (str): Node ID to export
            - scale (int): Export scale factor (1 to 4)

    Returns:
        str: JSON with image (base64, width, height, mimeType), metadata and prompt
    """
    logger.info(f"figma_vision_translate file={params.file_key} node={params.node_id} scale={params.scale}")
    try:
        tree = await _fetch_node_tree(params.file_key, params.node_id)
        png = await _fetch_node_image(params.file_key, params.node_id, params.scale)
        image = optimize_for_cli(png)
        width, height = image_size(image)

        system = _get_design_system(Target.SWIFTUI)
        extractor = VisionContextExtractor(TokenResolver(system.tokens, system.variable_bindings))
        metadata = extractor.extract(tree.document)
        name = tree.document.get('name', params.node_id)

        return json.dumps({
            "image": {
                "base64": base64.b64encode(image).decode('ascii'),
                "width": width,
                "height": height,
                "mimeType": MIME_TYPE if image is not png else "image/png",
            },
            "metadata": metadata,
            "prompt": generate_analysis_prompt(name, metadata),
        }, indent=2)
    except Exception as e:
        logger.error(f"figma_vision_translate failed: {e}")
        return _handle_api_error(e)


@mcp.tool(
    name="figma_discover_components",
    annotations={
        "title": "Discover Library Components",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_discover_components(params: FigmaDiscoverInput) -> str:
    """
    Find library components used under a node and add the missing ones to
    components.json. Existing entries are never changed; sets already
    configured (by component-set key) are skipped.

    Args:
        params: FigmaDiscoverInput containing:
            - file_key (str): Figma file key or URL
            - node_id (str): Node ID to scan
            - target: 'swiftui' or 'compose'
            - config_path (Optional[str]): components.json to update

    Returns:
        str: JSON summary with configPath, totalComponents, added, skipped, message
    """
    logger.info(f"figma_discover_components file={params.file_key} node={params.node_id} target={params.target.value}")
    try:
        tree = await _fetch_node_tree(params.file_key, params.node_id)
        system = _get_design_system(params.target)
        path = resolve_root(params.config_path) if params.config_path else system.components_path

        discovered = discover_components(tree.document, tree.components, tree.component_sets)
        catalog, added, skipped = merge_components(read_component_file(path), discovered, params.target)
        save_components(path, catalog)
        if path == system.components_path:
            _reload_design_system(params.target)

        return json.dumps({
            "configPath": str(path),
            "totalComponents": len(catalog.components),
            "added": added,
            "skipped": skipped,
            "message": (
                f"Discovered {len(discovered)} library component(s): "
                f"added {len(added)}, skipped {len(skipped)} already configured."
            ),
        }, indent=2)
    except Exception as e:
        logger.error(f"figma_discover_components failed: {e}")
        return _handle_api_error(e)


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    # stdout carries the MCP protocol
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    mcp.run()


if __name__ == "__main__":
    main()
