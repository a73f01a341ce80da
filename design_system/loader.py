"""
Design-system document loading.

A design-system root holds up to three JSON documents: tokens.json,
components.json and variable_mapping.json. Each one is optional; a missing
or invalid document is logged and replaced by an empty one so translation
can still run on raw values and placeholders.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Union

from pydantic import ValidationError

from translators.components import ComponentCatalog
from translators.tokens import TokenCatalog

logger = logging.getLogger(__name__)

TOKENS_FILE = 'tokens.json'
COMPONENTS_FILE = 'components.json'
VARIABLE_MAPPING_FILE = 'variable_mapping.json'

PathLike = Union[str, Path]


@dataclass(frozen=True)
class DesignSystem:
    """Loaded catalogs for one target. Replaced as a whole, never mutated."""
    root: Path
    tokens: TokenCatalog = field(default_factory=TokenCatalog)
    components: ComponentCatalog = field(default_factory=ComponentCatalog)
    variable_bindings: Dict[str, str] = field(default_factory=dict)

    @property
    def components_path(self) -> Path:
        return self.root / COMPONENTS_FILE


def resolve_root(raw_path: str) -> Path:
    """Expand '~' and resolve relative paths against the working directory."""
    return Path(os.path.expanduser(raw_path)).resolve()


def _read_json(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_tokens(root: PathLike) -> TokenCatalog:
    path = Path(root) / TOKENS_FILE
    try:
        return TokenCatalog.model_validate(_read_json(path))
    except (OSError, ValueError, ValidationError) as e:
        logger.warning(f"Failed to load {TOKENS_FILE} from {root}: {e}")
        return TokenCatalog()


def read_component_file(path: PathLike) -> ComponentCatalog:
    """
    Load components.json for an update. A missing file is an empty catalog;
    unreadable JSON or a schema error raises so the file is never overwritten.
    """
    path = Path(path)
    if not path.exists():
        return ComponentCatalog()
    try:
        return ComponentCatalog.model_validate(_read_json(path))
    except (ValueError, ValidationError) as e:
        raise ValueError(f"Cannot update {path}: {e}") from e


def load_component_file(path: PathLike) -> ComponentCatalog:
    try:
        return ComponentCatalog.model_validate(_read_json(Path(path)))
    except (OSError, ValueError, ValidationError) as e:
        logger.warning(f"Failed to load components from {path}: {e}")
        return ComponentCatalog()


def load_components(root: PathLike) -> ComponentCatalog:
    return load_component_file(Path(root) / COMPONENTS_FILE)


def load_variable_mapping(root: PathLike) -> Dict[str, str]:
    path = Path(root) / VARIABLE_MAPPING_FILE
    if not path.exists():
        return {}
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load {VARIABLE_MAPPING_FILE} from {root}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {VARIABLE_MAPPING_FILE} in {root}: expected an object")
        return {}
    return {str(k): str(v) for k, v in data.items()}


def load_design_system(root: PathLike) -> DesignSystem:
    root = Path(root)
    system = DesignSystem(
        root=root,
        tokens=load_tokens(root),
        components=load_components(root),
        variable_bindings=load_variable_mapping(root),
    )
    tokens = system.tokens
    logger.info(
        f"Loaded design system from {root}: {len(tokens.spacing)} spacing, {len(tokens.colors)} color, "
        f"{len(tokens.typography)} typography, {len(tokens.corner_radius)} radius tokens, "
        f"{len(system.components.components)} components"
    )
    return system


def save_components(path: PathLike, catalog: ComponentCatalog) -> None:
    """Write components.json, keeping the original camelCase keys."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = catalog.model_dump(by_alias=True, exclude_none=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
        f.write('\n')
