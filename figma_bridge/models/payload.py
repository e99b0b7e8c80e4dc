"""Export payloads sent by the Figma plugin.

The plugin sends an opaque design tree. The bridge stores it exactly as
received and only checks for the presence of a few keys. ``ComponentPayload``
is a read-only view used to derive debug metadata; nothing it parses is
written back to disk.
"""

import logging
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from figma_bridge.tokens import is_safe_token

logger = logging.getLogger(__name__)

# Keys compared against componentId when picking the exported component
MATCH_KEYS = ("id", "component", "cleanName")


class ExportType(str, Enum):
    """Kinds of export accepted on POST /export."""

    FIGMENT = "figment"
    REAL_TIME = "real-time"


class SemanticHints(BaseModel):
    """Semantic flags the plugin derives for a node."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    role: Optional[Any] = None
    has_hover_state: Optional[bool] = Field(None, alias="hasHoverState")
    has_click_handler: Optional[bool] = Field(None, alias="hasClickHandler")
    is_interactive: Optional[bool] = Field(None, alias="isInteractive")
    has_interactions: Optional[bool] = Field(None, alias="hasInteractions")
    is_container: Optional[bool] = Field(None, alias="isContainer")
    is_reusable: Optional[bool] = Field(None, alias="isReusable")
    is_responsive: Optional[bool] = Field(None, alias="isResponsive")


class ComponentPayload(BaseModel):
    """Metadata view of one exported component.

    Identity and name members accept any JSON value. Use ``from_raw`` to
    build one: members with an unexpected shape are dropped instead of
    failing the export.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[Any] = None
    component_id: Optional[Any] = Field(None, alias="componentId")
    token_id: Optional[Any] = Field(None, alias="tokenId")
    key: Optional[Any] = None
    component: Optional[Any] = None
    name: Optional[Any] = None
    clean_name: Optional[Any] = Field(None, alias="cleanName")
    suggested_component_type: Optional[Any] = Field(None, alias="suggestedComponentType")

    # Geometry
    size: Optional[Any] = None
    position: Optional[Any] = None
    precise_position: Optional[Any] = Field(None, alias="precisePosition")
    layout: Optional[Any] = None

    # Tree and visuals
    children: Optional[List[Any]] = None
    enhanced_visuals: Optional[Dict[str, Any]] = Field(None, alias="enhancedVisuals")

    # Figma component model
    is_main_component: Optional[bool] = Field(None, alias="isMainComponent")
    is_instance: Optional[bool] = Field(None, alias="isInstance")
    variant_properties: Optional[Dict[str, Any]] = Field(None, alias="variantProperties")
    component_properties: Optional[Dict[str, Any]] = Field(None, alias="componentProperties")
    main_component: Optional[Any] = Field(None, alias="mainComponent")

    semantic: Optional[SemanticHints] = None

    # Design system
    design_tokens: Optional[Dict[str, Any]] = Field(None, alias="designTokens")
    design_context: Optional[Dict[str, Any]] = Field(None, alias="designContext")
    linting: Optional[List[Any]] = None
    linting_warnings: Optional[List[Any]] = Field(None, alias="lintingWarnings")
    non_token_values: Optional[List[Any]] = Field(None, alias="nonTokenValues")

    @classmethod
    def from_raw(cls, data: Any) -> "ComponentPayload":
        """Parse a stored component, dropping members that don't fit."""
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            bad_keys = {err["loc"][0] for err in e.errors() if err.get("loc")}
            logger.warning(f"Ignoring malformed component members: {', '.join(sorted(map(str, bad_keys)))}")
            return cls.model_validate({k: v for k, v in data.items() if k not in bad_keys})

    @property
    def display_name(self) -> Any:
        return self.component or self.name or "Unknown"


def component_matches(component: Dict[str, Any], component_id: str) -> bool:
    """Check whether a raw component is the one named by component_id."""
    for key in MATCH_KEYS:
        value = component.get(key)
        if value is not None and str(value) == component_id:
            return True
    return False


def select_component(figment: Dict[str, Any], component_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Pick the exported component from a raw figment.

    Returns the first component matching component_id, else the first
    component, else None when the figment has no object in ``components``.
    Entries that are not objects are skipped.
    """
    components = figment.get("components")
    if not isinstance(components, list):
        return None
    candidates = [c for c in components if isinstance(c, dict)]
    if not candidates:
        return None
    if component_id:
        for comp in candidates:
            if component_matches(comp, component_id):
                return comp
    return candidates[0]


class ExportRequest(BaseModel):
    """Body of POST /export. The figment itself is kept as raw JSON."""

    model_config = ConfigDict(populate_by_name=True)

    type: ExportType
    figment: Dict[str, Any]
    token: Optional[str] = None
    component_id: Optional[str] = Field(None, alias="componentId")

    @field_validator("component_id", mode="before")
    @classmethod
    def coerce_component_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not is_safe_token(v):
            raise ValueError(
                "token may only contain letters, digits, '_', '-', '.', ':' "
                "and must be at most 200 characters"
            )
        return v
