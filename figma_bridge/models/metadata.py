"""Derived metadata for debug records.

Everything here is computed from key presence on the raw payload;
members with an unexpected shape are left out of the summary.
"""

from typing import Dict, Any

from figma_bridge.models.payload import ComponentPayload, SemanticHints


def derive_metadata(data: Dict[str, Any]) -> Dict[str, Any]:
    """Summarise a raw component for its debug record."""
    component = ComponentPayload.from_raw(data)
    semantic = component.semantic or SemanticHints()

    return {
        "hasEnhancedVisuals": component.enhanced_visuals is not None,
        "hasChildren": bool(component.children),
        "componentName": component.display_name,
        "componentType": component.suggested_component_type or "component",
        "dataKeys": list(data.keys()) if isinstance(data, dict) else [],
        "enhancedVisualsKeys": list(component.enhanced_visuals.keys()) if component.enhanced_visuals else [],
        "childrenCount": len(component.children) if component.children else 0,
        "size": component.size,
        "position": component.position,
        "precisePosition": component.precise_position,
        "layout": component.layout,
        "figmaMetadata": {
            "componentId": component.id or component.component_id,
            "componentKey": component.key,
            "isMainComponent": bool(component.is_main_component),
            "isInstance": bool(component.is_instance),
            "variantProperties": component.variant_properties or {},
            "componentProperties": component.component_properties or {},
            "mainComponent": component.main_component,
        },
        "interactionStates": {
            "hasHoverState": bool(semantic.has_hover_state),
            "hasClickHandler": bool(semantic.has_click_handler),
            "isInteractive": bool(semantic.is_interactive),
            "hasInteractions": bool(semantic.has_interactions),
        },
        "accessibility": {
            "role": semantic.role or "div",
            "isContainer": bool(semantic.is_container),
            "isReusable": bool(semantic.is_reusable),
            "isResponsive": bool(semantic.is_responsive),
        },
        "designSystem": {
            "hasDesignTokens": component.design_tokens is not None,
            "designTokensKeys": list(component.design_tokens.keys()) if component.design_tokens else [],
            "hasLinting": bool(component.linting),
            "lintingWarnings": len(component.linting_warnings) if component.linting_warnings else 0,
            "nonTokenValues": component.non_token_values or [],
        },
    }


def derive_figment_context(data: Dict[str, Any]) -> Dict[str, Any]:
    """Design-system context flags stored beside the metadata."""
    component = ComponentPayload.from_raw(data)
    return {
        "hasDesignSystem": component.design_tokens is not None,
        "designTokensKeys": list(component.design_tokens.keys()) if component.design_tokens else [],
        "hasContext": component.design_context is not None,
        "contextKeys": list(component.design_context.keys()) if component.design_context else [],
    }
