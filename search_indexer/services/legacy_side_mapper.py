"""
Legacy client/server side derivation.

The v2 search API exposed ``client_side`` and ``server_side`` flags per
project. Current versions instead carry environment loader fields
(``singleplayer``, ``client_and_server``, ``client_only``,
``server_only``). This module maps the latter onto the former so that
v2-style search filters keep working.

Some project types have a fixed answer regardless of fields:

    plugin        -> (unsupported, required)
    datapack      -> (optional, required)
    shader        -> (required, unsupported)
    resourcepack  -> (required, unsupported)
"""

from typing import Any, Mapping, Optional

from ..schemas.search import LegacySideType

DEFAULT_PROJECT_TYPE = "project"

# Project types that did not exist in v2 and were reported as mods
V2_MOD_ALIASES = {"datapack", "plugin"}

FIXED_SIDE_TYPES: dict[str, tuple[LegacySideType, LegacySideType]] = {
    "plugin": (LegacySideType.UNSUPPORTED, LegacySideType.REQUIRED),
    "datapack": (LegacySideType.OPTIONAL, LegacySideType.REQUIRED),
    "shader": (LegacySideType.REQUIRED, LegacySideType.UNSUPPORTED),
    "resourcepack": (LegacySideType.REQUIRED, LegacySideType.UNSUPPORTED),
}

# (singleplayer, client_only, server_only) -> (client_side, server_side)
ENVIRONMENT_SIDE_TYPES: dict[tuple[bool, bool, bool], tuple[LegacySideType, LegacySideType]] = {
    (True, False, False): (LegacySideType.REQUIRED, LegacySideType.REQUIRED),
    (False, True, False): (LegacySideType.REQUIRED, LegacySideType.UNSUPPORTED),
    (True, True, False): (LegacySideType.REQUIRED, LegacySideType.UNSUPPORTED),
    (False, False, True): (LegacySideType.UNSUPPORTED, LegacySideType.REQUIRED),
    (True, False, True): (LegacySideType.UNSUPPORTED, LegacySideType.REQUIRED),
    (True, True, True): (LegacySideType.OPTIONAL, LegacySideType.OPTIONAL),
    (False, True, True): (LegacySideType.OPTIONAL, LegacySideType.OPTIONAL),
    (False, False, False): (LegacySideType.UNKNOWN, LegacySideType.UNKNOWN),
}


def get_legacy_project_type(project_types: list[str]) -> tuple[str, str]:
    """
    Derive the v2 project type label from a version's project types.

    Returns:
        Tuple of (v2 project type, original project type). The original is
        the first project type, or "project" when there is none; the v2
        type reports datapacks and plugins as "mod".
    """
    original = project_types[0] if project_types else DEFAULT_PROJECT_TYPE
    legacy = "mod" if original in V2_MOD_ALIASES else original
    return legacy, original


def _as_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def convert_side_types(
    raw_fields: Mapping[str, Any],
    project_type: Optional[str] = None,
) -> tuple[LegacySideType, LegacySideType]:
    """
    Map environment loader fields to legacy (client_side, server_side).

    Args:
        raw_fields: field name -> serialized value, as produced by
            reconcile_loader_fields
        project_type: The original (not v2-aliased) project type, if known

    Returns:
        Tuple of (client_side, server_side)
    """
    if project_type in FIXED_SIDE_TYPES:
        return FIXED_SIDE_TYPES[project_type]

    client_and_server = _as_bool(raw_fields.get("client_and_server"))
    singleplayer = _as_bool(raw_fields.get("singleplayer"))
    if singleplayer is None:
        singleplayer = client_and_server if client_and_server is not None else False
    client_only = _as_bool(raw_fields.get("client_only")) or False
    server_only = _as_bool(raw_fields.get("server_only")) or False

    return ENVIRONMENT_SIDE_TYPES[(singleplayer, client_only, server_only)]
