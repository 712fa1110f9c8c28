"""Serialize the named route helpers of a RouteSet to YAML or JSON."""

from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from .route_helpers import RouteSet


def emit_helpers(route_set: RouteSet) -> Dict[str, Any]:
    """Build a plain dict of every route name, its helpers and its path template."""
    helpers: Dict[str, Any] = {}
    for name, template in route_set.routes:
        helper = route_set.helpers[f"{name}_path"]
        helpers[name] = {
            "path": template,
            "helpers": [f"{name}_path", f"{name}_url"],
            "segments": list(helper.segments),
        }
    document: Dict[str, Any] = {"helpers": helpers}
    if route_set.default_url_options:
        document["default_url_options"] = dict(route_set.default_url_options)
    return document


def emit_yaml(document: Dict[str, Any]) -> str:
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)


def emit_json(document: Dict[str, Any]) -> str:
    return json.dumps(document, indent=2) + "\n"
