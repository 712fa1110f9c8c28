"""Tests for the route helper emitter."""

import json

import yaml

from resourceful.emitter import emit_helpers, emit_json, emit_yaml
from resourceful.route_helpers import RouteSet


def _sample_routes():
    routes = RouteSet(default_url_options={"host": "example.com"})
    with routes.resources("people", only=["show"]):
        routes.resources("hats", only=["index", "show"])
    return routes


class TestEmitter:
    def test_emits_every_route_name(self):
        document = emit_helpers(_sample_routes())
        assert list(document["helpers"]) == ["person", "person_hats", "person_hat"]

    def test_route_entry(self):
        entry = emit_helpers(_sample_routes())["helpers"]["person_hat"]
        assert entry["path"] == "/people/:person_id/hats/:id"
        assert entry["helpers"] == ["person_hat_path", "person_hat_url"]
        assert entry["segments"] == ["person_id", "id"]

    def test_default_url_options(self):
        document = emit_helpers(_sample_routes())
        assert document["default_url_options"] == {"host": "example.com"}
        assert "default_url_options" not in emit_helpers(RouteSet())

    def test_yaml_output(self):
        parsed = yaml.safe_load(emit_yaml(emit_helpers(_sample_routes())))
        assert parsed["helpers"]["person_hats"]["path"] == "/people/:person_id/hats"

    def test_json_output(self):
        parsed = json.loads(emit_json(emit_helpers(_sample_routes())))
        assert parsed["helpers"]["person"]["path"] == "/people/:id"
