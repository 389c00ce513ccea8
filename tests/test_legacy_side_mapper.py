"""Tests for legacy client/server side derivation."""

import pytest

from search_indexer.schemas.search import LegacySideType
from search_indexer.services.legacy_side_mapper import (
    convert_side_types,
    get_legacy_project_type,
)

REQUIRED = LegacySideType.REQUIRED
OPTIONAL = LegacySideType.OPTIONAL
UNSUPPORTED = LegacySideType.UNSUPPORTED
UNKNOWN = LegacySideType.UNKNOWN


class TestLegacyProjectType:
    """Tests for the v2 project type label."""

    def test_first_project_type(self):
        assert get_legacy_project_type(["mod", "modpack"]) == ("mod", "mod")

    @pytest.mark.parametrize("project_type", ["datapack", "plugin"])
    def test_reported_as_mod(self, project_type):
        assert get_legacy_project_type([project_type]) == ("mod", project_type)

    def test_no_project_types(self):
        assert get_legacy_project_type([]) == ("project", "project")


class TestConvertSideTypes:
    """Tests for the environment field mapping."""

    @pytest.mark.parametrize(
        "fields, expected",
        [
            ({"singleplayer": True}, (REQUIRED, REQUIRED)),
            ({"client_only": True}, (REQUIRED, UNSUPPORTED)),
            ({"singleplayer": True, "client_only": True}, (REQUIRED, UNSUPPORTED)),
            ({"server_only": True}, (UNSUPPORTED, REQUIRED)),
            ({"singleplayer": True, "server_only": True}, (UNSUPPORTED, REQUIRED)),
            ({"client_only": True, "server_only": True}, (OPTIONAL, OPTIONAL)),
            (
                {"singleplayer": True, "client_only": True, "server_only": True},
                (OPTIONAL, OPTIONAL),
            ),
            ({}, (UNKNOWN, UNKNOWN)),
        ],
    )
    def test_environment_table(self, fields, expected):
        assert convert_side_types(fields) == expected

    def test_client_and_server_stands_in_for_singleplayer(self):
        assert convert_side_types({"client_and_server": True}) == (REQUIRED, REQUIRED)

    def test_singleplayer_overrides_client_and_server(self):
        fields = {"singleplayer": False, "client_and_server": True}

        assert convert_side_types(fields) == (UNKNOWN, UNKNOWN)

    def test_non_boolean_values_ignored(self):
        assert convert_side_types({"client_only": 1, "server_only": "yes"}) == (UNKNOWN, UNKNOWN)

    @pytest.mark.parametrize(
        "project_type, expected",
        [
            ("plugin", (UNSUPPORTED, REQUIRED)),
            ("datapack", (OPTIONAL, REQUIRED)),
            ("shader", (REQUIRED, UNSUPPORTED)),
            ("resourcepack", (REQUIRED, UNSUPPORTED)),
        ],
    )
    def test_fixed_project_types_ignore_fields(self, project_type, expected):
        assert convert_side_types({"client_only": True}, project_type) == expected
