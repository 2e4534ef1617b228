"""Shared OpenAPI documents for the generator tests."""

from __future__ import annotations

import copy
from typing import Any

import pytest


# ---------------------------------------------------------------------------
# Swagger 2 document: one schema, one operation
# ---------------------------------------------------------------------------

_PLAYER_SPEC: dict[str, Any] = {
    "swagger": "2.0",
    "definitions": {
        "Player": {
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string"},
            },
            "required": ["id"],
        },
    },
    "paths": {
        "/players/{id}": {
            "get": {
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "type": "string"},
                ],
                "responses": {
                    "200": {
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/definitions/Player"},
                            }
                        }
                    }
                },
            }
        }
    },
}


# ---------------------------------------------------------------------------
# OpenAPI 3 document exercising unions, bodies and query strings
# ---------------------------------------------------------------------------

_LEAGUE_SPEC: dict[str, Any] = {
    "openapi": "3.0.0",
    "info": {"title": "League API", "version": "1.0"},
    "components": {
        "schemas": {
            "Team": {
                "type": "object",
                "description": "A team in the league",
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                    "players": {"type": "array", "items": {"$ref": "#/components/schemas/Player"}},
                },
                "required": ["id", "name"],
            },
            "Player": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "position": {"type": "string", "enum": ["GK", "DF", "MF", "FW"]},
                },
            },
            "NewTeam": {
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "required": ["name"],
            },
            "Metadata": {"type": "object"},
        },
        "parameters": {
            "Limit": {"name": "limit", "in": "query", "schema": {"type": "integer"}},
        },
    },
    "paths": {
        "/teams": {
            "get": {
                "operationId": "list_teams",
                "summary": "List every Team",
                "parameters": [
                    {"name": "search", "in": "query", "required": True, "schema": {"type": "string"}},
                    {"name": "tags[]", "in": "query", "schema": {"type": "array", "items": {"type": "string"}}},
                    {"$ref": "#/components/parameters/Limit"},
                ],
                "responses": {
                    "200": {
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": {"$ref": "#/components/schemas/Team"}},
                            }
                        }
                    }
                },
            },
            "post": {
                "operationId": "createTeam",
                "requestBody": {
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/NewTeam"}},
                    }
                },
                "responses": {
                    "201": {
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Team"}},
                        }
                    }
                },
            },
        },
        "/teams/{team_id}": {
            "parameters": [
                {"name": "team_id", "in": "path", "required": True, "schema": {"type": "integer"}},
            ],
            "DELETE": {"responses": {"204": {"description": "Deleted"}}},
            "head": {"responses": {"200": {"description": "OK"}}},
        },
        "/search": {
            "get": {
                "operationId": "search",
                "responses": {
                    "200": {
                        "content": {
                            "application/json": {
                                "schema": {
                                    "oneOf": [
                                        {"type": "object", "properties": {"kind": {"type": "string"}}},
                                        {"type": "object", "properties": {"count": {"type": "integer"}}},
                                    ]
                                }
                            }
                        }
                    }
                },
            }
        },
    },
}


@pytest.fixture
def player_spec() -> dict[str, Any]:
    """Minimal Swagger 2 document with a Player schema and GET /players/{id}."""
    return copy.deepcopy(_PLAYER_SPEC)


@pytest.fixture
def league_spec() -> dict[str, Any]:
    """OpenAPI 3 document with refs, bodies, query params and a oneOf response."""
    return copy.deepcopy(_LEAGUE_SPEC)
