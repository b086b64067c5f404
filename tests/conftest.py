"""Shared fixtures: persisted documents in every schema version."""

from __future__ import annotations

import copy
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

V01_PAYLOAD: dict[str, Any] = {
    "type": "fba",
    "version": "0.1",
    "title": "legacy analysis",
    "fishbone": [
        [
            "brakes squeal",
            [
                [
                    "mechanics",
                    [
                        {
                            "name": "worn pads",
                            "props": {"instructions": "measure pad thickness", "comments": "n/a"},
                        },
                        {
                            "type": "nested",
                            "title": "caliper",
                            "relPath": "../caliper.fba",
                            "props": {"comments": "nested own comment"},
                            "data": [
                                [
                                    "caliper sticks",
                                    [
                                        [
                                            "hydraulics",
                                            [
                                                {
                                                    "name": "air in line",
                                                    "props": {
                                                        "backgroundDescription": "deep text"
                                                    },
                                                }
                                            ],
                                        ]
                                    ],
                                ]
                            ],
                        },
                    ],
                ],
                ["environment", ["plain text cause"]],
            ],
        ]
    ],
    "attributes": [{"vehicle": {"fbUid": "v1"}}],
    "owner": "qa-team",
}

V02_PAYLOAD: dict[str, Any] = {
    "type": "fba",
    "version": "0.2",
    "title": "v02 analysis",
    "fishbone": [
        {
            "name": "engine stalls",
            "categories": [
                {
                    "name": "fuel",
                    "rootCauses": [
                        {"name": "empty tank", "props": {"instructions": "check gauge"}},
                        {
                            "name": "already wrapped",
                            "props": {"comments": {"textValue": "keep me"}},
                        },
                    ],
                }
            ],
        }
    ],
    "attributes": [],
}

V03_PAYLOAD: dict[str, Any] = {
    "type": "fba",
    "version": "0.3",
    "title": "current analysis",
    "fishbone": [
        {
            "name": "display flickers",
            "categories": [
                {
                    "name": "hardware",
                    "rootCauses": [
                        {"name": "loose connector", "props": {"label": "connector"}},
                        {"type": "import", "path": "sub.fba"},
                    ],
                },
                {"name": "software", "rootCauses": []},
            ],
        }
    ],
    "attributes": [{"ecu": {"fbUid": "host-ecu"}}, {"lifecycle": None}],
    "reviewers": ["ana", "bo"],
}

SUB_PAYLOAD: dict[str, Any] = {
    "type": "fba",
    "version": "0.3",
    "title": "sub analysis",
    "fishbone": [
        {
            "name": "backlight dims",
            "categories": [{"name": "power", "rootCauses": [{"name": "weak supply"}]}],
        }
    ],
    "attributes": [{"ecu": {"fbUid": "sub-ecu"}}, {"sensor": {"fbUid": "s1"}}],
}


def dump(payload: dict[str, Any]) -> str:
    return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)


@pytest.fixture
def v01_payload() -> dict[str, Any]:
    return copy.deepcopy(V01_PAYLOAD)


@pytest.fixture
def v02_payload() -> dict[str, Any]:
    return copy.deepcopy(V02_PAYLOAD)


@pytest.fixture
def v03_payload() -> dict[str, Any]:
    return copy.deepcopy(V03_PAYLOAD)


@pytest.fixture
def sub_payload() -> dict[str, Any]:
    return copy.deepcopy(SUB_PAYLOAD)


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[[str, dict[str, Any] | str], Path]:
    """Write a payload (or raw text) under ``tmp_path`` and return its path."""

    def _write(name: str, payload: dict[str, Any] | str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = payload if isinstance(payload, str) else dump(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
