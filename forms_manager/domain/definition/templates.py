"""Blank form definitions used when a form is first created."""

from typing import Any, Dict

from forms_manager.domain.definition.constants import (
    SUMMARY_PAGE_ID,
    ComponentType,
    ControllerType,
    Engine,
    SchemaVersion,
)


def empty_v1() -> Dict[str, Any]:
    return {
        "name": "",
        "engine": Engine.V1.value,
        "schema": SchemaVersion.V1.value,
        "startPage": "/page-one",
        "pages": [
            {
                "path": "/page-one",
                "title": "Page one",
                "section": "section",
                "next": [{"path": "/summary"}],
                "components": [
                    {
                        "type": ComponentType.TEXT_FIELD.value,
                        "name": "textField",
                        "title": "This is your first field",
                        "hint": "Help text",
                        "options": {},
                        "schema": {},
                    }
                ],
            },
            {
                "path": "/summary",
                "title": "Check your answers before sending your form",
                "controller": ControllerType.SUMMARY.value,
            },
        ],
        "conditions": [],
        "sections": [
            {
                "name": "section",
                "title": "Section title",
                "hideTitle": False,
            }
        ],
        "lists": [],
    }


def empty_v2() -> Dict[str, Any]:
    return {
        "name": "",
        "engine": Engine.V2.value,
        "schema": SchemaVersion.V2.value,
        "startPage": "/summary",
        "pages": [
            {
                "id": SUMMARY_PAGE_ID,
                "title": "Check your answers before sending your form",
                "path": "/summary",
                "controller": ControllerType.SUMMARY.value,
                "components": [],
            }
        ],
        "conditions": [],
        "sections": [],
        "lists": [],
    }
