"""Modal view definitions used by the demo handlers.

Views are plain JSON-compatible dicts in the platform's block format; the
router treats them as opaque.
"""

from __future__ import annotations

from typing import Any

MODAL_CALLBACK_ID = "modal_shortcut_view"
CHANGE_MESSAGE_ACTION_ID = "change_modal_message"
MODAL_TITLE = "Sample Modal Title"


def _modal(blocks: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "type": "modal",
        "callback_id": MODAL_CALLBACK_ID,
        "title": {"type": "plain_text", "text": MODAL_TITLE},
        "blocks": blocks,
        "submit": {"type": "plain_text", "text": "Submit"},
    }


def _section(markdown: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": markdown}}


def sample_modal() -> dict[str, Any]:
    """The modal opened by the ``modal_shortcut`` shortcut."""
    return _modal(
        [
            _section(
                "This modal was triggered by a shortcut. Clicking the button"
                " below will update the view."
            ),
            {"type": "divider"},
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {"type": "plain_text", "text": "Click to change modal's text!"},
                        "value": "click_me",
                        "action_id": CHANGE_MESSAGE_ACTION_ID,
                    }
                ],
            },
        ]
    )


def updated_modal() -> dict[str, Any]:
    """The modal contents after the button is clicked."""
    return _modal([_section("Annnnd there we go -- updated! :upside_down_face:")])
