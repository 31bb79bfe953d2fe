"""Demo handler set — one handler per interaction style the platform offers.

* Commands are slash command invocations the app responds to.
* Messages are matched by literal text or by regular expression.
* Shortcuts are global or message-scoped triggers that can open modals.
* View submissions fire when a modal with a Submit button is submitted.
* Actions are button clicks and menu selects.
* Platform events are anything else the app subscribes to.
"""

from __future__ import annotations

import logging
import re

from starterbot.app.views import (
    CHANGE_MESSAGE_ACTION_ID,
    MODAL_CALLBACK_ID,
    sample_modal,
    updated_modal,
)
from starterbot.core.context import HandlerContext
from starterbot.core.router import Router

logger = logging.getLogger(__name__)

GREETING = "Why, hello there! :simple_smile:"
FAREWELL_PATTERN = re.compile(r"^(bye|goodbye|cya).*")
SUBMITTED_TEXT = "The modal was submitted and now you're getting this message!"


def greet(context: HandlerContext) -> None:
    context.acknowledge()
    context.reply(GREETING)


def say_hello(context: HandlerContext) -> None:
    context.reply(f"Hello, <@{context.author_id}>!")


def say_goodbye(context: HandlerContext) -> None:
    context.reply(f"See you later, <@{context.author_id}>!")


def open_sample_modal(context: HandlerContext) -> None:
    context.acknowledge()
    context.client.open_view(context.trigger_id, sample_modal())


def share_message_link(context: HandlerContext) -> None:
    """DM the invoker a permalink to the message the shortcut was used on."""
    context.acknowledge()
    if not context.channel_id or not context.message_ts:
        raise ValueError("message_shortcut invoked without a source message")

    permalink = context.client.get_permalink(context.channel_id, context.message_ts)
    channel = context.channel_name or context.channel_id
    context.client.post_message(
        context.invoker_id,
        f"You just triggered the message shortcut on the following message in the {channel}: {permalink}",
    )


def confirm_submission(context: HandlerContext) -> None:
    context.acknowledge()
    context.client.post_message(context.submitter_id, SUBMITTED_TEXT)


def change_modal_message(context: HandlerContext) -> None:
    context.acknowledge()
    if not context.view_id:
        raise ValueError(f"{CHANGE_MESSAGE_ACTION_ID} clicked outside of a view")
    context.client.update_view(context.view_id, updated_modal())


def app_home_opened(context: HandlerContext) -> None:
    logger.info("Your application's App Home tab has been opened!")


def register_handlers(router: Router) -> Router:
    """Register the demo handler set on *router* and return it."""
    router.register_command("/greet", greet)

    router.register_message("hello", say_hello)
    router.register_message(FAREWELL_PATTERN, say_goodbye)

    router.register_shortcut("modal_shortcut", open_sample_modal)
    router.register_shortcut("message_shortcut", share_message_link)

    router.register_view_submission(MODAL_CALLBACK_ID, confirm_submission)

    router.register_action(CHANGE_MESSAGE_ACTION_ID, change_modal_message)

    router.register_event("app_home_opened", app_home_opened)
    return router
