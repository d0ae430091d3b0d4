"""View commands: list the views of a database and run one."""

from __future__ import annotations

import logging
import re
from typing import Any

from couchchat.activity import emit_bot_activity
from couchchat.cloudant.errors import CloudantError
from couchchat.commands.base import CommandContext, log_cloudant_error
from couchchat.commands.entities import PARAM_DATABASENAME, PARAM_VIEWNAME
from couchchat.commands.router import Command, CommandRouter
from couchchat.dialog.types import Cancelled
from couchchat.dialog.views import ViewSelector
from couchchat.formatting import Palette, pretty_json
from couchchat.messages import t
from couchchat.providers.base import Attachment

logger = logging.getLogger(__name__)

# cloudant list|show views [database]
LIST_VIEWS_ID = "cloudant.listviews"
LIST_VIEWS = re.compile(r"cloudant (list|show)\sviews\s(.+)", re.IGNORECASE)

# cloudant run|execute view [database] [design:view]
RUN_VIEW_ID = "cloudant.runview"
RUN_VIEW = re.compile(r"cloudant (run|execute) view\s(\S+)(\s+(\S+))?", re.IGNORECASE)


async def list_views(ctx: CommandContext, database: str) -> None:
    logger.info(f"Listing views for Cloudant database {database}.")
    await ctx.reply(t("listviews", database))

    try:
        views = await ctx.client.list_views(database)
    except CloudantError as e:
        log_cloudant_error(
            logger, e, f"An error has occurred listing views for Cloudant database {database}."
        )
        await ctx.reply(t("listviews.error", database, e))
        return

    names = sorted(view.qualified_name for view in views)
    await ctx.send_attachments(
        [
            Attachment(
                title=t("listviews.title"),
                color=Palette.NORMAL,
                text="\n".join(names),
            )
        ]
    )
    emit_bot_activity(ctx.message, "activity.cloudant.listviews")


async def run_view(ctx: CommandContext, database: str, view_text: str | None) -> None:
    selector = ViewSelector(ctx.prompt_channel(), database, exit_word=ctx.exit_word)

    reference = await selector.resolve_view(view_text)
    if isinstance(reference, Cancelled):
        logger.info(f"Run view on Cloudant database {database} cancelled at the view prompt.")
        await ctx.reply(t("runview.noview"))
        return

    keys = await selector.resolve_keys(reference.qualified_name)
    if isinstance(keys, Cancelled):
        logger.info(f"Run view {reference.qualified_name} cancelled at the keys prompt.")
        await ctx.reply(t("runview.noview"))
        return

    logger.info(
        f"Running view {reference.qualified_name} on Cloudant database {database} "
        f"with keys {keys}."
    )
    await ctx.reply(t("runview", reference.qualified_name, database))

    try:
        rows = await ctx.client.run_view(
            database, reference.design, reference.view, keys=keys or None
        )
    except CloudantError as e:
        log_cloudant_error(
            logger,
            e,
            f"An error has occurred running view {reference.qualified_name} "
            f"on Cloudant database {database}.",
        )
        await ctx.reply(t("runview.error", reference.qualified_name, database, e))
        return

    attachments = [
        Attachment(
            title=t("runview.title"),
            color=Palette.NORMAL,
            text=f"{reference.qualified_name} ({len(rows)})",
        )
    ]
    attachments.extend(
        Attachment(color=Palette.NORMAL, text=pretty_json(row.to_dict())) for row in rows
    )
    await ctx.send_attachments(attachments)
    emit_bot_activity(ctx.message, "activity.cloudant.runview")


def register(router: CommandRouter) -> None:
    """Register the list views and run view commands."""

    async def on_list(ctx: CommandContext, match: re.Match[str]) -> None:
        await list_views(ctx, match.group(2).strip())

    async def on_list_intent(ctx: CommandContext, parameters: dict[str, Any]) -> None:
        database = parameters.get(PARAM_DATABASENAME)
        if not database:
            logger.error(
                f"Error extracting {PARAM_DATABASENAME} from text [{ctx.message.text}]."
            )
            await ctx.reply(t("parse.problem.listviews"))
            return
        await list_views(ctx, str(database))

    async def on_run(ctx: CommandContext, match: re.Match[str]) -> None:
        await run_view(ctx, match.group(2).strip(), match.group(4))

    async def on_run_intent(ctx: CommandContext, parameters: dict[str, Any]) -> None:
        database = parameters.get(PARAM_DATABASENAME)
        if not database:
            logger.error(
                f"Error extracting {PARAM_DATABASENAME} from text [{ctx.message.text}]."
            )
            await ctx.reply(t("parse.problem.runview.databasename"))
            return
        # An absent or malformed view name is asked for in the dialog.
        view = parameters.get(PARAM_VIEWNAME)
        await run_view(ctx, str(database), str(view) if view else None)

    router.register(
        Command(
            LIST_VIEWS_ID,
            LIST_VIEWS,
            on_list,
            on_list_intent,
            f"cloudant list|show views [database] - {t('help.listviews')}",
        )
    )
    router.register(
        Command(
            RUN_VIEW_ID,
            RUN_VIEW,
            on_run,
            on_run_intent,
            f"cloudant run|execute view [database] [design:view] - {t('help.runview')}",
        )
    )
