"""Set a user's permissions on a database, asking for anything not supplied."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from couchchat.activity import emit_bot_activity
from couchchat.cloudant.errors import CloudantError
from couchchat.commands.base import CommandContext, log_cloudant_error
from couchchat.commands.entities import PARAM_DATABASENAME
from couchchat.commands.router import Command, CommandRouter
from couchchat.dialog.permissions import Aborted, PermissionCollector
from couchchat.messages import t

logger = logging.getLogger(__name__)

# cloudant set permissions [to|on] [database] [for] [user]
SET_PERMISSIONS_ID = "cloudant.setpermissions"
SET_PERMISSIONS = re.compile(
    r"cloudant set permissions(\sto|\son)?\s(\S+)(\sfor)?(\s(.*))?", re.IGNORECASE
)
PARAM_USERNAME = "username"


def describe_grants(grants: Sequence[str]) -> str:
    return ", ".join(t(f"setpermissions.{grant}") for grant in grants)


async def set_permissions(ctx: CommandContext, database: str, user: str | None) -> None:
    collector = PermissionCollector(ctx.prompt_channel(), database, exit_word=ctx.exit_word)

    async def current_grants(resolved_user: str) -> list[str]:
        logger.info(
            f"Getting permissions for user {resolved_user} on Cloudant database {database}."
        )
        return await ctx.client.get_permissions(database, resolved_user)

    try:
        outcome = await collector.collect(user, current_grants)
    except CloudantError as e:
        log_cloudant_error(
            logger,
            e,
            f"An error has occurred getting permissions for user {collector.user} "
            f"on Cloudant database {database}.",
        )
        await ctx.reply(t("setpermissions.get.error", collector.user, database, e))
        return

    if isinstance(outcome, Aborted):
        if outcome.before_user:
            logger.info("Set permissions cancelled before a user was chosen.")
            await ctx.reply(t("setpermissions.nouser"))
        else:
            logger.info(f"Set permissions for user {outcome.user} cancelled.")
            await ctx.reply(t("setpermissions.nopermissions"))
        return

    if outcome.grants:
        await ctx.reply(
            t("setpermissions", outcome.user, describe_grants(outcome.grants), database)
        )
    else:
        await ctx.reply(t("setpermissions.none", outcome.user, database))

    logger.info(
        f"Setting permissions {list(outcome.grants)} for user {outcome.user} "
        f"on Cloudant database {database}."
    )
    try:
        await ctx.client.set_permissions(database, outcome.user, outcome.grants)
    except CloudantError as e:
        log_cloudant_error(
            logger,
            e,
            f"An error has occurred setting permissions for user {outcome.user} "
            f"on Cloudant database {database}.",
        )
        await ctx.reply(t("setpermissions.set.error", outcome.user, database, e))
        return

    await ctx.reply(t("setpermissions.success", outcome.user, database))
    emit_bot_activity(ctx.message, "activity.cloudant.setpermissions")


def register(router: CommandRouter) -> None:
    """Register the set permissions command."""

    async def on_set(ctx: CommandContext, match: re.Match[str]) -> None:
        user = match.group(5)
        await set_permissions(ctx, match.group(2).strip(), user.strip() if user else None)

    async def on_set_intent(ctx: CommandContext, parameters: dict[str, Any]) -> None:
        database = parameters.get(PARAM_DATABASENAME)
        if not database:
            logger.error(
                f"Error extracting {PARAM_DATABASENAME} from text [{ctx.message.text}]."
            )
            await ctx.reply(t("parse.problem.setpermissions.databasename"))
            return
        # A missing user is asked for in the dialog.
        user = parameters.get(PARAM_USERNAME)
        await set_permissions(ctx, str(database), str(user) if user else None)

    router.register(
        Command(
            SET_PERMISSIONS_ID,
            SET_PERMISSIONS,
            on_set,
            on_set_intent,
            "cloudant set permissions [database] for [user] - "
            f"{t('help.setpermissions')}",
        )
    )
