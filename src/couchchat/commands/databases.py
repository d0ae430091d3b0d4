"""Database commands: list, info and create."""

from __future__ import annotations

import logging
import re
from typing import Any

from couchchat.activity import emit_bot_activity
from couchchat.cloudant.errors import CloudantError
from couchchat.commands.base import CommandContext, log_cloudant_error
from couchchat.commands.entities import PARAM_DATABASENAME, global_name
from couchchat.commands.router import Command, CommandRouter
from couchchat.formatting import Palette, bytes_to_size
from couchchat.messages import t
from couchchat.providers.base import Attachment, AttachmentField

logger = logging.getLogger(__name__)

# cloudant list|show databases
LIST_DATABASES_ID = "cloudant.listdatabases"
LIST_DATABASES = re.compile(r"cloudant (list|show)\sdatabases$", re.IGNORECASE)

# cloudant info|details database [database]
DATABASE_INFO_ID = "cloudant.databaseinfo"
DATABASE_INFO = re.compile(r"cloudant (info|details)\sdatabase\s(.+)", re.IGNORECASE)

# cloudant create database [database]
CREATE_DATABASE_ID = "cloudant.createdatabase"
CREATE_DATABASE = re.compile(r"cloudant create\sdatabase\s(.+)", re.IGNORECASE)


async def list_databases(ctx: CommandContext) -> None:
    logger.info("Showing all Cloudant database names.")
    await ctx.reply(t("listdatabases"))

    try:
        names = await ctx.client.list_databases()
    except CloudantError as e:
        log_cloudant_error(logger, e, "An error has occurred listing Cloudant database names.")
        await ctx.reply(t("listdatabases.error", e))
        return

    ctx.entities.update_values(global_name(PARAM_DATABASENAME), names)
    await ctx.send_attachments(
        [
            Attachment(
                title=t("listdatabases.title"),
                color=Palette.NORMAL,
                text="\n".join(names),
            )
        ]
    )
    emit_bot_activity(ctx.message, "activity.cloudant.listdatabases")


async def database_info(ctx: CommandContext, database: str) -> None:
    logger.info(f"Showing details for Cloudant database {database}.")
    await ctx.reply(t("databaseinfo", database))

    try:
        info = await ctx.client.get_database_info(database)
    except CloudantError as e:
        log_cloudant_error(
            logger, e, f"An error has occurred retrieving info for Cloudant database {database}."
        )
        await ctx.reply(t("databaseinfo.error", database, e))
        return

    fields = [
        AttachmentField(t("databaseinfo.field.numdocs"), str(info.doc_count)),
        AttachmentField(t("databaseinfo.field.numdeldocs"), str(info.doc_del_count)),
        AttachmentField(t("databaseinfo.field.disksize"), bytes_to_size(info.disk_size)),
        AttachmentField(t("databaseinfo.field.filesize"), bytes_to_size(info.file_size)),
        AttachmentField(t("databaseinfo.field.extsize"), bytes_to_size(info.external_size)),
        AttachmentField(t("databaseinfo.field.actsize"), bytes_to_size(info.active_size)),
        AttachmentField(
            t("databaseinfo.field.compact"),
            t("yes") if info.compact_running else t("no"),
        ),
    ]
    await ctx.send_attachments(
        [Attachment(title=database, color=Palette.NORMAL, fields=fields)]
    )
    emit_bot_activity(ctx.message, "activity.cloudant.databaseinfo")


async def create_database(ctx: CommandContext, database: str) -> None:
    logger.info(f"Creating Cloudant database {database}.")
    await ctx.reply(t("createdatabase", database))

    try:
        await ctx.client.create_database(database)
    except CloudantError as e:
        log_cloudant_error(
            logger, e, f"An error has occurred creating Cloudant database {database}."
        )
        await ctx.reply(t("createdatabase.error", database, e))
        return

    await ctx.reply(t("createdatabase.success", database))
    emit_bot_activity(ctx.message, "activity.cloudant.createdatabase")


async def _required(
    ctx: CommandContext, parameters: dict[str, Any], name: str, problem_key: str
) -> str | None:
    value = parameters.get(name)
    if value:
        return str(value)
    logger.error(f"Error extracting {name} from text [{ctx.message.text}].")
    await ctx.reply(t(problem_key))
    return None


def register(router: CommandRouter) -> None:
    """Register the database commands."""

    async def on_list(ctx: CommandContext, match: re.Match[str]) -> None:
        await list_databases(ctx)

    async def on_list_intent(ctx: CommandContext, parameters: dict[str, Any]) -> None:
        await list_databases(ctx)

    async def on_info(ctx: CommandContext, match: re.Match[str]) -> None:
        await database_info(ctx, match.group(2).strip())

    async def on_info_intent(ctx: CommandContext, parameters: dict[str, Any]) -> None:
        database = await _required(
            ctx, parameters, PARAM_DATABASENAME, "parse.problem.databaseinfo"
        )
        if database:
            await database_info(ctx, database)

    async def on_create(ctx: CommandContext, match: re.Match[str]) -> None:
        await create_database(ctx, match.group(1).strip())

    async def on_create_intent(ctx: CommandContext, parameters: dict[str, Any]) -> None:
        database = await _required(
            ctx, parameters, "newdatabasename", "parse.problem.createdatabase"
        )
        if database:
            await create_database(ctx, database)

    router.register(
        Command(
            LIST_DATABASES_ID,
            LIST_DATABASES,
            on_list,
            on_list_intent,
            f"cloudant list|show databases - {t('help.listdatabases')}",
        )
    )
    router.register(
        Command(
            DATABASE_INFO_ID,
            DATABASE_INFO,
            on_info,
            on_info_intent,
            f"cloudant info|details database [database] - {t('help.infodatabase')}",
        )
    )
    router.register(
        Command(
            CREATE_DATABASE_ID,
            CREATE_DATABASE,
            on_create,
            on_create_intent,
            f"cloudant create database [database] - {t('help.createdatabase')}",
        )
    )
