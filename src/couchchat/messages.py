"""User-facing message catalog.

Messages are looked up by key and formatted with positional arguments.
Unknown keys render as the key itself so a missing entry is visible in chat
rather than fatal.
"""

from typing import Any

MESSAGES: dict[str, str] = {
    # Shared
    "yes": "Yes",
    "no": "No",
    "dialog.busy": "Please answer the current question first, or type `{0}` to quit it.",
    # Help
    "help.listdatabases": "Show all Cloudant databases.",
    "help.infodatabase": "Show details about a Cloudant database.",
    "help.createdatabase": "Create a Cloudant database.",
    "help.setpermissions": "Set a user's permissions on a Cloudant database.",
    "help.listviews": "Show the views defined for a Cloudant database.",
    "help.runview": "Run a view against a Cloudant database.",
    # Intent parameter problems
    "parse.problem.databaseinfo": (
        "I'm having problems understanding the name of the database you want "
        "details for. Try `cloudant info database [database]`."
    ),
    "parse.problem.createdatabase": (
        "I'm having problems understanding the name of the database to create. "
        "Try `cloudant create database [database]`."
    ),
    "parse.problem.setpermissions.databasename": (
        "I'm having problems understanding the name of the database to set "
        "permissions on. Try `cloudant set permissions [database] for [user]`."
    ),
    "parse.problem.setpermissions.username": (
        "I'm having problems understanding the name of the user to set "
        "permissions for. Try `cloudant set permissions [database] for [user]`."
    ),
    "parse.problem.listviews": (
        "I'm having problems understanding the name of the database to list "
        "views for. Try `cloudant list views [database]`."
    ),
    "parse.problem.runview.databasename": (
        "I'm having problems understanding the name of the database to run the "
        "view against. Try `cloudant run view [database] [design:view]`."
    ),
    "parse.problem.runview.viewname": (
        "I'm having problems understanding the name of the view to run. "
        "Try `cloudant run view [database] [design:view]`."
    ),
    # List databases
    "listdatabases": "Getting the list of Cloudant databases.",
    "listdatabases.title": "Cloudant databases",
    "listdatabases.error": "Unable to list Cloudant databases: {0}",
    # Database info
    "databaseinfo": "Getting details for Cloudant database {0}.",
    "databaseinfo.field.numdocs": "Documents",
    "databaseinfo.field.numdeldocs": "Deleted documents",
    "databaseinfo.field.disksize": "Disk size",
    "databaseinfo.field.filesize": "File size",
    "databaseinfo.field.extsize": "External size",
    "databaseinfo.field.actsize": "Active size",
    "databaseinfo.field.compact": "Compaction running",
    "databaseinfo.error": "Unable to get details for Cloudant database {0}: {1}",
    # Create database
    "createdatabase": "Creating Cloudant database {0}.",
    "createdatabase.success": "Cloudant database {0} was created.",
    "createdatabase.error": "Unable to create Cloudant database {0}: {1}",
    # Set permissions
    "setpermissions": "Granting user {0} {1} permissions to Cloudant database {2}.",
    "setpermissions.none": "Removing all permissions for user {0} on Cloudant database {1}.",
    "setpermissions.success": "Permissions for user {0} on Cloudant database {1} were set.",
    "setpermissions.get.error": (
        "Unable to get the permissions of user {0} on Cloudant database {1}: {2}"
    ),
    "setpermissions.set.error": (
        "Unable to set the permissions of user {0} on Cloudant database {1}: {2}"
    ),
    "setpermissions.nouser": "No user was chosen, so no permissions were changed.",
    "setpermissions.nopermissions": "Permission changes were cancelled; nothing was changed.",
    "setpermissions.user.prompt": (
        "Which user or API key should get permissions to Cloudant database {0}? "
        "Type `exit` to quit."
    ),
    "setpermissions._reader": "read",
    "setpermissions._writer": "write",
    "setpermissions._replicator": "replicate",
    "setpermissions._admin": "administer",
    "setpermissions.permissions.keep.prompt": (
        "User {1} already has {0} access ({2}). Keep it? Reply `yes` or `no`, "
        "or `exit` to quit."
    ),
    "setpermissions.permissions.add.prompt": (
        "Give user {1} {0} access ({2})? Reply `yes` or `no`, or `exit` to quit."
    ),
    # List views
    "listviews": "Getting the views for Cloudant database {0}.",
    "listviews.title": "Cloudant views",
    "listviews.error": "Unable to list views for Cloudant database {0}: {1}",
    # Run view
    "runview": "Running view {0} on Cloudant database {1}.",
    "runview.title": "View results",
    "runview.error": "Unable to run view {0} on Cloudant database {1}: {2}",
    "runview.noview": "No view was chosen, so nothing was run.",
    "runview.view.prompt": (
        "Which view should be run? Enter it as `design:view`, or `exit` to quit."
    ),
    "runview.keys.prompt": (
        "Enter the keys to pass to view {0}, separated by commas. "
        "Type `{1}` for no keys or `{2}` to quit."
    ),
}


def t(key: str, *args: Any) -> str:
    """Look up a message and format it with positional arguments."""
    template = MESSAGES.get(key)
    if template is None:
        return key
    return template.format(*args)
