"""Main CLI application."""

import typer

from couchchat.cli.commands import chat, config, serve

app = typer.Typer(
    name="couchchat",
    help="couchchat - Cloudant chat-ops bot",
    no_args_is_help=True,
)

for module in (serve, chat, config):
    module.register(app)


if __name__ == "__main__":
    app()
