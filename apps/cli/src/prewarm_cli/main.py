import typer

from prewarm_cli.commands import maintenance, run

app = typer.Typer(
    help="Prewarm CLI",
    no_args_is_help=True,
    invoke_without_command=False,
    add_completion=False
)


# Bundle patch subcommand group
patch_app = typer.Typer(help="Manage the web-mode indexing patch")
patch_app.command(name="apply")(maintenance.apply_patch)
patch_app.command(name="restore")(maintenance.restore_patch)


@app.callback()
def callback():
    """Prewarm CLI - Build the language server index before the first session."""
    pass


app.command(name="run")(run.run)
app.command(name="status")(maintenance.status)
app.add_typer(patch_app, name="patch")


def main():
    app()


if __name__ == "__main__":
    main()
