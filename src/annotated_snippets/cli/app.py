import typer

from annotated_snippets.cli.render import diagnostics, render

app = typer.Typer(
    name="annotated-snippets",
    help="Render code snippets as annotated views with symbols and diagnostics.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("render")(render)
app.command("diagnostics")(diagnostics)


def main() -> None:
    app()
