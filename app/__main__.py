from .cmd import cli

cli()
