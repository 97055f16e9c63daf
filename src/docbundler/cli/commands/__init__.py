"""One module per docbundler subcommand, each exposing ``run``."""
