"""Command-line interface: parser, dispatch, handlers."""
