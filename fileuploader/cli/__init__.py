"""fileuploader CLI."""
