"""Infrastructure layer -- logging setup and stack-file loading."""
