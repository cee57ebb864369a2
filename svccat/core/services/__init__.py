"""Application services invoked by the command handler."""
