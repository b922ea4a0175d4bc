"""Developer tools for dapserde."""
