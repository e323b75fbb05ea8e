"""Command-line front-end for the catalog locator."""
