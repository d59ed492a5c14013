"""
Presentation Layer.

This package contains the Typer application, the Rich renderers and the
progress display.
"""
