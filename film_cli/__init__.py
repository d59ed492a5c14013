"""
film-cli: browse a remote film catalog, download films with live progress and
keep them in a local database for offline playback.
"""

__version__ = "1.0.0"
