"""
Core application engine.

The `FilmManager` receives every collaborator it needs (store, downloader,
catalog source and views) from its caller and turns user actions into state
transitions of individual downloads.
"""
