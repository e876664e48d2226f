"""
Page-level client for the portal API: list, detail and form views that talk
to the REST endpoints through a transport. Holds no Django state.
"""
