"""Sphinx configuration for the guided-workflows documentation."""

from __future__ import annotations

import importlib.metadata
from datetime import datetime

project = "guided-workflows"
author = "guided-workflows contributors"
copyright = f"{datetime.now().year}, {author}"
release = importlib.metadata.version(project)
version = ".".join(release.split(".")[:2])

# index.md pulls in the README through MyST's include directive and renders
# the API table through eval-rst + autosummary
extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
]

source_suffix = {".md": "markdown"}
master_doc = "index"
exclude_patterns = ["_build"]

autosummary_generate = True
autodoc_member_order = "bysource"
autodoc_typehints = "description"

# Google-style docstrings only
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_attr_annotations = True

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "litestar": ("https://docs.litestar.dev/latest/", None),
}

myst_heading_anchors = 2

html_theme = "shibuya"
html_title = project
html_static_path = ["_static"]
html_css_files = ["custom.css"]
html_theme_options = {
    "nav_links": [{"title": "Litestar", "url": "https://litestar.dev/"}],
}
