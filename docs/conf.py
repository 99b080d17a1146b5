"""Sphinx configuration for Design CRM API documentation."""

import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath(".."))

project = "Design CRM API"
current_year = datetime.now().year
copyright = f"{current_year}, Design CRM"
author = "Design CRM Team"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]

# Keep autodoc imports off the filesystem.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

autodoc_member_order = "bysource"
napoleon_google_docstring = True
napoleon_numpy_docstring = False

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build"]

html_theme = "alabaster"
