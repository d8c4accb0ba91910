import os
import sys

project = "BS-Solctra"
author = "BS-Solctra developers"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.autosummary",
]

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "sphinx_rtd_theme"

autosummary_generate = True
napoleon_google_docstring = True
napoleon_numpy_docstring = True

sys.path.insert(0, os.path.abspath("../src"))
