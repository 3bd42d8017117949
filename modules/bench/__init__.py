"""Frappe bench orchestration package.

Submodules:
- cli: bench command wrappers (venv interpreter or bench on PATH)
- installer: bench CLI, virtualenv and editable app installs
- repo: clone or bench init into the install directory
- templater: render config files from *.template siblings
- site: site_config.json, site database and app installation
- branding: login page text customisation
- assets: frontend and framework asset builds
"""

# Intentionally minimal; logic lives in submodules and __main__.
