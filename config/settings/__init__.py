"""Settings package for the campus housing project.

`base.py` contains common configuration shared across environments.
`dev.py`, `prod.py` and `test.py` extend the base settings with
environment specific overrides.
"""
