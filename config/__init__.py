"""Konfiguration: Schema (Pydantic), Defaults, YAML-Manager und Setup-Wizard."""
