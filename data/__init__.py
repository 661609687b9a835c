"""Datenquellen ohne Backend: Demo-Generator und lokale JSON-Datei."""
