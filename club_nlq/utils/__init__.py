"""Season, season-week and date helpers."""
