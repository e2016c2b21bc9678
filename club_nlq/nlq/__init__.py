"""Question understanding: corrections, metric resolution, clarification, classification."""
