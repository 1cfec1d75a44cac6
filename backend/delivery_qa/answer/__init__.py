"""Question answering over uploaded delivery spreadsheets."""
