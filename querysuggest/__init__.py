"""Ranked query suggestions for a semantic BI search box."""
