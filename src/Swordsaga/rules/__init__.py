"""Dice resolution engine: catalog, rolls, aggregation, difficulty, tension."""
