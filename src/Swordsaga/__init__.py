"""Swordsaga: dice resolution for the Sword Saga tabletop game."""  # noqa: N999
