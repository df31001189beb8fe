# src/Swordsaga/command_loader.py
import importlib
import pkgutil

import Swordsaga.commands as commands_pkg


def load_all_commands() -> None:
    """Import every module under Swordsaga.commands so decorators register."""
    for m in pkgutil.iter_modules(commands_pkg.__path__, commands_pkg.__name__ + "."):
        importlib.import_module(m.name)
