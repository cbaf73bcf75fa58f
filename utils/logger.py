import functools
import logging
import time
from typing import Optional

# Niveau de log des appels décorés
LOG_LEVELS = {"NONE": 0, "BASIC": 1, "DETAILED": 2}
LOG_LEVEL = LOG_LEVELS["DETAILED"]  # Peut être changé dynamiquement

_CALLS_LOGGER = logging.getLogger("dungeon.calls")


def log_calls(func):
    """Décorateur pour logger les appels de fonctions et mesurer leur temps d'exécution.

    Entries are emitted at DEBUG on the ``dungeon.calls`` logger so nothing is
    formatted unless that level is enabled.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if LOG_LEVEL == 0 or not _CALLS_LOGGER.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)

        _CALLS_LOGGER.debug("Appel %s args=%s kwargs=%s", func.__qualname__, args, kwargs)
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time

        if LOG_LEVEL >= 2:
            _CALLS_LOGGER.debug("Retour %s: %s", func.__qualname__, result)
        _CALLS_LOGGER.debug("Temps d'exécution %s: %.6f s", func.__qualname__, elapsed)
        return result

    return wrapper


_DUNGEON_LOGGER_NAME = "modules.dungeon"
_DUNGEON_LOGGER: Optional[logging.Logger] = None


def get_dungeon_logger(level: int = logging.WARNING) -> logging.Logger:
    """Return the shared parent logger of the dungeon generator.

    A stream handler prefixed with ``[dungeon]`` is attached once; later calls
    only adjust the level.
    """

    global _DUNGEON_LOGGER
    logger = _DUNGEON_LOGGER or logging.getLogger(_DUNGEON_LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[dungeon] %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)

    logger.propagate = True
    _DUNGEON_LOGGER = logger
    return logger


__all__ = ["LOG_LEVELS", "log_calls", "get_dungeon_logger"]
