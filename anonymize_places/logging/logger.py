import logging
import sys


class Log:
    """Process-wide logger for the anonymizer, configured once from Settings."""

    _logger: logging.Logger = logging.getLogger("anonymize_places")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level; attach the stdout handler on first use only."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str) -> None:
        cls._logger.info(message)

    @classmethod
    def error(cls, message: str) -> None:
        cls._logger.error(message)

    @classmethod
    def warning(cls, message: str) -> None:
        cls._logger.warning(message)

    @classmethod
    def debug(cls, message: str) -> None:
        cls._logger.debug(message)

    @classmethod
    def level_for_verbosity(cls, verbosity: int) -> str:
        """Map a repeated ``-v`` count to a level name."""
        if verbosity <= 0:
            return "WARNING"
        if verbosity == 1:
            return "INFO"
        return "DEBUG"
