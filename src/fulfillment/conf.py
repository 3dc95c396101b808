"""
Settings of the fulfillment client.

Values are pulled from the environment (or a ``.env`` file) with
python-decouple, on top of an optional read-only configuration file.
"""

import dataclasses
import logging.config
import os
from pathlib import Path

import yaml
from decouple import Csv, config as _config, undefined

CONFIG_FILE_NAME = "config.json"
CONFIG_DIR_NAME = "fulfillment-cli"


class ConfigurationError(Exception):
    """The settings are missing or invalid."""


def config(option: str, default=undefined, *args, **kwargs):
    """
    Pull a config parameter from the environment.

    Read the config variable ``option``. If it's optional, use the ``default`` value.
    Input is automatically cast to the correct type, where the type is derived from the
    default value if possible.

    Pass ``split=True`` to split the comma-separated input into a list.
    """
    if "split" in kwargs:
        kwargs.pop("split")
        kwargs["cast"] = Csv()

    if default is not undefined and default is not None:
        kwargs.setdefault("cast", type(default))
    return _config(option, default=default, *args, **kwargs)


def config_location() -> Path:
    """
    Return the location of the configuration file.

    ``FULFILLMENT_CONFIG`` wins, then ``$XDG_CONFIG_HOME/fulfillment-cli/config.json``,
    then ``~/.config/fulfillment-cli/config.json``.
    """
    explicit = config("FULFILLMENT_CONFIG", default="")
    if explicit:
        return Path(explicit)
    base = config("XDG_CONFIG_HOME", default="") or os.path.join(
        os.path.expanduser("~"), ".config"
    )
    return Path(base) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


@dataclasses.dataclass(frozen=True)
class Settings:
    """
    Connection settings.

    Attributes:
        address: Server address as ``host:port``
        plaintext: Use a channel without TLS
        token: Bearer token sent with every call
        timeout: Default deadline of calls in seconds, zero means no deadline
        schema_modules: Generated ``*_pb2`` modules that describe the server
    """

    address: str = ""
    plaintext: bool = False
    token: str = ""
    timeout: float = 0.0
    schema_modules: tuple[str, ...] = ()

    FILE_KEYS = ("address", "plaintext", "token", "timeout", "schema_modules")

    @classmethod
    def from_file(cls, path: str | Path) -> "Settings":
        """
        Read settings from a YAML or JSON file.

        Unknown keys are ignored, so the file can be shared with tools that
        store more settings in it.

        Raises:
            ConfigurationError: If the file can't be read, isn't a mapping or
                has values of the wrong type
        """
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file '{path}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse config file '{path}': {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file '{path}' must contain a mapping, got {type(data).__name__}"
            )

        values = {key: data[key] for key in cls.FILE_KEYS if key in data}
        try:
            if "timeout" in values:
                values["timeout"] = float(values["timeout"] or 0)
            if "schema_modules" in values:
                values["schema_modules"] = tuple(values["schema_modules"] or ())
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value in config file '{path}': {e}") from e
        if "plaintext" in values and not isinstance(values["plaintext"], bool):
            raise ConfigurationError(
                f"Invalid value in config file '{path}': 'plaintext' must be a "
                f"boolean, got {values['plaintext']!r}"
            )
        return cls(**values)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls().with_env()

    @classmethod
    def load(cls, path: str | Path | None = None) -> "Settings":
        """
        Load the configuration file, if it exists, and apply environment overrides.

        Examples:
            >>> settings = Settings.load()
            >>> channel = connect(settings)
        """
        path = Path(path) if path is not None else config_location()
        settings = cls.from_file(path) if path.exists() else cls()
        return settings.with_env()

    def with_env(self) -> "Settings":
        """Return a copy where variables set in the environment replace current values."""
        modules = config("FULFILLMENT_SCHEMA_MODULES", default="", split=True)
        return dataclasses.replace(
            self,
            address=config("FULFILLMENT_ADDRESS", default=self.address),
            plaintext=config("FULFILLMENT_PLAINTEXT", default=self.plaintext),
            token=config("FULFILLMENT_TOKEN", default=self.token),
            timeout=config("FULFILLMENT_TIMEOUT", default=float(self.timeout)),
            schema_modules=tuple(modules) if modules else self.schema_modules,
        )


#
# LOGGING
#
LOG_STDOUT = config("LOG_STDOUT", default=False)
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "timestamped": {"format": "%(asctime)s %(levelname)s %(name)s  %(message)s"},
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "timestamped",
            "stream": "ext://sys.stdout" if LOG_STDOUT else "ext://sys.stderr",
        },
    },
    "loggers": {
        "fulfillment": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": True,
        },
        "grpc": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def configure_logging() -> None:
    logging.config.dictConfig(LOGGING)
