"""
config.py – Settings, constants and logging for ToZip.

AppConfig keeps config.json in the per-user data folder that appdirs picks for
the platform, repairs missing or invalid archive options on load, and attaches
the rotating log file to the "ToZip" logger.  The module imports nothing from
the rest of the application.
"""

import json
import logging
import os
from logging.handlers import RotatingFileHandler

import appdirs

# Fixed values.

APP_NAME = "ToZip"

# Shown in the About box.
APP_VERSION = "1.0.0"

# Length of a password produced by "Generate".
MIN_LENGTH = 16

# Symbols the generator draws from.
SYMBOLS = ['!', '#', '$', '%', '&', '(', ')', '*', '+', '-', '=', '?', '@']

# WinZip AES key sizes understood by pyzipper.
AES_KEY_BITS = (128, 192, 256)

# Compression names accepted in config.json.
COMPRESSION_METHODS = ("deflated", "stored")

# Look and feel.
APP_FONT    = ("Segoe UI", 10)
HEADER_FONT = ("Segoe UI", 13, "bold")
SMALL_FONT  = ("Segoe UI", 9)
BUTTON_FONT = ("Segoe UI", 10)

BG           = "#f0f2f5"   # window background
ENTRY_BG     = "#ffffff"   # entry fields
ACCENT       = "#1a6fb5"   # Save button
ACCENT_HOVER = "#154f85"   # Save button, hover / pressed
ERROR_FG     = "#b3261e"   # error messages

# Width of the password entries, in characters.
ENTRY_MIN_CHARS = 36

# Settings used when config.json is missing a key or cannot be read.
DEFAULT_CONFIG: dict = {
    # Key size of the WinZip AES encryption applied to the archive.
    "aes_key_bits": 256,
    # "deflated" or "stored".
    "compression": "deflated",
    # Append a yyyy-MM-dd_HH-mm-ss stamp to the suggested archive name.
    "timestamp_in_filename": False,
    # Put a generated password on the clipboard as well.
    "auto_copy_generated": True,
    # Where the file pickers start next time.
    "last_open_dir": "",
    "last_save_dir": "",
}


class AppConfig:
    """
    User settings for ToZip plus the log file they share a folder with.

    Attributes
    ----------
    user_data_dir : str
        Folder holding config.json and app.log.
    config_path : str
        Path of config.json.
    log_path : str
        Path of app.log.
    data : dict
        Current settings; change with set() and persist with save().
    logger : logging.Logger
        The "ToZip" logger.
    """

    def __init__(self) -> None:
        self.user_data_dir: str = self._get_user_data_dir()

        self.config_path: str = os.path.join(self.user_data_dir, "config.json")
        self.log_path:    str = os.path.join(self.user_data_dir, "app.log")

        # _load() logs through this logger.
        self.logger: logging.Logger = self._setup_logger()
        self.data: dict = self._load()

        self.logger.info("AppConfig initialised; data dir: %s", self.user_data_dir)

    # -- internals --

    @staticmethod
    def _get_user_data_dir() -> str:
        """appdirs folder for ToZip, created on first use."""
        path = appdirs.user_data_dir(APP_NAME)
        os.makedirs(path, exist_ok=True)
        return path

    def _setup_logger(self) -> logging.Logger:
        """
        Attach app.log (2 MB per file, 3 backups) to the "ToZip" logger.
        A logger that already has a handler is returned as it is.
        """
        logger = logging.getLogger(APP_NAME)
        logger.setLevel(logging.DEBUG)

        if not logger.handlers:
            handler = RotatingFileHandler(
                self.log_path,
                maxBytes=2_000_000,
                backupCount=3,
                encoding="utf-8",
            )
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s: %(message)s")
            )
            logger.addHandler(handler)

        return logger

    def _load(self) -> dict:
        """
        Settings from config.json with every DEFAULT_CONFIG key present and
        invalid archive options reset.  An unreadable or malformed file is
        logged and the defaults are used instead.
        """
        try:
            if os.path.exists(self.config_path):
                with open(self.config_path, "r", encoding="utf-8") as fh:
                    cfg: dict = json.load(fh)
                if not isinstance(cfg, dict):
                    raise ValueError("config.json does not contain an object")
                for key, value in DEFAULT_CONFIG.items():
                    cfg.setdefault(key, value)
                return self._sanitise(cfg)
        except Exception:
            self.logger.exception("Failed to load config; using defaults")

        return dict(DEFAULT_CONFIG)

    def _sanitise(self, cfg: dict) -> dict:
        """Reset archive options that pyzipper would reject."""
        if cfg.get("aes_key_bits") not in AES_KEY_BITS:
            self.logger.warning("Invalid aes_key_bits %r; using 256", cfg.get("aes_key_bits"))
            cfg["aes_key_bits"] = DEFAULT_CONFIG["aes_key_bits"]
        if cfg.get("compression") not in COMPRESSION_METHODS:
            self.logger.warning("Invalid compression %r; using deflated", cfg.get("compression"))
            cfg["compression"] = DEFAULT_CONFIG["compression"]
        return cfg

    # -- public --

    def save(self) -> None:
        """Write data to config.json; failures are logged, not raised."""
        try:
            with open(self.config_path, "w", encoding="utf-8") as fh:
                json.dump(self.data, fh, indent=2)
            self.logger.info("Config saved")
        except Exception:
            self.logger.exception("Failed to save config")

    def get(self, key: str, default=None):
        """data[key], or *default* when the key is unknown."""
        return self.data.get(key, default)

    def set(self, key: str, value) -> None:
        """Change a setting in memory only; see save()."""
        self.data[key] = value

