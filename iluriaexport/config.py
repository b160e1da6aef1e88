#!/usr/bin/env python3
"""
Run configuration for the Iluria exporter.

Values come from the command line, with `.env` / environment variables as
defaults for the ones an operator usually keeps fixed between runs.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

from iluriaexport.errors import ConfigError

load_dotenv()

DEFAULT_PRODUCTS_FILE = "products.csv"
DEFAULT_VARIATIONS_FILE = "variations.csv"
DEFAULT_USER_AGENT = "Mozilla/5.0"


def _env_timeout() -> Optional[float]:
    value = os.getenv("ILURIA_REQUEST_TIMEOUT")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"ILURIA_REQUEST_TIMEOUT must be a number of seconds, got '{value}'")


@dataclass
class ExportConfig:
    """Configuration for one export run"""

    file: str
    url: str
    limit: int = 0
    output_dir: Optional[str] = None
    products_file: str = DEFAULT_PRODUCTS_FILE
    variations_file: str = DEFAULT_VARIATIONS_FILE
    overwrite: bool = False
    simulate: bool = False
    verbose: bool = False
    log_file: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[float] = None

    @classmethod
    def from_args(cls, args) -> "ExportConfig":
        url = args.url or os.getenv("ILURIA_BASE_URL")
        if not url:
            raise ConfigError("A base url is required (argument or ILURIA_BASE_URL)")
        return cls(
            file=args.file,
            url=url,
            limit=args.limit or 0,
            output_dir=args.output_dir or os.getenv("ILURIA_OUTPUT_DIR") or None,
            products_file=args.products_file,
            variations_file=args.variations_file,
            overwrite=args.overwrite,
            simulate=args.simulate,
            verbose=args.verbose,
            log_file=args.log_file,
            user_agent=os.getenv("ILURIA_USER_AGENT", DEFAULT_USER_AGENT),
            timeout=_env_timeout(),
        )

    def get_output_files(self) -> Tuple[Optional[str], Optional[str]]:
        if self.output_dir is None:
            return None, None
        return (
            os.path.join(self.output_dir, self.products_file),
            os.path.join(self.output_dir, self.variations_file),
        )

    def validate(self):
        if not os.path.isfile(self.file):
            raise ConfigError(f"File '{self.file}' does not exist")

        url = urlparse(self.url)
        if not url.scheme or not url.netloc:
            raise ConfigError(f"Url '{self.url}' has to be absolute.")
        if url.scheme not in ("http", "https"):
            raise ConfigError(f"Scheme '{url.scheme}' has to be http or https.")

        if self.limit < 0:
            raise ConfigError(f"Limit has to be zero or positive, got {self.limit}")

        if self.output_dir is not None:
            if not os.path.isdir(self.output_dir):
                raise ConfigError(f"Output directory '{self.output_dir}' does not exist")
            if not self.overwrite:
                for path in self.get_output_files():
                    if os.path.exists(path):
                        raise ConfigError(
                            f"File '{path}' already exists, use --overwrite to replace it"
                        )
        return self
