"""Configuration management for Topicsheet.

Supports TOML configuration format with auto-discovery.
"""

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Self

CONFIG_FILENAME = "topicsheet.toml"
SEED_PATH_ENV = "TOPICSHEET_SEED_PATH"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 5000


@dataclass
class SheetConfig:
    """Sheet store configuration."""

    seed_path: Path | None = None
    strict_replace: bool = False


@dataclass
class ClientConfig:
    """HTTP client configuration."""

    base_url: str = "http://127.0.0.1:5000"
    timeout: float = 10.0


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    sheet: SheetConfig
    client: ClientConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for topicsheet.toml in current directory and parents.
        The TOPICSHEET_SEED_PATH environment variable, when set, overrides
        sheet.seed_path.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            config = cls._load_from_file(config_path)
        else:
            discovered_path = cls._discover_config()
            if discovered_path is None:
                config = cls._default()
            else:
                config = cls._load_from_file(discovered_path)

        env_seed = os.environ.get(SEED_PATH_ENV)
        if env_seed:
            config = config.with_overrides(seed_path=Path(env_seed))
        return config

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Self:
        return cls(
            server=ServerConfig(),
            sheet=SheetConfig(),
            client=ClientConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            sheet=cls._parse_sheet(data.get("sheet"), config_dir),
            client=cls._parse_client(data.get("client")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 5000)
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_sheet(cls, data: object, config_dir: Path) -> SheetConfig:
        """Parse sheet configuration section.

        Args:
            data: Raw sheet section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            SheetConfig instance
        """
        if data is None:
            return SheetConfig()

        if not isinstance(data, dict):
            raise ValueError("sheet section must be a dictionary")

        seed_path = data.get("seed_path")
        if seed_path is not None and not isinstance(seed_path, str):
            raise ValueError("sheet.seed_path must be a string")

        strict_replace = data.get("strict_replace", False)
        if not isinstance(strict_replace, bool):
            raise ValueError("sheet.strict_replace must be a boolean")

        return SheetConfig(
            seed_path=config_dir / seed_path if seed_path is not None else None,
            strict_replace=strict_replace,
        )

    @classmethod
    def _parse_client(cls, data: object) -> ClientConfig:
        if data is None:
            return ClientConfig()

        if not isinstance(data, dict):
            raise ValueError("client section must be a dictionary")

        base_url = data.get("base_url", "http://127.0.0.1:5000")
        if not isinstance(base_url, str):
            raise ValueError("client.base_url must be a string")

        timeout = data.get("timeout", 10.0)
        if isinstance(timeout, bool) or not isinstance(timeout, int | float):
            raise ValueError("client.timeout must be a number")

        return ClientConfig(base_url=base_url, timeout=float(timeout))

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        seed_path: Path | None = None,
        strict_replace: bool | None = None,
        base_url: str | None = None,
    ) -> Self:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            seed_path: Override sheet.seed_path
            strict_replace: Override sheet.strict_replace
            base_url: Override client.base_url

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        sheet = self.sheet
        if seed_path is not None or strict_replace is not None:
            sheet = replace(
                self.sheet,
                seed_path=seed_path if seed_path is not None else self.sheet.seed_path,
                strict_replace=(
                    strict_replace if strict_replace is not None else self.sheet.strict_replace
                ),
            )

        client = self.client
        if base_url is not None:
            client = replace(self.client, base_url=base_url)

        return replace(self, server=server, sheet=sheet, client=client)
