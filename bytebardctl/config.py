"""Configuration management for bytebardctl.

Profiles live under ``~/.bytebardctl``: ``config.toml`` records which profile
is active and ``profiles/<name>.json`` holds one API key per file. The
``BYTEBARD_API_KEY`` and ``BYTEBARD_API_URL`` environment variables can stand
in for a profile entirely.
"""

import os
import tomllib
import json
from pathlib import Path
from typing import Dict, List, Optional, Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigError
from .executor import DEFAULT_BASE_URL

ENV_API_KEY = "BYTEBARD_API_KEY"
ENV_API_URL = "BYTEBARD_API_URL"

DEFAULT_TIMEOUT = 30
MAX_TIMEOUT = 300


class Profile(BaseModel):
    """One ByteBard account: an API key plus where and how to reach it."""

    name: str
    api_key: str = Field(..., description="Value sent in the x-api-key header")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API origin, without trailing slash")
    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0, le=MAX_TIMEOUT, description="Seconds per request")
    active: bool = False

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("API key cannot be empty")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop any trailing slash."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Base URL must be an http:// or https:// URL, got {v!r}")
        return v.rstrip("/")


class ConfigManager:
    """Reads and writes bytebardctl profiles.

    The first profile created becomes the active one. Deleting the active
    profile leaves no profile active until ``set_active_profile`` is called.
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Load profiles from ``config_dir``.

        Args:
            config_dir: Directory holding config.toml and profiles/.
                Defaults to ``~/.bytebardctl``.

        Raises:
            ConfigError: If config.toml exists but cannot be parsed
        """
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".bytebardctl"
        self.config_file = self.config_dir / "config.toml"
        self.profiles_dir = self.config_dir / "profiles"

        self._by_name: Dict[str, Profile] = {}
        self._active: Optional[str] = None

        if self.config_file.exists():
            self._active = self._read_active_name()
            self._read_profiles()

    def create_profile(
        self,
        name: str,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        overwrite: bool = False,
    ) -> Profile:
        """Validate and store a profile.

        Raises:
            ConfigError: If the name is taken (without ``overwrite``) or a
                value is invalid
        """
        if name in self._by_name and not overwrite:
            raise ConfigError(f"Profile '{name}' already exists. Use --force to replace it.")

        try:
            profile = Profile(name=name, api_key=api_key, base_url=base_url, timeout=timeout)
        except ValueError as e:
            raise ConfigError(f"Failed to create profile '{name}': {e}")

        self._write_profile(profile)
        self._by_name[name] = profile

        if self._active is None:
            self._active = name
        profile.active = name == self._active
        self._write_config()
        return profile

    def get_profile(self, name: str) -> Profile:
        """Return a stored profile.

        Raises:
            ConfigError: If no profile has that name
        """
        return self._require(name)

    def list_profiles(self) -> List[Dict[str, Any]]:
        """Summaries of every profile, API keys left out."""
        return [
            {**profile.model_dump(exclude={"api_key", "active"}), "active": name == self._active}
            for name, profile in self._by_name.items()
        ]

    def set_active_profile(self, name: str) -> None:
        """Make ``name`` the profile used when none is given.

        Raises:
            ConfigError: If no profile has that name
        """
        self._require(name)
        self._active = name
        for profile in self._by_name.values():
            profile.active = profile.name == name
        self._write_config()

    def get_active_profile(self) -> Optional[str]:
        return self._active

    def get_default_profile(self) -> Profile:
        """Return the active profile.

        Raises:
            ConfigError: If there is none
        """
        if self._active not in self._by_name:
            raise ConfigError("No default profile set")
        return self._by_name[self._active]

    def delete_profile(self, name: str) -> None:
        """Remove a profile and its file.

        Raises:
            ConfigError: If no profile has that name
        """
        self._require(name)
        del self._by_name[name]
        (self.profiles_dir / f"{name}.json").unlink(missing_ok=True)

        if self._active == name:
            self._active = None
        self._write_config()

    def has_environment_config(self) -> bool:
        """True when BYTEBARD_API_KEY is set to a non-empty value."""
        return bool(os.getenv(ENV_API_KEY))

    def get_environment_config(self) -> Profile:
        """Build an unsaved profile named ``environment`` from the environment.

        Raises:
            ConfigError: If BYTEBARD_API_KEY is unset or a value is invalid
        """
        api_key = os.getenv(ENV_API_KEY)
        if not api_key:
            raise ConfigError(f"{ENV_API_KEY} environment variable is required")

        try:
            return Profile(
                name="environment",
                api_key=api_key,
                base_url=os.getenv(ENV_API_URL) or DEFAULT_BASE_URL,
                active=True,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid environment configuration: {e}")

    def _require(self, name: str) -> Profile:
        profile = self._by_name.get(name)
        if profile is None:
            raise ConfigError(f"Profile '{name}' not found")
        return profile

    def _read_active_name(self) -> Optional[str]:
        try:
            data = tomllib.loads(self.config_file.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load configuration from {self.config_file}: {e}")
        return data.get("active_profile") or None

    def _read_profiles(self) -> None:
        for path in sorted(self.profiles_dir.glob("*.json")):
            try:
                profile = Profile(**json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError, TypeError) as e:
                # A single bad file must not hide the other profiles
                print(f"Warning: Failed to load profile from {path.name}, skipping: {e}")
                continue

            profile.active = profile.name == self._active
            self._by_name[profile.name] = profile

    def _write_config(self) -> None:
        # tomllib cannot write, and the file holds a single key
        content = (
            "# bytebardctl configuration\n"
            'version = "1.0"\n'
            f"active_profile = {json.dumps(self._active or '')}\n"
        )
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def _write_profile(self, profile: Profile) -> None:
        path = self.profiles_dir / f"{profile.name}.json"
        try:
            self.profiles_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(profile.model_dump(exclude={"active"}), indent=2), encoding="utf-8")
            path.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Failed to save profile '{profile.name}': {e}")
