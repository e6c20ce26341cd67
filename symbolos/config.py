"""Engine configuration."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel


class EngineConfig(BaseModel):
    """Configuration for pipeline runs, snapshot files and the Redis store."""

    verbose: bool = False
    output_root: str = "sandbox/worlds"
    archive_dir_name: str = "archives"
    compress: bool = True
    store_frames: bool = False          # Write a frame file after every step
    store_archive: bool = False         # Write the whole-run archive at the end
    redis_url: str = "redis://localhost:6379"
    namespace: str = "symbolos"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from ``SYMBOLOS_*`` variables and ``REDIS_URL``."""
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = f"SYMBOLOS_{name.upper()}"
            if key in env:
                values[name] = env[key]
        if "redis_url" not in values and "REDIS_URL" in env:
            values["redis_url"] = env["REDIS_URL"]
        return cls.model_validate(values)
