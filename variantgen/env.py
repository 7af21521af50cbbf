import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .emitter import DEFAULT_IMPORT_PATH, DEFAULT_PACKAGE
from .formatter import DEFAULT_FORMATTER


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load .env from the working directory if present.
    Variables already set in the environment are not overridden.
    """
    if env_path is None:
        env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


@dataclass
class Settings:
    package: str = DEFAULT_PACKAGE
    import_path: str = DEFAULT_IMPORT_PATH
    formatter: str = DEFAULT_FORMATTER
    log_level: str = "WARNING"
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            environ = os.environ
        log_dir = environ.get("VARIANTGEN_LOG_DIR") or None
        return cls(
            package=environ.get("VARIANTGEN_PACKAGE") or DEFAULT_PACKAGE,
            import_path=environ.get("VARIANTGEN_IMPORT_PATH") or DEFAULT_IMPORT_PATH,
            formatter=environ.get("VARIANTGEN_FORMATTER") or DEFAULT_FORMATTER,
            log_level=(environ.get("VARIANTGEN_LOG_LEVEL") or "WARNING").upper(),
            log_dir=Path(log_dir) if log_dir else None,
        )
