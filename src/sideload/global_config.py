"""Global, project-wide configuration constants.

Shared filesystem anchors and cross-cutting constants that many modules
can import.

The project root is, in order: `SIDELOAD_HOME` if set, the source
checkout when running from one (a pyproject.toml two levels above this
package), otherwise the current working directory. Installed copies
therefore never write data, logs or databases into site-packages.
Individual paths can still be overridden per invocation from the CLI
(`--db`, `--media-dir`).
"""

import os
from collections.abc import Mapping
from pathlib import Path

# Core roots
PACKAGE_ROOT: Path = Path(__file__).resolve().parent


def resolve_project_root(package_root: Path, environ: Mapping[str, str]) -> Path:
    """Pick the directory data/, logs/ and db/ live under."""
    override = environ.get("SIDELOAD_HOME")
    if override:
        return Path(override)
    # src/sideload -> src -> repo root
    checkout = package_root.parent.parent
    if (checkout / "pyproject.toml").is_file():
        return checkout
    return Path.cwd()


PROJECT_ROOT: Path = resolve_project_root(PACKAGE_ROOT, os.environ)

# Core Names
PROJECT_NAME = "sideload"

# Data directories
DATA_DIR: Path = PROJECT_ROOT / "data"
MEDIA_DIR: Path = DATA_DIR / "uploads"

# Logs directories
LOGS_DIR: Path = PROJECT_ROOT / "logs"

# Database
DB_DIR: Path = PROJECT_ROOT / "db"
DEFAULT_DB_PATH: Path = DB_DIR / f"{PROJECT_NAME}.sqlite"

# SQL ships inside the package so installed copies can still initialize a database
SQL_DIR: Path = PACKAGE_ROOT / "sql"

# CSV parsing: per-field allowance, well above the csv module's 128 KiB default
CSV_FIELD_SIZE_LIMIT = 1024 * 1024

# Downloads
DOWNLOAD_TIMEOUT_S = 30
DOWNLOAD_CHUNK_SIZE = 256 * 1024
USER_AGENT = f"{PROJECT_NAME}/0.1"
