"""
Configuration for the extra protoc plugin runner
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Protoc
PROTOC_EXECUTABLE = os.getenv("PROTOC_EXECUTABLE", "protoc")
PROTOC_TIMEOUT = int(os.getenv("PROTOC_TIMEOUT", "300"))  # seconds
PROTO_SOURCE_ROOT = Path(os.getenv("PROTO_SOURCE_ROOT", "src/main/proto"))
PROTO_INCLUDE_PATHS = [
    Path(p) for p in os.getenv("PROTO_INCLUDE_PATHS", "").split(os.pathsep) if p.strip()
]

# Output
EXTRAS_OUTPUT_BASE_DIR = Path(os.getenv("EXTRAS_OUTPUT_BASE_DIR", "target/generated-sources/protobuf"))
EXTRAS_FAIL_FAST = _env_flag("EXTRAS_FAIL_FAST", True)

# Plugin executables
LOCAL_REPOSITORY = Path(os.getenv("LOCAL_REPOSITORY", str(Path.home() / ".m2" / "repository")))
PLUGIN_INSTALL_DIR = Path(os.getenv("PLUGIN_INSTALL_DIR", "target/protoc-plugins"))
TOOLCHAINS_FILE = os.getenv("TOOLCHAINS_FILE")
if TOOLCHAINS_FILE:
    TOOLCHAINS_FILE = Path(TOOLCHAINS_FILE)
