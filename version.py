import subprocess
import logging
from importlib import metadata

logger = logging.getLogger(__name__)

DIST_NAME = 's3-archive-cli'


def get_version():
    """Get version from the installed distribution, then git tags."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        pass

    try:
        return subprocess.check_output(
            ['git', 'describe', '--tags', '--dirty'],
            stderr=subprocess.DEVNULL,
            text=True
        ).strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        logger.warning("Could not determine version, using fallback")
        return "v0.0.0"  # Fallback version

__version__ = get_version()
