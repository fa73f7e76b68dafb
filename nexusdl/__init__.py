"""nexusdl: Maven artifact downloader.

Locates a published artifact on Nexus, Maven Central or GitHub Packages,
downloads it once, verifies its SHA-1, keeps it in a version-addressed
archive, prunes old copies and republishes a stable symlink to it.
"""

__version__ = "0.1.0"
__description__ = "Fetch, verify, archive and link Maven artifacts"

from nexusdl.core.orchestrator import Orchestrator
from nexusdl.cli.app import app as cli

__all__ = ["Orchestrator", "cli", "__version__"]
