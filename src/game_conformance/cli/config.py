"""CLI configuration and defaults."""

# Descriptor file or directory used when --descriptors is not given
DEFAULT_DESCRIPTORS_PATH = "descriptors"

# Results directory
RESULTS_ROOT = "results"

# Session manifest filename
SESSION_MANIFEST_FILENAME = "session.json"
SCREENSHOTS_DIRNAME = "screenshots"

# Environment variables consulted after .env files are loaded
BASE_URL_ENV = "GAME_CONFORMANCE_BASE_URL"
BROWSER_ENV = "GAME_CONFORMANCE_BROWSER"

UI_MODES = ("plain", "quiet")
