"""
Suite configuration and settings management.
"""
import os


def _env_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """Application configuration."""

    # Site
    BASE_URL: str = os.getenv("BAZAAR_BASE_URL", "https://hamrobazaar.com/")

    # Browser
    BROWSER: str = os.getenv("BAZAAR_BROWSER", "chromium")
    HEADLESS: bool = _env_bool("BAZAAR_HEADLESS") or _env_bool("HEADLESS")
    SLOW_MO_MS: int = int(os.getenv("BAZAAR_SLOW_MO_MS", "0"))
    VIEWPORT: dict = {"width": 1366, "height": 900}

    # Waits (seconds)
    DEFAULT_WAIT_SECONDS: float = float(os.getenv("BAZAAR_WAIT_SECONDS", "20"))
    LOCATOR_WAIT_SECONDS: float = float(os.getenv("BAZAAR_LOCATOR_WAIT_SECONDS", "10"))
    PAGE_LOAD_TIMEOUT_SECONDS: float = float(os.getenv("BAZAAR_PAGE_LOAD_TIMEOUT_SECONDS", "30"))

    # Collection
    TARGET_COUNT: int = int(os.getenv("BAZAAR_TARGET_COUNT", "50"))
    MAX_ROUNDS: int = int(os.getenv("BAZAAR_MAX_ROUNDS", "30"))
    NO_PROGRESS_LIMIT: int = int(os.getenv("BAZAAR_NO_PROGRESS_LIMIT", "3"))

    # Files
    TESTDATA_CSV: str = os.getenv("BAZAAR_TESTDATA", "testdata/testdata.csv")
    OUTPUT_DIR: str = os.getenv("BAZAAR_OUTPUT_DIR", "test-output")
    SCREENSHOT_DIR: str = os.getenv("BAZAAR_SCREENSHOT_DIR", "test-output/screenshots")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration on startup."""
        if cls.DEFAULT_WAIT_SECONDS <= 0 or cls.LOCATOR_WAIT_SECONDS <= 0:
            raise ValueError("Wait timeouts must be positive")
        if cls.MAX_ROUNDS < 0:
            raise ValueError(f"BAZAAR_MAX_ROUNDS must be >= 0, got {cls.MAX_ROUNDS}")
        if cls.NO_PROGRESS_LIMIT < 1:
            raise ValueError(f"BAZAAR_NO_PROGRESS_LIMIT must be >= 1, got {cls.NO_PROGRESS_LIMIT}")


# Global config instance
config = Config()
