"""ChromeDriver subprocess management for the selenium engine."""
import logging
import subprocess
import sys
import time
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_PORT = 9515


class ChromeDriverService:
    """Runs a local ``chromedriver`` for the duration of a ``with`` block."""

    def __init__(self, port: int = DEFAULT_PORT, executable: Optional[str] = None, startup_wait: float = 2.0):
        self.port = port
        self.executable = executable or ("chromedriver.exe" if sys.platform.startswith("win") else "chromedriver")
        self.startup_wait = startup_wait
        self._process: Optional[subprocess.Popen] = None

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def command(self) -> List[str]:
        return [self.executable, f"--port={self.port}"]

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting ChromeDriver...")
        try:
            self._process = subprocess.Popen(
                self.command(),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to start ChromeDriver. Make sure it's installed: {e}") from e
        time.sleep(self.startup_wait)
        if self._process.poll() is not None:
            code = self._process.returncode
            self._process = None
            raise RuntimeError(f"ChromeDriver exited during startup with code {code}")
        logger.info(f"ChromeDriver started successfully on port {self.port}")

    def stop(self) -> None:
        if self._process is None:
            return
        logger.info("Stopping ChromeDriver...")
        try:
            self._process.kill()
            self._process.wait(timeout=10)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"ChromeDriver did not stop cleanly: {e}")
        finally:
            self._process = None
        logger.info("ChromeDriver stopped")

    def __enter__(self) -> 'ChromeDriverService':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
