"""
Discovery and caching of the validator image identifier.

The validator image is built and tagged outside this project. All we need is
its identifier in the local Docker runtime, the same 12-character ID that
``docker images <image> --format "{{.ID}}"`` prints. Looking it up costs a
round-trip to the Docker daemon, so the result is cached on first use and
shared by every run in the process.

An empty identifier means "no validator available". It is never cached as a
hit: the next get() asks Docker again, and every run in between fails fast.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)

SHORT_ID_LENGTH = 12


def short_image_id(image_id: str) -> str:
    """Strip the digest algorithm prefix and truncate like the Docker CLI."""
    return image_id.split(":", 1)[-1][:SHORT_ID_LENGTH]


class ValidatorIdentity:
    """
    Lazily resolved, lock-guarded identifier of the validator image.

    get() queries Docker the first time it is called and reuses the answer
    afterwards. refresh() forces a new query (for example after the image was
    rebuilt), and invalidate() drops the cached value so the next get()
    re-queries.
    """

    def __init__(self, image: str):
        """
        Args:
            image: Image reference to look up, e.g. "validator:latest".
        """
        self.image = image
        self._image_id = ""
        self._lock = threading.Lock()

        # Docker client initialized lazily
        self._client = None

    def _get_client(self):
        """Get or create Docker client."""
        if self._client is None:
            try:
                import docker
            except ImportError as e:
                msg = (
                    "docker package is required to locate the validator image. "
                    "Install with: pip install docker"
                )
                raise ImportError(msg) from e

            self._client = docker.from_env()
        return self._client

    def get(self) -> str:
        """Return the cached identifier, querying Docker if none is cached."""
        with self._lock:
            if not self._image_id:
                self._image_id = self._query()
            return self._image_id

    def refresh(self) -> str:
        """Query Docker again and replace the cached identifier."""
        with self._lock:
            self._image_id = self._query()
            return self._image_id

    def invalidate(self) -> None:
        with self._lock:
            self._image_id = ""

    def _query(self) -> str:
        try:
            client = self._get_client()
            images = client.images.list(name=self.image)
        except Exception as e:
            logger.error("Could not query Docker for image %s: %s", self.image, e)
            return ""

        if not images:
            logger.warning("No local Docker image found for %s", self.image)
            return ""

        image_id = short_image_id(images[0].id)
        logger.debug("Resolved validator image %s to %s", self.image, image_id)
        return image_id
