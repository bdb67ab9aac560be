import base64
import binascii
import uuid
from typing import Callable, Optional

import httpx

from menu_publisher.core.errors import GenerationError
from menu_publisher.core.logging import get_logger
from menu_publisher.schemas import PublishedImage

logger = get_logger(__name__)


class ImagePublisher:
    """
    Generate one image for a prompt and store it in the bucket.

    `image_client` is an OpenAI client (only `images.generate` is used) and
    `storage` an S3 client (`put_object`, `generate_presigned_url`). When
    `public_domain` is set, URLs point at the bucket's public domain;
    otherwise a signed URL valid for `signed_url_ttl` seconds is returned.
    """

    def __init__(
        self,
        image_client,
        storage,
        bucket: str,
        *,
        public_domain: Optional[str] = None,
        signed_url_ttl: int = 432000,
        model: str = "dall-e-3",
        size: str = "1024x1024",
        response_format: Optional[str] = "b64_json",
        filename: str = "menu-image.png",
        http_client: Optional[httpx.Client] = None,
        key_factory: Callable[[], str] = None,
    ):
        self.image_client = image_client
        self.storage = storage
        self.bucket = bucket
        self.public_domain = public_domain.strip("/").removeprefix("https://") if public_domain else None
        self.signed_url_ttl = signed_url_ttl
        self.model = model
        self.size = size
        self.response_format = response_format
        self.filename = filename
        self.http_client = http_client
        self.key_factory = key_factory or (lambda: str(uuid.uuid4()))

    def generate(self, prompt: str) -> bytes:
        """Request exactly one square image and return its bytes."""
        params = {"model": self.model, "prompt": prompt, "n": 1, "size": self.size}
        # gpt-image models always answer with b64_json and reject the parameter
        if self.response_format:
            params["response_format"] = self.response_format
        response = self.image_client.images.generate(**params)
        data = getattr(response, "data", None) or []
        image = data[0] if data else None
        b64_payload = getattr(image, "b64_json", None) if image else None
        url = getattr(image, "url", None) if image else None

        if b64_payload:
            try:
                return base64.b64decode(b64_payload, validate=True)
            except (binascii.Error, ValueError) as e:
                raise GenerationError("Image service returned undecodable base64 payload") from e
        if url:
            return self._download(url)
        raise GenerationError("Failed to generate image: response has neither url nor b64_json")

    def _download(self, url: str) -> bytes:
        client = self.http_client or httpx.Client(timeout=60, follow_redirects=True)
        try:
            response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise GenerationError(f"Could not download generated image: {e}") from e
        finally:
            if client is not self.http_client:
                client.close()
        if not response.content:
            raise GenerationError("Downloaded image is empty")
        return response.content

    def store(self, data: bytes) -> str:
        """Upload under a fresh `{uuid}-{filename}` key and return the key."""
        key = f"{self.key_factory()}-{self.filename}"
        try:
            self.storage.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType="image/png",
            )
        except Exception as e:
            raise GenerationError(f"Error uploading image to bucket {self.bucket}: {e}") from e
        return key

    def url_for(self, key: str) -> str:
        if self.public_domain:
            return f"https://{self.public_domain}/{key}"
        return self.storage.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=self.signed_url_ttl,
        )

    def publish(self, prompt: str) -> PublishedImage:
        data = self.generate(prompt)
        logger.info("Generated image (%d bytes)", len(data))
        key = self.store(data)
        url = self.url_for(key)
        logger.info("Stored image as %s", key)
        return PublishedImage(url=url, key=key)
