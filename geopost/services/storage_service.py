# geopost/services/storage_service.py
import logging
import mimetypes

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContentSettings, PublicAccess

from ..errors import BlobStoreFailed

logger = logging.getLogger(__name__)


def guess_content_type(filename: str, declared: str | None = None) -> str:
    if declared and declared != "application/octet-stream":
        return declared
    return mimetypes.guess_type(filename or "")[0] or "application/octet-stream"


class BlobStore:
    """
    One object per post, named after the post id, publicly readable.
    Blocking SDK: call through run_in_threadpool from async code.
    """

    def __init__(self, service: BlobServiceClient, container: str):
        self._svc = service
        self.container = container.strip("/")
        self._public = False

    @classmethod
    def from_connection_string(cls, conn: str, container: str, timeout: float = 20.0) -> "BlobStore":
        svc = BlobServiceClient.from_connection_string(
            conn,
            connection_timeout=timeout,
            read_timeout=timeout,
        )
        return cls(svc, container)

    def _grant_public_read(self) -> None:
        # niveau "blob" : lecture anonyme des objets, pas du listing.
        # Une fois par process ; les policies stockées sont renvoyées telles quelles
        if self._public:
            return
        cc = self._svc.get_container_client(self.container)
        current = cc.get_container_access_policy()
        identifiers = {i.id: i.access_policy for i in current.get("signed_identifiers") or []}
        cc.set_container_access_policy(signed_identifiers=identifiers, public_access=PublicAccess.BLOB)
        self._public = True

    def save(self, blob_name: str, data: bytes, content_type: str) -> str:
        """
        Upload, grant public read, return the durable URL.
        overwrite=True: re-sending the same post id is idempotent.
        """
        try:
            blob = self._svc.get_blob_client(container=self.container, blob=blob_name)
            blob.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
            self._grant_public_read()
            url = blob.url
        except AzureError as e:
            logger.exception("blob upload failed name=%s", blob_name)
            raise BlobStoreFailed() from e
        logger.info("image saved to blob storage: %s", url)
        return url
