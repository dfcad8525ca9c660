# geopost/services/ledger_service.py
"""
Analytics ledger: best-effort copy of every ingested post.

`build_ledger` picks the implementation from configuration at startup:
`NullLedger` when LEDGER_ENABLED is off, `QueueLedger` (Azure Storage Queue)
otherwise. Callers never see ledger errors, see `PostPipeline.publish`.
"""
import json
import logging

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.queue import QueueClient, TextBase64EncodePolicy

from ..errors import LedgerFailed
from ..models.post import Post

logger = logging.getLogger(__name__)


def ledger_message(post_id: str, post: Post) -> str:
    return json.dumps({"id": post_id, "post": post.model_dump()})


class NullLedger:
    enabled = False

    def record(self, post_id: str, post: Post) -> None:
        logger.debug("ledger disabled, skip post_id=%s", post_id)


class QueueLedger:
    enabled = True

    def __init__(self, queue: QueueClient):
        self._queue = queue
        self._ready = False

    @classmethod
    def from_connection_string(cls, conn: str, queue_name: str, timeout: float = 20.0) -> "QueueLedger":
        qc = QueueClient.from_connection_string(
            conn,
            queue_name=queue_name,
            message_encode_policy=TextBase64EncodePolicy(),
            connection_timeout=timeout,
            read_timeout=timeout,
            retry_total=0,
        )
        return cls(qc)

    def record(self, post_id: str, post: Post) -> None:
        try:
            if not self._ready:
                # s'assure que la queue existe (idempotent)
                try:
                    self._queue.create_queue()
                except ResourceExistsError:
                    pass
                self._ready = True
            resp = self._queue.send_message(ledger_message(post_id, post))
        except AzureError as e:
            raise LedgerFailed() from e
        logger.info("post saved to ledger post_id=%s msg_id=%s", post_id, getattr(resp, "id", None))


def build_ledger(enabled: bool, conn: str | None, queue_name: str, timeout: float = 20.0):
    if not enabled:
        return NullLedger()
    if not conn:
        raise RuntimeError("LEDGER_ENABLED requires AZURE_STORAGE_CONN")
    return QueueLedger.from_connection_string(conn, queue_name, timeout=timeout)
