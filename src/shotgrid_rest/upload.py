"""
File uploads.

An upload is a short conversation rather than a single request:

1. ask ShotGrid where the bytes should go (the *upload info*),
2. send the bytes there,
3. tell ShotGrid the upload is complete so it links the file to the record.

Where step 2 sends the bytes depends on the *storage service* the server is
configured with. `sg` storage takes the bytes directly (with the bearer
token). `s3` storage hands out pre-signed URLs and the token must not be
sent. Only `s3` offers *multipart* uploads, where the file is sent in chunks
of at least 5 MiB, each answered with an ETag that ShotGrid needs to
reassemble the file. Multipart is required for files of 500 MiB or more.

Uploads targeting the `image` field are *thumbnail* uploads; the display name
and tags only apply to *attachment* uploads and are left out otherwise.

<https://developer.shotgridsoftware.com/rest-api/#shotgrid-rest-api-Uploading-and-Downloading-Files>
"""

from __future__ import annotations

import logging
import mimetypes
from typing import (
    TYPE_CHECKING,
    Any,
    AsyncIterable,
    AsyncIterator,
    BinaryIO,
    Dict,
    Iterable,
    List,
    Optional,
    Union,
)

from .builder import RequestBuilder
from .errors import (
    ShotgridClientError,
    ShotgridMultipartNotSupportedError,
    ShotgridTransportError,
    ShotgridUploadError,
)
from .models import Entity, NextUploadPartResponse, UploadResponse, to_json_value

if TYPE_CHECKING:
    from .session import Session

MIN_MULTIPART_CHUNK_SIZE = 5 * 1024 * 1024
MAX_MULTIPART_CHUNK_SIZE = 500 * 1024 * 1024
DEFAULT_CHUNK_SIZE = 10 * 1024 * 1024

READ_BLOCK_SIZE = 64 * 1024

STORAGE_SG = "sg"
STORAGE_S3 = "s3"
UPLOAD_TYPES = ("Attachment", "Thumbnail")

UploadContent = Union[bytes, bytearray, memoryview, BinaryIO, AsyncIterable[bytes], Iterable[bytes]]

log = logging.getLogger("shotgrid_rest.upload")


async def iter_content(content: UploadContent) -> AsyncIterator[bytes]:
    """Bytes, a binary file object or an (async) iterable of bytes, as an async stream."""
    if isinstance(content, (bytes, bytearray, memoryview)):
        if content:
            yield bytes(content)
        return
    if hasattr(content, "read"):
        while True:
            block = content.read(READ_BLOCK_SIZE)
            if not block:
                return
            yield block
    if hasattr(content, "__aiter__"):
        async for block in content:
            if block:
                yield bytes(block)
        return
    for block in content:
        if block:
            yield bytes(block)


async def iter_chunks(content: UploadContent, chunk_size: int) -> AsyncIterator[bytes]:
    """Re-slice the content into chunks of exactly `chunk_size` (the last may be short)."""
    buf = bytearray()
    async for block in iter_content(content):
        buf.extend(block)
        while len(buf) >= chunk_size:
            yield bytes(buf[:chunk_size])
            del buf[:chunk_size]
    if buf:
        yield bytes(buf)


async def read_all(content: UploadContent) -> bytes:
    return b"".join([block async for block in iter_content(content)])


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class UploadBuilder(RequestBuilder):
    """
    Configures and runs one upload; see `Session.upload()`.
    When `field` is None the file is linked to the record itself.
    """

    def __init__(
        self,
        session: "Session",
        entity: str,
        entity_id: int,
        field: Optional[str],
        filename: str,
    ):
        super().__init__(session)
        self.entity = entity
        self.entity_id = entity_id
        self.field = field
        self.filename = filename
        # ShotGrid serves the file back with this type, so guess from the name.
        self._content_type: Optional[str] = mimetypes.guess_type(filename)[0]
        self._display_name: Optional[str] = None
        self._tags: Optional[List[Entity]] = None
        self._multipart = False
        self._chunk_size = DEFAULT_CHUNK_SIZE

    def content_type(self, value: Optional[str]) -> "UploadBuilder":
        self._content_type = value
        return self

    def display_name(self, value: Optional[str]) -> "UploadBuilder":
        """Label for the attachment. Ignored for thumbnail uploads."""
        self._display_name = value
        return self

    def tags(self, value: Optional[List[Entity]]) -> "UploadBuilder":
        """Tags to link to the attachment. Ignored for thumbnail uploads."""
        self._tags = value
        return self

    def multipart(self, value: bool) -> "UploadBuilder":
        """Send the file in chunks. Only available with S3 storage."""
        self._multipart = value
        return self

    def chunk_size(self, value: int) -> "UploadBuilder":
        """
        Bytes per part for multipart uploads, between 5 MiB and 500 MiB.
        Checked when the upload starts, before any request is made.
        """
        self._chunk_size = value
        return self

    def _validate(self) -> None:
        if self._multipart and not (
            MIN_MULTIPART_CHUNK_SIZE <= self._chunk_size <= MAX_MULTIPART_CHUNK_SIZE
        ):
            raise ShotgridUploadError(
                f"Multipart chunk size must be between `{MIN_MULTIPART_CHUNK_SIZE}` "
                f"and `{MAX_MULTIPART_CHUNK_SIZE}`"
            )

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": self._content_type} if self._content_type else {}

    async def send(self, content: UploadContent) -> None:
        self._consume()
        self._validate()

        session = self._session
        client = session.client

        if self.field is None:
            init = await session.entity_upload_url_read(
                self.entity, self.entity_id, self.filename, self._multipart
            )
        else:
            init = await session.entity_field_upload_url_read(
                self.entity, self.entity_id, self.filename, self.field, self._multipart
            )

        info = init.data
        if info is None:
            raise ShotgridUploadError("Upload info missing in server response.")
        if info.upload_type not in UPLOAD_TYPES:
            raise ShotgridUploadError(f"Unexpected upload type `{info.upload_type}`.")
        storage = info.storage_service
        if self._multipart and storage != STORAGE_S3:
            raise ShotgridMultipartNotSupportedError()
        if storage not in (STORAGE_SG, STORAGE_S3):
            raise ShotgridUploadError(f"Unexpected storage service `{storage}`.")

        links = init.links
        if links is None or not links.upload:
            raise ShotgridUploadError("Upload URL missing in server response.")
        if not links.complete_upload:
            raise ShotgridUploadError("Completion URL missing in server response.")
        upload_url = links.upload
        completion_url = client.url(links.complete_upload)

        upload_info: Dict[str, Any] = to_json_value(info)
        completion_body: Dict[str, Any] = {"upload_info": upload_info, "upload_data": {}}

        extra = {"entity": self.entity, "op": "upload"}

        if storage == STORAGE_SG:
            if isinstance(content, (bytes, bytearray, memoryview)):
                stream: Any = bytes(content)
            else:
                stream = iter_content(content)
            resp = await client.request_raw(
                "PUT",
                upload_url,
                content=stream,
                headers=self._headers(),
                token=session.access_token,
                op="upload",
            )
            uploaded: UploadResponse = client.handle_response(resp, model=UploadResponse)
            if uploaded.data is None:
                raise ShotgridUploadError("Upload Response data missing in server response.")
            if uploaded.data.original_filename is not None:
                upload_info["original_filename"] = uploaded.data.original_filename
            if uploaded.data.upload_id is not None:
                upload_info["upload_id"] = uploaded.data.upload_id

        elif not self._multipart:
            body = await read_all(content)
            if len(body) > MAX_MULTIPART_CHUNK_SIZE:
                log.warning("File is larger than 500Mb. Multipart upload required.", extra=extra)
            # Pre-signed URL: the token stays home.
            resp = await client.request_raw(
                "PUT", upload_url, content=body, headers=self._headers(), op="upload"
            )
            if not _is_success(resp.status_code):
                raise ShotgridUploadError(
                    f"S3 upload failed. Storage service responded: `{resp.status_code}`"
                )

        else:
            if not links.get_next_part:
                raise ShotgridUploadError("Init response missing get_next_part key.")
            try:
                upload_info["etags"] = await self._send_parts(
                    content, upload_url, links.get_next_part
                )
            except Exception as exc:
                log.error("Multipart upload failed: %s", exc, extra=extra)
                await self._abort(completion_url, upload_info)
                raise

        if info.upload_type != "Thumbnail":
            if self._display_name is not None:
                completion_body["upload_data"]["display_name"] = self._display_name
            if self._tags is not None:
                completion_body["upload_data"]["tags"] = to_json_value(self._tags)

        await self._complete(completion_url, completion_body, upload_info)
        log.debug("upload.complete", extra=extra)

    async def _send_parts(
        self, content: UploadContent, upload_url: str, get_next_part: str
    ) -> List[str]:
        """
        PUT each chunk to storage, collecting the ETag of every part.
        After each part ShotGrid hands out the URL pair for the next one.
        """
        client = self._session.client
        etags: List[str] = []
        part = 0
        async for chunk in iter_chunks(content, self._chunk_size):
            part += 1
            resp = await client.request_raw(
                "PUT", upload_url, content=chunk, headers=self._headers(), op="upload"
            )
            if not _is_success(resp.status_code):
                raise ShotgridUploadError(
                    "Failed to upload chunk. Storage service responded: "
                    f"`{resp.status_code}`"
                )
            etag = resp.headers.get("ETag")
            if etag is None:
                raise ShotgridUploadError("Multipart upload response missing ETag header.")
            # The value keeps its surrounding double quotes; ShotGrid expects them.
            etags.append(etag)
            log.debug(
                "upload.part",
                extra={"entity": self.entity, "op": "upload", "part": part, "bytes": len(chunk)},
            )

            try:
                nxt: NextUploadPartResponse = await client.request(
                    "GET",
                    get_next_part,
                    token=self._session.access_token,
                    model=NextUploadPartResponse,
                    op="upload",
                )
            except ShotgridClientError as exc:
                raise ShotgridUploadError(
                    f"Failed to get next upload info. Cause: `{exc}`."
                ) from exc

            if nxt.links is None or not nxt.links.get_next_part:
                raise ShotgridUploadError("Get Next Part response missing get_next_part key.")
            if not nxt.links.upload:
                raise ShotgridUploadError("Get Next Part response missing upload key.")
            get_next_part = nxt.links.get_next_part
            upload_url = nxt.links.upload
        return etags

    async def _abort(self, completion_url: str, upload_info: Dict[str, Any]) -> None:
        """Best effort: failures are logged, never raised."""
        client = self._session.client
        # The server wants the upload info itself, not wrapped in `upload_info`.
        try:
            resp = await client.request_raw(
                "POST",
                f"{completion_url}/multipart_abort",
                json=upload_info,
                token=self._session.access_token,
                op="upload_abort",
            )
        except ShotgridTransportError as exc:
            log.warning("Failed to properly abort multipart upload: `%s`", exc)
            return
        if not _is_success(resp.status_code):
            log.warning(
                "Failed to properly abort multipart upload. Got status: `%s`",
                resp.status_code,
            )

    async def _complete(
        self,
        completion_url: str,
        completion_body: Dict[str, Any],
        upload_info: Dict[str, Any],
    ) -> None:
        client = self._session.client
        try:
            resp = await client.request_raw(
                "POST",
                completion_url,
                json=completion_body,
                token=self._session.access_token,
                op="upload_complete",
            )
        except ShotgridTransportError as exc:
            if not self._multipart:
                raise
            await self._abort(completion_url, upload_info)
            raise ShotgridUploadError(
                f"Failed to complete multipart upload `{exc}`. Upload aborted."
            ) from exc

        # The docs disagree on 201 versus 204; accept both.
        if resp.status_code in (201, 204):
            return

        if self._multipart:
            await self._abort(completion_url, upload_info)
            raise ShotgridUploadError(
                f"Got a bad status ({resp.status_code}) from completion endpoint. "
                "Upload aborted."
            )

        client.handle_response(resp)
        raise ShotgridUploadError(
            f"Unexpected status `{resp.status_code}` for upload complete request."
        )


__all__ = [
    "MIN_MULTIPART_CHUNK_SIZE",
    "MAX_MULTIPART_CHUNK_SIZE",
    "DEFAULT_CHUNK_SIZE",
    "UploadBuilder",
    "iter_content",
    "iter_chunks",
]
