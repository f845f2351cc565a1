import os

from starlette.responses import FileResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from forum.services.image_validator import SNIFF_LENGTH, sniff_content_type


class UploadedImageFiles(StaticFiles):
    """StaticFiles for user uploads.

    Stored filenames keep the client's extension, so a PNG uploaded as
    ``x.html`` would otherwise be served as ``text/html``. The media type is
    taken from the file's leading bytes instead of its name.
    """

    def file_response(
        self,
        full_path: str | os.PathLike,
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        if isinstance(response, FileResponse):
            with open(full_path, "rb") as fh:
                media_type = sniff_content_type(fh.read(SNIFF_LENGTH))
            response.media_type = media_type
            response.headers["content-type"] = media_type
        response.headers["x-content-type-options"] = "nosniff"
        return response
