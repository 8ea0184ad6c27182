"""Static file read/create handlers rooted at an optional base directory."""

import errno
import logging

from request import HTTPRequest
from response import HTTPResponse, not_found, text_response
from utils import resolve_served_file

logger = logging.getLogger(__name__)

# A name the filesystem cannot hold is a file that does not exist.
_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENAMETOOLONG})


class FileStore:
    """Flat file storage under ``directory``.

    Without a directory every request is a 404 and the filesystem is never
    touched. Names that resolve outside the directory are also a 404.
    OSErrors other than the expected not-found/exists cases propagate to the
    connection driver.
    """

    def __init__(self, directory: str | None) -> None:
        self.directory = directory

    def read(self, request: HTTPRequest) -> HTTPResponse:
        if self.directory is None:
            return not_found()

        file_path = resolve_served_file(self.directory, request.segment(1))
        if file_path is None:
            return not_found()

        try:
            if not file_path.is_file():
                return not_found()
            content = file_path.read_bytes()
        except OSError as exc:
            if exc.errno in _MISSING_ERRNOS:
                return not_found()
            raise
        return text_response(content, content_type="application/octet-stream")

    def create(self, request: HTTPRequest) -> HTTPResponse:
        if self.directory is None:
            return not_found()

        file_path = resolve_served_file(self.directory, request.segment(1))
        if file_path is None:
            return not_found()

        content = request.body.encode("utf-8")
        # Existing files are never overwritten.
        try:
            with file_path.open("xb") as file_obj:
                file_obj.write(content)
        except FileExistsError:
            return not_found()
        except OSError as exc:
            if exc.errno == errno.ENAMETOOLONG:
                return not_found()
            raise

        logger.debug("Created %s (%d bytes)", file_path, len(content))
        return text_response("Created", status_code=201)
