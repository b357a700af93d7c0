from typing import BinaryIO, NamedTuple, Optional, Union


class UploadedFile(NamedTuple):
    file_name: str
    mime_type: Optional[str]  # as sent by the client; guessed from file_name when missing
    stream: Union[BinaryIO, bytes]


class PageInput(NamedTuple):
    """What the web layer hands to ``PageRepository.save``."""

    name: str
    content: str
    id: Optional[int] = None
    attachment: Optional[UploadedFile] = None
