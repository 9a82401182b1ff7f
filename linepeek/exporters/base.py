from __future__ import annotations

from ..core.errors import RichTextExportError
from ..core.models import Document


class ExporterPlugin:
    """
    Base class for rich-text exporters. Subclasses set NAME, EXTENSION and
    MEDIA_TYPE and implement ``serialize``. Callers go through ``export``,
    which reports every serializer failure as RichTextExportError.
    """
    NAME: str = "base"
    EXTENSION: str = "bin"
    MEDIA_TYPE: str = "application/octet-stream"

    def serialize(self, document: Document) -> bytes:
        raise NotImplementedError("serialize must be implemented in subclasses")

    def export(self, document: Document) -> bytes:
        try:
            return self.serialize(document)
        except RichTextExportError:
            raise
        except Exception as exc:
            raise RichTextExportError(f"{self.NAME} export failed: {exc}") from exc
