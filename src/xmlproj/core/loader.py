"""
Document loading

The default loader reads documents from the local file system:
- resource://name   -> file next to the module defining the contract
- file:///abs/path  -> file URI
- plain paths       -> relative to the working directory
"""

import inspect
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlparse

from lxml import etree

from .errors import DocumentLoadError

logger = logging.getLogger(__name__)


class DocumentLoader:
    """
    Loads documents for XMLProjector.load() and doc_url() operations

    Subclass and override load() to fetch documents from elsewhere.
    """

    RESOURCE_SCHEME = "resource://"

    def load(
        self,
        uri: str,
        contract: type,
        parser: Optional[etree.XMLParser] = None,
        request_params: Optional[Dict[str, str]] = None,
    ) -> etree._ElementTree:
        """
        Load and parse the document at uri

        Args:
            uri: Source URI, placeholders already substituted
            contract: Contract the document is loaded for; anchors resource:// URIs
            parser: Parser to use
            request_params: Request parameters for network sources, unused by file
                sources

        Raises:
            DocumentLoadError: Unsupported scheme, missing file or malformed XML
        """
        source = self.resolve(uri, contract)
        logger.debug("Loading document %s from %s", uri, source)
        try:
            return etree.parse(str(source), parser)
        except etree.XMLSyntaxError as e:
            raise DocumentLoadError(f"Malformed document {uri}: {e}", {"uri": uri}) from e

    def resolve(self, uri: str, contract: Any) -> Path:
        if uri.startswith(self.RESOURCE_SCHEME):
            base = Path(inspect.getfile(contract)).parent
            path = base / uri[len(self.RESOURCE_SCHEME):].lstrip("/")
        elif uri.startswith("file:"):
            path = Path(unquote(urlparse(uri).path))
        elif "://" in uri:
            raise DocumentLoadError(
                f"Unsupported document source: {uri}", {"uri": uri}
            )
        else:
            path = Path(uri)

        if not path.is_file():
            raise DocumentLoadError(f"Document not found: {uri} ({path})", {"uri": uri, "path": str(path)})
        return path
