"""Document driver: load or parse XML, resolve XIncludes, dispatch to the root reader.

Both entry points collapse every input failure (unreadable file, malformed
XML, failed XInclude, wrong document element) to ``None``. The XML tree only
lives for the duration of the call.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO, TypeVar, Union

from lxml import etree

from xsd_binding.nodes import local_name
from xsd_binding.writer import XML_DECLARATION

if TYPE_CHECKING:
    from xsd_binding.records import Record

logger = logging.getLogger(__name__)

RootT = TypeVar("RootT", bound="Record")
PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class DriverOptions:
    """Options for the XML backend.

    Attributes:
        xinclude: Process XInclude directives before reading.
        no_network: Forbid the backend from fetching network resources.
        resolve_entities: Expand entity references while parsing.
        base_url: Base URL for relative XInclude references in parsed text.
    """

    xinclude: bool = True
    no_network: bool = True
    resolve_entities: bool = True
    base_url: str | None = None

    def make_parser(self, encoding: str | None = None) -> etree.XMLParser:
        return etree.XMLParser(
            encoding=encoding,
            no_network=self.no_network,
            resolve_entities=self.resolve_entities,
        )


DEFAULT_OPTIONS = DriverOptions()


def read(
    path: PathLike,
    root_element: str,
    root_type: type[RootT],
    options: DriverOptions | None = None,
) -> RootT | None:
    """Read the record tree of the XML file at ``path``.

    Args:
        path: File to load.
        root_element: Expected local name of the document element.
        root_type: Record class of the document element.
        options: Backend options.

    Returns:
        The root record, or None if the file cannot be loaded or its
        document element is not ``root_element``.
    """
    options = options or DEFAULT_OPTIONS
    try:
        tree = etree.parse(os.fspath(path), options.make_parser())
    except (OSError, etree.XMLSyntaxError) as e:
        logger.warning("Failed to load %s: %s", path, e)
        return None
    return _dispatch(tree, root_element, root_type, options, str(path))


def parse(
    xml: str | bytes,
    root_element: str,
    root_type: type[RootT],
    options: DriverOptions | None = None,
) -> RootT | None:
    """Read the record tree of an in-memory XML document.

    Args:
        xml: Document text. ``str`` input may carry an encoding declaration.
        root_element: Expected local name of the document element.
        root_type: Record class of the document element.
        options: Backend options.

    Returns:
        The root record, or None if the text is not well-formed XML or its
        document element is not ``root_element``.
    """
    options = options or DEFAULT_OPTIONS
    encoding = None
    if isinstance(xml, str):
        # Already decoded: the declared encoding no longer describes the bytes.
        xml, encoding = xml.encode("utf-8"), "utf-8"
    try:
        root = etree.fromstring(
            xml, options.make_parser(encoding), base_url=options.base_url
        )
    except etree.XMLSyntaxError as e:
        logger.warning("Failed to parse document: %s", e)
        return None
    return _dispatch(root.getroottree(), root_element, root_type, options, "<string>")


def _dispatch(
    tree: etree._ElementTree,
    root_element: str,
    root_type: type[RootT],
    options: DriverOptions,
    source: str,
) -> RootT | None:
    if options.xinclude:
        try:
            tree.xinclude()
        except etree.XIncludeError as e:
            logger.warning("XInclude processing failed for %s: %s", source, e)
            return None

    root = tree.getroot()
    if root is None:
        return None
    name = local_name(root)
    if name != root_element:
        logger.info(
            "Document element of %s is '%s', expected '%s'", source, name, root_element
        )
        return None
    return root_type.read(root)


def write(out: TextIO, root: Record, root_element: str) -> None:
    """Write a record tree as a canonical XML document."""
    out.write(XML_DECLARATION)
    root.write(out, root_element, 0)


def dumps(root: Record, root_element: str) -> str:
    """Get the canonical XML document of a record tree."""
    out = io.StringIO()
    write(out, root, root_element)
    return out.getvalue()
