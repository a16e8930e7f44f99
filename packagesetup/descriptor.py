"""Package descriptor parsing.

A package descriptor (``.opm`` file) is an XML document describing one
installable package:

    <?xml version="1.0" encoding="utf-8" ?>
    <otrs_package version="1.0">
        <Name>GeneralCatalog</Name>
        <Version>6.0.30</Version>
        <Vendor>...</Vendor>
        ...
    </otrs_package>

Only the fields the setup hook and the local host need are read.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

ROOT_TAG = "otrs_package"


class DescriptorError(Exception):
    """Raised when a package descriptor cannot be parsed."""

    pass


@dataclass
class PackageDescriptor:
    """Name and version read from a package descriptor.

    Attributes:
        name: Package name.
        version: Package version string.
        vendor: Vendor, if declared.
        description: First description, if declared.
    """

    name: str
    version: str
    vendor: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        # name and version end up in file names on the host
        for label, value in (("name", self.name), ("version", self.version)):
            if "/" in value or "\\" in value or ".." in value:
                raise DescriptorError(f"Invalid package {label}: {value!r}")

    @classmethod
    def from_bytes(cls, content: bytes) -> PackageDescriptor:
        """Parse descriptor content.

        Raises:
            DescriptorError: If the content is not a package descriptor.
        """
        if not content:
            raise DescriptorError("Empty package descriptor")

        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise DescriptorError(f"Invalid package descriptor: {e}")

        if root.tag != ROOT_TAG:
            raise DescriptorError(
                f"Unexpected root element <{root.tag}>, expected <{ROOT_TAG}>"
            )

        name = _text(root, "Name")
        version = _text(root, "Version")
        if not name:
            raise DescriptorError("Package descriptor has no Name")
        if not version:
            raise DescriptorError(f"Package descriptor {name} has no Version")

        return cls(
            name=name,
            version=version,
            vendor=_text(root, "Vendor"),
            description=_text(root, "Description"),
        )

    @classmethod
    def from_file(cls, path: Path) -> PackageDescriptor:
        """Parse a descriptor file."""
        if not path.is_file():
            raise DescriptorError(f"Package descriptor not found: {path}")
        return cls.from_bytes(path.read_bytes())

    def to_bytes(self) -> bytes:
        """Render a minimal descriptor document."""
        root = ET.Element(ROOT_TAG, version="1.0")
        ET.SubElement(root, "Name").text = self.name
        ET.SubElement(root, "Version").text = self.version
        if self.vendor:
            ET.SubElement(root, "Vendor").text = self.vendor
        if self.description:
            ET.SubElement(root, "Description").text = self.description
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    @property
    def file_name(self) -> str:
        return f"{self.name}-{self.version}.opm"


def _text(root: ET.Element, tag: str) -> str | None:
    element = root.find(tag)
    if element is None or element.text is None:
        return None
    return element.text.strip() or None
