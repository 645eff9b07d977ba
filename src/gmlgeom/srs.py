"""
SRS Lookup
==========
Determines the coordinate reference system name of a GML geometry node.

GML allows `srsName` to be omitted on nested geometries, in which case it is
inherited from an enclosing geometry or from the `boundedBy` envelope of a
feature. The lookup order is:

1. `srsName` on the node itself.
2. The standard SRS configured by the caller.
3. The single distinct `srsName` value of the whole document (no value at all
   means no SRS can ever be found).
4. The nearest ancestor carrying `srsName`.
5. `srsName` of the `boundedBy/Envelope` child of any ancestor.
"""
from __future__ import annotations

import logging
from typing import Optional

from lxml import etree

logger = logging.getLogger(__name__)

SRS_NAME = "srsName"


def local_name(element: etree._Element) -> str:
    """Tag name without namespace (comments and PIs give an empty string)."""
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


class SrsLookup:
    def __init__(self, standard_srs: Optional[str] = None) -> None:
        self._standard_srs = standard_srs or None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(standard_srs={self._standard_srs!r})"

    @property
    def standard_srs(self) -> Optional[str]:
        return self._standard_srs

    def determine_srs_name(self, node: etree._Element) -> Optional[str]:
        """
        Resolve the SRS name applicable to a geometry node.

        Args:
            node: A geometry element of a parsed document.

        Returns:
            The SRS name, or None if it cannot be resolved.
        """
        direct = node.get(SRS_NAME)
        if direct is not None:
            return direct
        if self._standard_srs is not None:
            return self._standard_srs

        values = set(node.getroottree().xpath("//@srsName"))
        if not values:
            return None
        if len(values) == 1:
            return str(next(iter(values)))

        # ambiguous document, look at the surroundings of the node
        logger.debug(f"Document has {len(values)} distinct srsName values, searching ancestors.")
        for ancestor in node.iterancestors():
            srs = ancestor.get(SRS_NAME)
            if srs is not None:
                return srs

        for ancestor in node.iterancestors():
            for child in ancestor:
                if local_name(child) != "boundedBy":
                    continue
                for envelope in child:
                    if local_name(envelope) == "Envelope" and envelope.get(SRS_NAME) is not None:
                        return envelope.get(SRS_NAME)
        return None
