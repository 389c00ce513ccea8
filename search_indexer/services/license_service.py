"""License classification against the SPDX license registry.

A project's license string may be a compound SPDX expression such as
"MIT OR Apache-2.0". Only its first space-delimited token is stored in
the search document and used for the open-source flag, so
"MIT OR Apache-2.0" classifies as MIT.
"""

import logging
from typing import Any, Mapping, Optional

from spdx_license_list import LICENSES

logger = logging.getLogger(__name__)


def primary_license(license_expression: str) -> str:
    """
    Return the first space-delimited token of a license expression.

    Examples:
        >>> primary_license("MIT OR Apache-2.0")
        'MIT'
        >>> primary_license("")
        ''
    """
    return license_expression.split(" ")[0]


class LicenseClassifier:
    """
    Maps SPDX license identifiers to an OSI-approved flag.

    The registry maps identifiers to entries exposing ``osi_approved``;
    it defaults to the bundled SPDX license list.
    """

    def __init__(self, registry: Optional[Mapping[str, Any]] = None) -> None:
        self._registry = LICENSES if registry is None else registry

    def is_open_source(self, license_id: str) -> bool:
        """
        Check whether a license identifier is OSI approved.

        Args:
            license_id: A single SPDX identifier, already split from any
                compound expression

        Returns:
            True iff the identifier is registered and OSI approved.
            Empty and unknown identifiers return False.
        """
        if not license_id:
            return False

        entry = self._registry.get(license_id)
        if entry is None:
            logger.debug("License %r not found in SPDX registry", license_id)
            return False
        return bool(entry.osi_approved)


# Global singleton instance
license_classifier = LicenseClassifier()
