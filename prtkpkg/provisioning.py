"""Read the License Entitlement ID (LEID) from a CCP ``prov.xml`` file.

CCP's "Create License File" task writes a document shaped like::

    <Provisioning version="1.0">
      <CustomOverrides leid="V7{}CreativeCloudEnt-1.0-Mac-GM" />
      ...
    </Provisioning>

Only ``/Provisioning/CustomOverrides/@leid`` is needed.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from .errors import ExtractionError

ROOT_TAG = "Provisioning"
OVERRIDES_TAG = "CustomOverrides"
LEID_ATTRIBUTE = "leid"


def read_leid(prov_path: Path) -> str:
    """Return the ``leid`` attribute of ``/Provisioning/CustomOverrides``.

    Raises :class:`ExtractionError` when the file cannot be parsed or the
    attribute is absent or empty.
    """
    error = ExtractionError(f"Error reading LEID from {prov_path}.")
    try:
        root = ET.parse(prov_path).getroot()
    except (ET.ParseError, OSError) as exc:
        raise error from exc

    if root.tag != ROOT_TAG:
        raise error
    overrides = root.find(OVERRIDES_TAG)
    leid = overrides.get(LEID_ATTRIBUTE, "").strip() if overrides is not None else ""
    if not leid:
        raise error
    return leid


__all__ = ["read_leid"]
