"""Flat metadata table over registered learners.

Builds a pandas DataFrame from the learner cards of a registry and filters its
rows by installation status, task type and declared properties. Nothing here
imports a learner's package.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .learner_registry import (
    LearnerRegistry,
    get_supported_learner_properties,
    is_package_installed,
)
from ..utils.logger import get_logger


_log = get_logger("table")

TABLE_COLUMNS = ["id", "name", "short_name", "package", "properties", "note", "type", "installed"]


class ListLearners(pd.DataFrame):
    """Descriptive learner listing; prints without notes and only its head."""

    _metadata = ["print_rows"]

    print_rows = 6

    @property
    def _constructor(self):
        return ListLearners

    def __repr__(self) -> str:
        shown = pd.DataFrame(self).drop(columns=["note"], errors="ignore")
        n = int(self.print_rows)
        text = shown.head(n).to_string()
        if len(shown) > n:
            text += f"\n... ({len(shown)} rows, {shown.shape[1]} cols)"
        return text


def get_learner_table(registry: LearnerRegistry) -> pd.DataFrame:
    """Return one row of metadata per listed learner in ``registry``."""
    rows: List[Dict[str, Any]] = []
    for cl in registry.ids():
        card = registry.get(cl).card
        rows.append(
            {
                "id": card.cl,
                "name": card.name,
                "short_name": card.short_name,
                "package": card.packages,
                "properties": list(card.properties),
                "note": card.note or "",
            }
        )

    if not rows:
        return pd.DataFrame({c: pd.Series(dtype="bool" if c == "installed" else "object") for c in TABLE_COLUMNS})

    tab = pd.DataFrame(rows, columns=TABLE_COLUMNS[:6])
    tab["type"] = [cl.split(".", 1)[0] for cl in tab["id"]]

    # each package is located once
    pkgs = {p for row in tab["package"] for p in row}
    installed = {p for p in pkgs if is_package_installed(p)}
    tab["installed"] = [all(p in installed for p in row) for row in tab["package"]]

    _log.debug("Learner table: %d learners, %d installed", len(tab), int(tab["installed"].sum()))
    return tab


def filter_learner_table(
    tab: Optional[pd.DataFrame] = None,
    types: Optional[Iterable[str] | str] = None,
    properties: Iterable[str] = (),
    check_packages: bool = True,
) -> pd.DataFrame:
    """Keep rows that are installed, of one of ``types`` and have all ``properties``."""
    if tab is None:
        from .learner_registry import build_registry

        tab = get_learner_table(build_registry())

    if check_packages:
        tab = tab[tab["installed"].astype(bool)]

    if types is not None:
        types = [types] if isinstance(types, str) else list(types)
        if types:
            tab = tab[tab["type"].isin(types)]

    properties = list(properties)
    if properties:
        keep = [all(p in props for p in properties) for props in tab["properties"]]
        tab = tab[pd.Series(keep, index=tab.index, dtype=bool)]

    return tab.reset_index(drop=True)


def to_listing(tab: pd.DataFrame, print_rows: int = 6) -> ListLearners:
    """Turn a learner table into the descriptive listing.

    Packages are joined with ",", ``id`` becomes ``class`` and the property
    lists expand into one boolean column per supported property.
    """
    supported = get_supported_learner_properties()
    out = pd.DataFrame(
        {
            "class": tab["id"].tolist(),
            "name": tab["name"].tolist(),
            "short_name": tab["short_name"].tolist(),
            "package": [",".join(p) for p in tab["package"]],
            "note": tab["note"].tolist(),
            "type": tab["type"].tolist(),
            "installed": tab["installed"].astype(bool).tolist(),
        }
    )
    for prop in supported:
        out[prop] = pd.Series([prop in props for props in tab["properties"]], dtype=bool)

    listing = ListLearners(out)
    listing.print_rows = print_rows
    return listing
