"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from .models import ResourceInfo, ResourceType


logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["name", "version", "type", "repository", "installed_location"]


def resources_to_dataframe(resources: Iterable[ResourceInfo]) -> pd.DataFrame:
    """One row per resource, list-valued fields joined into strings."""
    rows = []
    for resource in resources:
        row = resource.to_dict()
        row["tags"] = " ".join(row["tags"])
        row["dependencies"] = "; ".join(f"{name} ({info})" for name, info in row["dependencies"].items())
        for key in ("commands", "cmdlets", "dsc_resources", "functions"):
            row[key] = None if row[key] is None else ", ".join(row[key])
        rows.append(row)
    if not rows:
        return pd.DataFrame(columns=list(ResourceInfo().to_dict()))
    return pd.DataFrame(rows)


def print_summary(resources: List[ResourceInfo], error_count: int = 0) -> None:
    logger.info("=" * 60)
    logger.info("INSTALLED RESOURCES")
    logger.info("=" * 60)
    for resource in resources:
        logger.info("%-30s %-14s %s", resource.name, resource.version or "", resource.type.value)
    logger.info("-" * 60)
    logger.info("Resources found: %s", len(resources))
    logger.info("Errors reported: %s", error_count)
    logger.info("=" * 60)


def format_table(resources: List[ResourceInfo]) -> str:
    df = resources_to_dataframe(resources)
    if df.empty:
        return "No installed resources found."
    return df[SUMMARY_COLUMNS].to_string(index=False)


def save_resources_json(resources: List[ResourceInfo], output_dir: Path, stem: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / f"{stem}_resources.json"
    with open(results_file, 'w') as f:
        json.dump([resource.to_dict() for resource in resources], f, indent=2, default=str)
    return results_file


def export_resources_csv(resources: List[ResourceInfo], output_dir: Path, stem: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_file = output_dir / f"{stem}_resources.csv"
    resources_to_dataframe(resources).to_csv(csv_file, index=False)
    return csv_file


def export_worksheets(resources: List[ResourceInfo], output_dir: Path, stem: str) -> Path | None:
    if not resources:
        return None
    output_dir.mkdir(parents=True, exist_ok=True)
    excel_file = output_dir / f"{stem}_worksheets.xlsx"
    df = resources_to_dataframe(resources)
    for col in ("published_date", "installed_date", "updated_date"):
        df[col] = df[col].astype("string")
    with pd.ExcelWriter(excel_file, engine='openpyxl') as writer:
        for resource_type, sheet_name in ((ResourceType.MODULE, "Modules"), (ResourceType.SCRIPT, "Scripts")):
            sheet = df[df["type"] == resource_type.value]
            sheet.to_excel(writer, sheet_name=sheet_name, index=False)
    return excel_file
