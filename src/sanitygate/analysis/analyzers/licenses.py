"""Copyleft license detection in installed packages."""

import asyncio
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sanitygate.analysis.analyzers.base import ScanContext
from sanitygate.analysis.types import Issue, IssueCategory, IssueType, Severity, issue_id

COPYLEFT_MARKERS: tuple[str, ...] = ("GPL", "AGPL", "LGPL")

# Prebuilt platform binaries that ship LGPL components but link dynamically
ALLOWED_PREFIXES: tuple[str, ...] = ("@img/sharp-",)


def list_packages(node_modules: Path) -> list[str]:
    """Installed package names, including ``@scope/name`` entries, sorted."""
    names: list[str] = []
    try:
        entries = sorted(os.scandir(node_modules), key=lambda e: e.name)
    except OSError:
        return names
    for entry in entries:
        if entry.name.startswith("."):
            continue
        if entry.name.startswith("@"):
            try:
                scoped = sorted(os.scandir(entry.path), key=lambda e: e.name)
            except OSError:
                continue
            names.extend(f"{entry.name}/{s.name}" for s in scoped if not s.name.startswith("."))
        else:
            names.append(entry.name)
    return names


def license_of(manifest: dict[str, Any]) -> str:
    """Extract a license string from a package manifest.

    Handles the SPDX string form, the ``{"type": ...}`` object form and the
    legacy ``licenses`` array.
    """
    value = manifest.get("license")
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("type"), str):
        return value["type"]
    legacy = manifest.get("licenses")
    if isinstance(legacy, list):
        types = [
            item["type"] if isinstance(item, dict) else item
            for item in legacy
            if isinstance(item, (dict, str))
        ]
        return " OR ".join(t for t in types if isinstance(t, str))
    return ""


def is_copyleft(license_name: str) -> bool:
    upper = license_name.upper()
    return any(marker in upper for marker in COPYLEFT_MARKERS)


def _read_license(manifest_path: Path) -> str | None:
    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    return license_of(data)


@dataclass
class LicenseAuditAnalyzer:
    """Flags installed packages under GPL-family licenses."""

    name: str = "licenses"
    allowed_prefixes: tuple[str, ...] = field(default=ALLOWED_PREFIXES)

    async def analyze(self, ctx: ScanContext) -> list[Issue]:
        node_modules = ctx.root / "node_modules"
        if not node_modules.is_dir():
            return []

        packages = await asyncio.to_thread(list_packages, node_modules)
        licenses = await asyncio.gather(*(
            asyncio.to_thread(_read_license, node_modules / pkg / "package.json")
            for pkg in packages
        ))

        issues: list[Issue] = []
        for pkg, lic in zip(packages, licenses, strict=True):
            if not lic or not is_copyleft(lic):
                continue
            if pkg.startswith(self.allowed_prefixes):
                continue
            issues.append(Issue(
                id=issue_id("viral-license", pkg),
                category=IssueCategory.LICENSES,
                type=IssueType.VIRAL_LICENSE,
                severity=Severity.CRITICAL,
                path=f"node_modules/{pkg}",
                message=f'Package "{pkg}" uses viral license: {lic}. May require open-sourcing your code.',
                suggested_action="review license compatibility or replace package",
            ))
        return issues
