"""Built-in analyzers, in the order a scan runs them."""

from sanitygate.analysis.analyzers.assets import AssetOrphanAnalyzer
from sanitygate.analysis.analyzers.base import (
    Analyzer,
    ScanContext,
    ScanLogger,
    null_scan_logger,
    stdlib_scan_logger,
)
from sanitygate.analysis.analyzers.build import BuildAnalyzer
from sanitygate.analysis.analyzers.content import ContentPatternAnalyzer
from sanitygate.analysis.analyzers.dependencies import (
    DepcheckAuditor,
    DependencyAnalyzer,
    DependencyAudit,
    VersionPinAnalyzer,
)
from sanitygate.analysis.analyzers.env import EnvVarAnalyzer
from sanitygate.analysis.analyzers.filesystem import FilesystemAnalyzer
from sanitygate.analysis.analyzers.git import GitStatusAnalyzer
from sanitygate.analysis.analyzers.licenses import LicenseAuditAnalyzer
from sanitygate.analysis.analyzers.orphans import OrphanModuleAnalyzer


def default_analyzers() -> list[Analyzer]:
    """Fresh instances of every built-in analyzer in execution order."""
    return [
        GitStatusAnalyzer(),
        FilesystemAnalyzer(),
        AssetOrphanAnalyzer(),
        DependencyAnalyzer(),
        VersionPinAnalyzer(),
        LicenseAuditAnalyzer(),
        OrphanModuleAnalyzer(),
        ContentPatternAnalyzer(),
        EnvVarAnalyzer(),
        BuildAnalyzer(),
    ]


__all__ = [
    "Analyzer",
    "AssetOrphanAnalyzer",
    "BuildAnalyzer",
    "ContentPatternAnalyzer",
    "DepcheckAuditor",
    "DependencyAnalyzer",
    "DependencyAudit",
    "EnvVarAnalyzer",
    "FilesystemAnalyzer",
    "GitStatusAnalyzer",
    "LicenseAuditAnalyzer",
    "OrphanModuleAnalyzer",
    "ScanContext",
    "ScanLogger",
    "VersionPinAnalyzer",
    "default_analyzers",
    "null_scan_logger",
    "stdlib_scan_logger",
]
