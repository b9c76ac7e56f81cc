"""Usage counting, report building and upload."""

from pocketusage.usage.anonymize import anonymized_user
from pocketusage.usage.models import (
    ReportDocument,
    SiteGroup,
    StatEntry,
    UpdateSite,
    UsageRecord,
)
from pocketusage.usage.protocol import Identifiable, Locatable, SiteResolver
from pocketusage.usage.report import ReportBuilder, build_report
from pocketusage.usage.scheduler import UsageUploadService
from pocketusage.usage.service import OPERATION_EXECUTED, UsageService
from pocketusage.usage.sites import PrefixSiteResolver, location_to_path
from pocketusage.usage.uploader import ReportUploader

__all__ = [
    "OPERATION_EXECUTED",
    "Identifiable",
    "Locatable",
    "PrefixSiteResolver",
    "ReportBuilder",
    "ReportDocument",
    "ReportUploader",
    "SiteGroup",
    "SiteResolver",
    "StatEntry",
    "UpdateSite",
    "UsageRecord",
    "UsageService",
    "UsageUploadService",
    "anonymized_user",
    "build_report",
    "location_to_path",
]
