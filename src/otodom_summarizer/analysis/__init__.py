"""Description mining, reconciliation and risk scoring for listings."""

from otodom_summarizer.analysis.amounts import extract_amounts
from otodom_summarizer.analysis.policies import classify_policies
from otodom_summarizer.analysis.reconcile import ADMIN_FEE_POLICIES, get_admin_fee_policy, reconcile
from otodom_summarizer.analysis.summary import ListingAnalysis, analyze_listing

__all__ = [
    "ADMIN_FEE_POLICIES",
    "ListingAnalysis",
    "analyze_listing",
    "classify_policies",
    "extract_amounts",
    "get_admin_fee_policy",
    "reconcile",
]
