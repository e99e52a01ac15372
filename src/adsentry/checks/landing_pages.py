"""Landing page checks: HTTPS usage and broken links on a sample of final URLs."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List

from .base import MANUAL_CHECK, AuditModule
from .types import Category, Finding, Status

logger = logging.getLogger(__name__)

LINKED_AD_TYPES = frozenset({"RESPONSIVE_SEARCH_AD", "EXPANDED_TEXT_AD"})

_MANUAL_ITEMS = (
    ("Mobile-Friendly Check", MANUAL_CHECK,
     "Use Google's Mobile-Friendly Test tool for reliable checks. Ensure pages are responsive."),
    ("Landing Page Alignment", "Manual Review Required",
     "Ensure landing page content is highly relevant to the ad copy and keywords that trigger the ad."),
    ("Headlines & CTAs on Page", "Manual Review Required",
     "Verify landing pages have clear headlines, compelling value propositions, and strong calls-to-action."),
    ("Page Load Speed", MANUAL_CHECK,
     "Use Google PageSpeed Insights or similar tools to test landing page load times on desktop and mobile. "
     "Optimize images, code, and server response time."),
    ("Keyword Incorporation", "Manual Review Required",
     "Check if relevant keywords are naturally incorporated into landing page headlines and copy."),
)


@dataclass(frozen=True)
class UrlSample:
    url: str
    context: str


class LandingPagesCheck(AuditModule):
    name = "landing_pages"
    description = "HTTPS and HTTP status of a sample of ad and keyword final URLs"
    category = Category.LANDING_PAGES
    enabled_flag = "check_landing_pages"
    skipped_item = "Landing Page Checks"

    def skip(self, reason: str) -> Finding:
        if not self.config.check_landing_pages:
            reason = "Landing page checks are disabled in configuration (check_landing_pages = false)."
        return self.record(self.skipped_item, Status.SKIPPED, reason, "Enable in configuration if needed.")

    def _candidate_urls(self) -> Iterator[UrlSample]:
        # ads first, then keywords
        for campaign in self.source.campaigns():
            for ad_group in campaign.ad_groups():
                for ad in ad_group.ads():
                    if ad.ad_type.upper() not in LINKED_AD_TYPES:
                        continue
                    url = ad.final_url()
                    if url.is_ok and url.value:
                        yield UrlSample(url.value, f"Ad in AG: {ad_group.name}")
                    else:
                        self.settle(url, "Final URL Check", f"ad {ad.id} in ad group '{ad_group.name}'")
        for campaign in self.source.campaigns():
            for ad_group in campaign.ad_groups():
                for keyword in ad_group.keywords():
                    # keywords without their own URL inherit the ad's
                    url = keyword.final_url()
                    if url.is_ok and url.value:
                        yield UrlSample(url.value, f"Keyword '{keyword.text}' in AG: {ad_group.name}")
                    elif not url.is_unavailable:
                        self.settle(url, "Final URL Check", f"keyword '{keyword.text}' in ad group '{ad_group.name}'")

    def sample(self) -> List[UrlSample]:
        """Unique URLs in discovery order, capped at the configured sample size."""
        limit = self.config.landing_page_sample_size
        seen = set()
        picked: List[UrlSample] = []
        for candidate in self._candidate_urls():
            if candidate.url in seen:
                continue
            seen.add(candidate.url)
            picked.append(candidate)
            if len(picked) >= limit:
                break
        return picked

    def run(self) -> None:
        probe = self.context.url_probe
        if probe is None:
            self.record(
                "URL Fetch Check",
                Status.ERROR,
                "No URL probe is available.",
                "Cannot perform broken link checks.",
            )

        self.record(
            "Sitelink URL Check",
            Status.INFO,
            "Manual check recommended for Sitelink URLs.",
            "Verify links within Sitelink extensions in the UI.",
        )

        samples = self.sample()
        logger.debug("Checking %d unique landing page URLs", len(samples))
        insecure = 0
        broken = 0
        unprobed = 0
        probe_note = ""
        for sample in self.context.pacer.pace(samples):
            where = f"URL '{sample.url}' (Context: {sample.context})"
            if not sample.url.lower().startswith("https://"):
                insecure += 1
                self.record(
                    "Secure URLs (HTTPS)",
                    Status.FAIL,
                    f"{where} is not HTTPS.",
                    "Update landing page URL to use HTTPS for security and user trust.",
                )
            if probe is None:
                continue
            response = probe.probe(sample.url)
            if response.is_unavailable:
                unprobed += 1
                probe_note = response.reason
            elif not response.is_ok:
                broken += 1
                self.record(
                    "URL Fetch Error",
                    Status.WARN,
                    f"Could not fetch {where}: {response.reason}",
                    "Verify the page loads correctly. Could be a temporary issue, redirect loop, or probe limitation.",
                )
            elif response.value is not None and response.value >= 400:
                broken += 1
                self.record(
                    "Potential Broken Link",
                    Status.FAIL,
                    f"{where} returned HTTP status code: {response.value}",
                    "Verify the page loads correctly. Check for typos or server issues.",
                )

        if samples:
            if insecure == 0:
                self.record(
                    "Secure URLs (HTTPS)",
                    Status.PASS,
                    f"All {len(samples)} checked unique URLs use HTTPS.",
                    "Maintain HTTPS for all landing pages.",
                )
            if unprobed:
                self.record(
                    "Broken Links Check",
                    Status.INFO,
                    f"HTTP status not checked for {unprobed} of {len(samples)} unique URLs: {probe_note}",
                    "Verify these landing pages load correctly.",
                )
            elif probe is not None and broken == 0:
                self.record(
                    "Broken Links Check",
                    Status.PASS,
                    f"No potentially broken links found among {len(samples)} checked unique URLs "
                    "(based on HTTP status).",
                    "Continue monitoring links.",
                )
        else:
            self.record(
                "General Check",
                Status.INFO,
                "No unique Final URLs found in checked ads/keywords or checking was disabled/limited.",
                "Ensure ads/keywords have valid final URLs.",
            )

        for item, details, recommendation in _MANUAL_ITEMS:
            self.record(item, Status.INFO, details, recommendation)
