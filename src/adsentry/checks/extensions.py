"""Ad extension (asset) checks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from ..core.interfaces import ExtensionKind
from .base import MANUAL_CHECK, AuditModule
from .types import Category, Status


@dataclass
class _Tally:
    count: int = 0
    campaigns: int = 0
    ad_groups: int = 0


_REQUIRED_KINDS = (
    (ExtensionKind.SITELINK, "Sitelink Extensions", "Sitelinks",
     "Add relevant Sitelinks to improve ad visibility and CTR."),
    (ExtensionKind.CALLOUT, "Callout Extensions", "Callouts",
     "Add Callouts highlighting key benefits or features."),
)

_OPTIONAL_KINDS = (
    (ExtensionKind.STRUCTURED_SNIPPET, "Structured Snippets",
     "Ensure relevance.", "Utilize Structured Snippets where applicable."),
    (ExtensionKind.CALL, "Call Extensions",
     "Ensure number is correct.", "Add Call Extensions if receiving calls is a goal."),
    (ExtensionKind.PRICE, "Price Extensions",
     "Keep prices up-to-date.", "Use Price Extensions if relevant."),
)


class ExtensionsCheck(AuditModule):
    name = "ad_extensions"
    description = "Sitelinks, callouts, snippets, call and price assets"
    category = Category.AD_EXTENSIONS

    def run(self) -> None:
        tallies: Dict[ExtensionKind, _Tally] = {kind: _Tally() for kind in ExtensionKind}

        account_callouts = self.source.extension_count(ExtensionKind.CALLOUT)
        if account_callouts.is_ok:
            count = account_callouts.value or 0
            tallies[ExtensionKind.CALLOUT].count += count
            self.record(
                "Account Level Callouts",
                Status.INFO,
                f"{count} callout extensions found at account level.",
                "Ensure these are appropriate account-wide.",
            )
        else:
            self.record(
                "Account Level Callouts Check",
                Status.WARN,
                f"Could not check account-level callouts: {account_callouts.reason}",
                "Method might be unavailable.",
            )

        self.manual(
            "Location Extensions",
            "Verify Google Business Profile is linked at the account or campaign level in the UI "
            "(Extensions/Assets section).",
            details=MANUAL_CHECK,
        )

        campaigns_checked = 0
        evaluated = {kind: 0 for kind, _, _, _ in _REQUIRED_KINDS}
        missing = {kind: 0 for kind, _, _, _ in _REQUIRED_KINDS}
        for campaign in self.source.campaigns():
            campaigns_checked += 1
            present = {kind: False for kind in ExtensionKind}
            # a kind whose lookup was already reported cannot be called missing
            readable = {kind: True for kind in ExtensionKind}

            for kind in ExtensionKind:
                outcome = campaign.extension_count(kind)
                if not self.settle(
                    outcome,
                    "Campaign Extension Check",
                    f"{kind.value} extensions of campaign '{campaign.name}'",
                    recommendation="Check data source permissions or API changes.",
                    unavailable_recommendation="Method unavailable (likely incompatible campaign type or API change).",
                ):
                    readable[kind] = False
                    continue
                count = outcome.value or 0
                tallies[kind].count += count
                if count:
                    tallies[kind].campaigns += 1
                    present[kind] = True

            for ad_group in campaign.ad_groups():
                for kind in ExtensionKind:
                    outcome = ad_group.extension_count(kind)
                    if not self.settle(
                        outcome,
                        "AdGroup Extension Check",
                        f"{kind.value} extensions of ad group '{ad_group.name}'",
                        recommendation="Check data source permissions or API changes.",
                        unavailable_recommendation="Method unavailable.",
                    ):
                        readable[kind] = False
                        continue
                    count = outcome.value or 0
                    tallies[kind].count += count
                    if count:
                        tallies[kind].ad_groups += 1
                        present[kind] = True

            for kind, item, noun, add in _REQUIRED_KINDS:
                if not present[kind] and not readable[kind]:
                    continue
                evaluated[kind] += 1
                if not present[kind]:
                    missing[kind] += 1
                    self.record(
                        item,
                        Status.FAIL,
                        f"Campaign '{campaign.name}' appears to have no {noun} at campaign or ad group level.",
                        add,
                    )

        if campaigns_checked == 0:
            self.record("General Check", Status.INFO, "No enabled campaigns found to check for extensions.", "N/A")
        else:
            self._linked("Sitelink Extensions Linked", "Sitelinks", evaluated[ExtensionKind.SITELINK],
                         missing[ExtensionKind.SITELINK], "Ensure Sitelinks are relevant and up-to-date.")
            self._linked("Callout Extensions Linked", "Callouts", evaluated[ExtensionKind.CALLOUT],
                         missing[ExtensionKind.CALLOUT], "Ensure Callouts are relevant and compelling.")

        for kind, label in ((ExtensionKind.SITELINK, "Sitelink"), (ExtensionKind.CALLOUT, "Callout")):
            tally = tallies[kind]
            self.record(
                f"Total {label} Instances",
                Status.INFO,
                f"{tally.count} instances found across {tally.campaigns} campaigns/{tally.ad_groups} ad groups.",
                "Review relevance.",
            )
        for kind, item, keep, add in _OPTIONAL_KINDS:
            count = tallies[kind].count
            self.record(
                item,
                Status.PASS if count > 0 else Status.WARN,
                f"{count} instances found.",
                keep if count > 0 else add,
            )
        self.manual(
            "Extension Relevance & Updates",
            "Periodically review all active extensions to ensure they are still relevant, accurate, "
            "and link to working URLs (for Sitelinks).",
        )

    def _linked(self, item: str, noun: str, checked: int, missing: int, keep: str) -> None:
        if checked == 0:
            return
        if missing == 0:
            self.record(item, Status.PASS, f"All {checked} checked campaigns appear to have {noun}.", keep)
        else:
            self.record(
                item,
                Status.INFO,
                f"{checked - missing} of {checked} checked campaigns have {noun}.",
                "Add the missing extensions to the campaigns flagged above.",
            )
