from __future__ import annotations
from .template_base import GuidanceTemplate

GENERIC = GuidanceTemplate(
    principle="The provider can show how this requirement is met, who is accountable for it and how it is monitored.",
    controls=(
        "Describe the operational arrangements: who does what, and when.",
        "Name the governance committee or post accountable for the requirement.",
        "Monitor compliance on a defined cycle and record the outcome.",
        "Link the narrative to specific evidence such as committee minutes or audit reports.",
    ),
    example_wording=(
        "Responsibility for this requirement sits with the Programme Lead, who reports to the Quality Committee. "
        "Arrangements are reviewed each year, the outcome is recorded in the committee minutes, and supporting "
        "evidence (policies, audit reports and minutes) is referenced in this submission."
    ),
    family="generic",
)
