"""Hand-written guidance for the requirements and questions inspectors examine most.

Returned verbatim: curated guidance is never reinforced or rewritten.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Optional

from .template_base import GuidanceTemplate

FAMILY = "curated"


def _t(principle: str, controls, example: str) -> GuidanceTemplate:
    return GuidanceTemplate(principle=principle, controls=tuple(controls), example_wording=example, family=FAMILY)


_CURATED = {
    'R1': _t(
        "Students treat patients only after they have been assessed as competent in the relevant skills "
        "in the pre-clinical environment.",
        [
            "Operate a gateway assessment that students must pass in simulation before being issued a clinical list.",
            "Record every pre-clinical sign-off in the electronic assessment system and block clinic access until it exists.",
            "Set and publish competency thresholds for each procedure, owned by the Programme Lead.",
            "Review gateway pass rates and progression statistics at each progression board.",
        ],
        "Before any patient contact, every student passes a gateway assessment on the phantom head for each "
        "procedure they will undertake. Sign-off is recorded in our electronic portfolio, which prevents a student "
        "being allocated to a clinic until the sign-off exists. Thresholds are set by the Programme Lead and "
        "pass rates are reviewed at each progression board.",
    ),
    'R2': _t(
        "Patients are told they may be treated by a student and their consent to this is obtained and recorded "
        "before treatment.",
        [
            "Maintain a standard operating procedure for informing patients about treatment by students.",
            "Provide patient information leaflets and clinic notices explaining student treatment.",
            "Record patient consent to student treatment in the health record for every course of treatment.",
            "Audit consent records across departments at least annually.",
        ],
        "All new patients receive a leaflet and a verbal explanation that their care will be provided by a "
        "supervised student. Their agreement is recorded in the electronic health record before the first "
        "appointment and re-confirmed when a new course of treatment starts. Consent records are audited "
        "annually in every department and the results reported to the Clinical Governance Committee.",
    ),
    'R4': _t(
        "Students are under appropriate supervision at all times, matched to the activity and their stage of "
        "development.",
        [
            "Define maximum supervisor-to-student ratios for each clinic type (for example no more than 1:4 for patient care).",
            "Publish clinic rotas that name the supervising clinician for every session.",
            "Confirm every clinical supervisor holds current GDC registration.",
            "Monitor actual ratios each term and escalate breaches to the Programme Lead.",
        ],
        "Every clinical session has a named GDC-registered supervisor recorded on the rota. Supervision ratios "
        "never exceed one supervisor to four students during patient care, with closer supervision for "
        "first-year clinical students. Actual ratios are monitored each term and any breach is escalated to the "
        "Programme Lead and reported to the Clinical Governance Committee.",
    ),
    'R7': _t(
        "Issues that may affect patient safety are identified, recorded and acted upon, with the regulator "
        "notified where necessary.",
        [
            "Run an incident reporting system open to students and staff with a no-blame culture.",
            "Escalate serious incidents to the Clinical Governance Committee without delay.",
            "Notify the GDC and other regulators of serious patient safety issues within a defined timescale.",
            "Review incident trends and resulting actions at every governance meeting.",
        ],
        "Students and staff report patient safety incidents through the online incident system, which operates "
        "on a no-blame basis. Serious incidents are escalated to the Clinical Governance Committee on the day they "
        "are reported and, where required, notified to the GDC within five working days under our Duty of Candour "
        "policy. Incident trends are reviewed at every committee meeting.",
    ),
    'R9': _t(
        "A quality management framework keeps the curriculum mapped to the latest GDC learning outcomes, with "
        "clear responsibility for this function.",
        [
            "Map the curriculum to the GDC learning outcomes and review the map annually.",
            "Assign ownership of curriculum quality to a named committee with terms of reference.",
            "Include student and patient representatives in the curriculum review.",
            "Submit material programme changes to the GDC.",
        ],
        "The Curriculum Committee, chaired by the Programme Lead and including student and patient "
        "representatives, reviews the mapping of the curriculum to the GDC learning outcomes every year. Changes "
        "arising from legislation, external guidance or examiner feedback are approved by the committee, recorded "
        "in its minutes and, where material, submitted to the GDC.",
    ),
    'R16': _t(
        "Assessment methods are fit for purpose, valid and reliable, and appropriate to the learning outcomes "
        "they assess.",
        [
            "Blueprint every assessment against the learning outcomes it covers.",
            "Use documented standard setting (for example Angoff or borderline regression) for summative assessment.",
            "Run psychometric analysis of each summative assessment and act on the findings.",
            "Calibrate assessors across sites and monitor consistency of marking.",
        ],
        "Each summative assessment is blueprinted against the learning outcomes and standard set using the "
        "Angoff method. Psychometric analysis is reviewed by the Assessment Committee after every diet, and "
        "assessors at all sites attend annual calibration so that judgements are consistent. External examiners "
        "comment on validity and reliability in their annual reports.",
    ),
    'Q6': _t(
        "The programme format shows a clear chronological structure and an explicit boundary between "
        "pre-clinical and clinical study.",
        [
            "Provide a year-by-year table of modules.",
            "Define where the pre-clinical to clinical boundary sits.",
            "Describe the use of phantom heads and simulation before live patient contact.",
        ],
        "Year 1 covers foundation sciences and early clinical observation. Year 2 introduces phantom head "
        "simulation and basic operative skills. Years 3 and 4 deliver integrated clinical practice of increasing "
        "complexity, and Year 5 prepares students for independent practice with full clinical responsibility "
        "under supervision.",
    ),
    'Q11': _t(
        "The organogram shows clear lines of accountability for academic management and clinical governance.",
        [
            "Show separate academic management and clinical governance lines.",
            "Name the external examiner oversight role.",
            "Record staffing changes since the last inspection with their impact.",
        ],
        "Our organogram runs from University Council through the Faculty to the Programme Lead, with a separate "
        "clinical governance line to the Clinical Director. External examiners report independently to the "
        "Faculty Quality Committee. Two senior lecturer posts were filled this year and no changes affected "
        "supervision capacity.",
    ),
    'Q12': _t(
        "Every clinical location is listed with its capacity, supervision arrangements and permitted procedures.",
        [
            "List each clinical site with the number of chairs available.",
            "State the supervisor-to-student ratio at each site.",
            "Specify which clinical procedures are permitted at each outreach location.",
        ],
        "Students attend the dental hospital and three outreach clinics. Each site is listed with its chair "
        "capacity, its supervision ratio of no more than one supervisor to four students, and the procedures "
        "students may carry out there. Attendance is recorded per session in the central system.",
    ),
    'Q13': _t(
        "The assessment strategy integrates formative clinical assessment with summative gateways, all "
        "standard set.",
        [
            "Describe daily formative clinical assessment and feedback.",
            "Describe summative gateway assessments and examinations.",
            "State the standard setting method used for each examination.",
        ],
        "Students receive daily formative feedback through clinical assessment forms, which feed into "
        "progression decisions alongside summative gateway assessments and end-of-year examinations. All "
        "summative assessments are standard set using the Angoff method and reviewed by the Assessment Committee.",
    ),
    'Q14': _t(
        "Every GDC learning outcome is mapped to at least one assessment point.",
        [
            "Maintain a mapping file linking each learning outcome to its assessments.",
            "Review the mapping annually for gaps.",
            "Assign ownership of the blueprint to the Assessment Lead.",
        ],
        "Our assessment blueprint links each GDC learning outcome to the assessments in which it is tested. The "
        "Assessment Lead reviews the blueprint annually, and any outcome without an assessment point is "
        "addressed before the next academic year.",
    ),
    'Q15': _t(
        "Students see an appropriate mix of patients and procedures, with auditable minimum targets.",
        [
            "Describe the patient mix strategy across disciplines.",
            "Set minimum targets for each procedure type.",
            "Monitor progress against targets through the central recording system.",
        ],
        "Patient allocation ensures every student treats cases across periodontics, prosthodontics, restorative "
        "dentistry and paediatric care. Minimum targets for each procedure type are set at the start of each year "
        "and monitored monthly through the central recording system, with additional sessions arranged where a "
        "student falls behind.",
    ),
}

CURATED_TEMPLATES: Mapping[str, GuidanceTemplate] = MappingProxyType(_CURATED)


def curated_template(item_id: str) -> Optional[GuidanceTemplate]:
    return CURATED_TEMPLATES.get(item_id)
