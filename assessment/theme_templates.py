from __future__ import annotations
from .template_base import GuidanceTemplate, ThemeRegistry, all_of, any_of, mentions_any, mentions_word

SUPERVISION = GuidanceTemplate(
    principle="Students are supervised appropriately for the activity and their stage of development.",
    controls=(
        "Define supervisor-to-student ratios for each clinical activity.",
        "Name the responsible supervisor for every session on the rota.",
        "Train supervisors for the role and keep the training records current.",
        "Monitor supervision arrangements each term and escalate shortfalls.",
    ),
    example_wording=(
        "Each clinical session has a named, appropriately registered supervisor and supervision ratios are set "
        "according to the activity and the students' stage of training. Ratios and supervisor training records "
        "are monitored termly and shortfalls are escalated to the Programme Lead."
    ),
    family="theme:supervision",
)

ASSESSMENT = GuidanceTemplate(
    principle="Assessment is valid, reliable and fair, and is conducted against clear criteria.",
    controls=(
        "Blueprint each assessment against the outcomes it is intended to assess.",
        "Standard set every summative assessment using a documented method.",
        "Train and calibrate examiners and assessors before they assess students.",
        "Review assessment outcomes and external examiner reports at the Assessment Committee.",
    ),
    example_wording=(
        "All assessments are blueprinted against the learning outcomes and summative assessments are standard set "
        "using a documented method. Examiners receive training and calibration, and the Assessment Committee "
        "reviews results and external examiner reports after every assessment diet."
    ),
    family="theme:assessment",
)

PATIENT_SAFETY = GuidanceTemplate(
    principle="Patient safety is paramount and risks arising from care provided by students are minimised.",
    controls=(
        "Maintain policies covering clinical safety wherever students treat patients.",
        "Record and investigate incidents and complaints, and track the resulting actions.",
        "Make students and staff aware of how to raise concerns.",
        "Report patient safety themes to the clinical governance committee.",
    ),
    example_wording=(
        "Students treat patients only in settings covered by our clinical safety policies. Incidents and "
        "complaints are logged, investigated and tracked to closure, and students and staff are briefed on how to "
        "raise concerns. Themes are reported to the Clinical Governance Committee each quarter."
    ),
    family="theme:patient-safety",
)

CURRICULUM = GuidanceTemplate(
    principle="The curriculum is managed so that it continues to map to the current learning outcomes.",
    controls=(
        "Keep an up-to-date map of the curriculum against the learning outcomes.",
        "Review the curriculum on a fixed cycle through a named committee.",
        "Record programme changes and the reasons for them.",
        "Seek student, patient and external feedback on the programme.",
    ),
    example_wording=(
        "The Curriculum Committee reviews the programme every year against the current learning outcomes, taking "
        "account of student, patient and external examiner feedback. Changes and their rationale are recorded in "
        "the committee minutes and communicated to staff and students."
    ),
    family="theme:curriculum",
)

QUALITY = GuidanceTemplate(
    principle="The programme is subject to rigorous internal and external quality assurance.",
    controls=(
        "Operate a documented quality management framework with named owners.",
        "Use external examiners and external review bodies to test standards.",
        "Log quality concerns with actions, owners and deadlines.",
        "Report quality outcomes to faculty governance at least annually.",
    ),
    example_wording=(
        "Our quality management framework sets out who is responsible for each quality activity. External "
        "examiners and review bodies report on the programme, concerns are logged with actions and deadlines, and "
        "an annual quality report is considered by faculty governance."
    ),
    family="theme:quality",
)

# Registration order is match order.
ThemeRegistry.register("supervision", mentions_any("supervis", "oversight"), SUPERVISION)
ThemeRegistry.register("assessment", mentions_any("assess", "examin"), ASSESSMENT)
ThemeRegistry.register("patient-safety",
                       all_of(mentions_any("patient"), any_of(mentions_any("safety", "care"), mentions_word("safe"))),
                       PATIENT_SAFETY)
ThemeRegistry.register("curriculum", any_of(mentions_any("curriculum", "programme"), mentions_word("program")), CURRICULUM)
ThemeRegistry.register("quality", mentions_any("quality", "standard"), QUALITY)
