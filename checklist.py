"""Static checklist configuration.

A checklist fixes the cardinality of the canonical questionnaire (how many
question and requirement slots exist), the requirement texts and evidence
examples, and the template phrases used to strip boilerplate. The default
is the GDC "Standards for Education" pre-inspection questionnaire: 15
questions and 21 requirements grouped in 3 standards.

Changing a cardinality is a new checklist *version*; ``load_checklist``
refuses files whose declared counts disagree with their content instead of
padding or truncating.
"""
import dataclasses
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from models import Requirement, Standard

logger = logging.getLogger(__name__)

ATTACH_EVIDENCE_PATTERN = r"attach\s+evidence"

# Template phrases that end a prompt in the questionnaire form. Order matters:
# each one cuts the narrative after its last occurrence.
BOILERPLATE_MARKERS: Tuple[str, ...] = (
    "how these plans assure you that the requirement is/will be met",
    "prior to treating patients Describe, in detail, your plans",
    "patient care commencing Describe, in detail, your plans",
    "shadowing)",
    "not applicable",
    "intake",
    "each year of study",
    "involvement and role",
    "undertaken at each",
    "last monitoring form",
    "leads to GDC registration",
    "awarding body",
    "qualification",
    "Provider Name",
)

GDC_QUESTION_TITLES: Tuple[str, ...] = (
    "Provider name",
    "Full title of qualification",
    "Lead institution delivering the course",
    "Awarding body of the qualification",
    "Duration of the course",
    "Format of the programme",
    "Programme lead and senior registrant",
    "Annual student intake",
    "Current student numbers",
    "Other qualifications that lead to GDC registration",
    "Organogram and staffing changes",
    "Clinical locations and attendance",
    "Assessment and delivery strategy",
    "Blueprinting / mapping of assessment to GDC outcomes",
    "Anything further to know about this programme",
)

GDC_EXTRACTION_ONLY_QUESTIONS = frozenset({"Q1", "Q2", "Q3", "Q4", "Q7", "Q10"})
GDC_PRIORITY_REQUIREMENTS = frozenset({"R1", "R4", "R7", "R9", "R16"})

# (id, name, description, [(req id, title, description, [evidence examples])])
_GDC_STANDARDS: List[Tuple[int, str, str, List[Tuple[int, str, str, List[str]]]]] = [
    (1, "Protecting Patients",
     "Providers must be aware of their duty to protect the public. Providers must ensure that patient safety "
     "is paramount and care of patients is of an appropriate standard. Any risk to the safety of patients and "
     "their care by students must be minimised.",
     [
         (1, "Student Competency for Patient Care",
          "Students must provide patient care only when they have demonstrated adequate knowledge and skills. "
          "For clinical procedures, the student should be assessed as competent in the relevant skills at the "
          "levels required in the pre-clinical environments prior to treating patients.",
          ["Relevant policy and procedures", "Timetable of assessments",
           "Details of clinical and technical gateway assessments", "Student sign off records",
           "Student progression statistics", "Student portfolio", "Self-assessment forms", "Handbooks",
           "Student evaluation and reflection documentation"]),
         (2, "Patient Information and Consent",
          "Providers must have systems in place to inform patients that they may be treated by students and the "
          "possible implications of this. Patient agreement to treatment by a student must be obtained and "
          "recorded prior to treatment commencing.",
          ["Policy on communicating treatment by students to patients", "Evidence of student training in this area",
           "Examples of leaflets, letters and consent forms", "Notices in the clinical environment",
           "Examples of recorded consent across departments"]),
         (3, "Safe Clinical Environment",
          "Students must only provide patient care in an environment which is safe and appropriate. The provider "
          "must comply with relevant legislation and requirements regarding patient care, including equality and "
          "diversity, wherever treatment takes place.",
          ["Policies on clinical and workplace safety", "Equality and diversity policies",
           "Governance and/or systems regulator reports", "Audit reports", "Incident logs and actions taken",
           "Minutes of relevant committee meetings", "Records of complaints and how they were addressed"]),
         (4, "Appropriate Supervision",
          "When providing patient care and services, providers must ensure that students are supervised "
          "appropriately according to the activity and the student's stage of development.",
          ["Policy and procedures for supervision of students", "Staff to student ratios across departments/clinics",
           "Records showing who is supervising each clinic"]),
         (5, "Qualified Supervisors",
          "Supervisors must be appropriately qualified and trained. This should include training in equality and "
          "diversity legislation relevant for the role. Clinical supervisors must have appropriate general or "
          "specialist registration with a UK regulatory body.",
          ["Relevant policy and procedures", "Records of supervisor training and induction",
           "Equality and diversity training records", "Evidence of registration including UK registration numbers",
           "Timetable showing supervisor allocation"]),
         (6, "Raising Concerns and Candour",
          "Providers must ensure that students and all those involved in the delivery of education and training "
          "are aware of their obligation to raise concerns if they identify any risks to patient safety and the "
          "need for candour when things go wrong.",
          ["Relevant policy and procedures", "Student and staff training regarding candour and raising concerns",
           "Communication mechanisms", "Records of concerns raised and actions taken",
           "Surveys of staff and students"]),
         (7, "Patient Safety Systems",
          "Systems must be in place to identify and record issues that may affect patient safety. Should a "
          "patient safety issue arise, appropriate action must be taken by the provider and where necessary the "
          "relevant regulatory body should be notified.",
          ["Policies outlining systems in place", "Process maps", "Incident logs and records of actions taken",
           "Reporting and recording systems for serious incidents", "Evidence of notification of regulatory body"]),
         (8, "Student Fitness to Practise",
          "Providers must have a student fitness to practise policy and apply it as required. The content and "
          "significance of the student fitness to practise procedures must be conveyed to students and aligned to "
          "GDC Student Fitness to Practise Guidance.",
          ["Student fitness to practise policy and procedures", "Method of communication to staff and students",
           "Details of student fitness to practise cases",
           "Documentation showing where Standards for the Dental Team is embedded"]),
     ]),
    (2, "Quality Evaluation and Review of the Programme",
     "The provider must have in place effective policy and procedures for the monitoring and review of the "
     "programme.",
     [
         (9, "Quality Management Framework",
          "The provider must have a framework in place that details how it manages the quality of the programme "
          "which includes making appropriate changes to ensure the curriculum continues to map across to the "
          "latest GDC learning outcomes.",
          ["Relevant policy, procedures and documentation", "Review policy and timeline",
           "Use of multisource feedback including patient feedback", "Changes to the programme submitted to the GDC"]),
         (10, "Addressing Quality Concerns",
          "Any concerns identified through the operation of the quality management framework, including internal "
          "and external reports relating to quality, must be addressed as soon as possible and the GDC notified "
          "of serious threats to students achieving the learning outcomes.",
          ["Relevant policy and procedures including escalation process", "Whistleblowing policy",
           "Minutes from committees responsible for programme review", "Audit reports",
           "Risk log with solutions and actions taken", "Evidence of past notifications to the GDC"]),
         (11, "Internal and External Quality Assurance",
          "Programmes must be subject to rigorous internal and external quality assurance procedures. External "
          "quality assurance should include the use of external examiners, who should be familiar with the GDC "
          "learning outcomes.",
          ["Relevant policy and procedures", "Information on external review bodies (QAA, Ofqual)",
           "External examiner reports", "Internal verification reports",
           "Patient/customer feedback forms and actions taken"]),
         (12, "Placement Quality Assurance",
          "The provider must have effective systems in place to quality assure placements where students deliver "
          "treatment to ensure that patient care and student assessment across all locations meets these "
          "Standards.",
          ["Relevant policy and procedures for placement QA", "Feedback from staff, patients and students",
           "Audit reports", "Monitoring reports from provider and placement providers"]),
     ]),
    (3, "Student Assessment",
     "Assessment must be reliable and valid. The choice of assessment method must be appropriate to demonstrate "
     "achievement of the GDC learning outcomes. Assessors must be fit to perform the assessment task.",
     [
         (13, "Demonstration of Learning Outcomes",
          "To award the qualification, providers must be assured that students have demonstrated attainment "
          "across the full range of learning outcomes, and that they are fit to practise at the level of a safe "
          "beginner.",
          ["Assessment strategy for the programme", "Assessment timetable",
           "Assessment records/central recording system", "Student portfolio",
           "Student progression policy and statistics", "Minutes of progression boards"]),
         (14, "Assessment Management Systems",
          "The provider must have in place effective management systems to plan, monitor and centrally record "
          "the assessment of students, including the monitoring of clinical and/or technical experience.",
          ["Central recording and monitoring system", "Relevant policy and procedures", "External examiner reports",
           "Records of student clinical experience", "Minutes of assessment planning meetings"]),
         (15, "Breadth of Clinical Experience",
          "Students must have exposure to an appropriate breadth of patients and procedures and should undertake "
          "each activity relating to patient care on sufficient occasions.",
          ["Relevant policy and procedures", "Summary of individual students' clinical experience",
           "Central recording system", "Clinical treatment records", "Competency sign off policy and procedures"]),
         (16, "Assessment Validity and Reliability",
          "Providers must demonstrate that assessments are fit for purpose and deliver results which are valid "
          "and reliable. The methods of assessment used must be appropriate to the learning outcomes.",
          ["Mapping and description of assessments", "Remit and minutes of responsible committees",
           "Internal programme review process", "External examiner feedback",
           "Psychometric analysis of assessments"]),
         (17, "Multi-source Feedback",
          "Assessment must utilise feedback collected from a variety of sources, which should include other "
          "members of the dental team, peers, patients and/or customers.",
          ["Relevant policy and procedures", "Feedback forms for patients and colleagues",
           "Patient/peer/customer comments", "Relevant assessment records", "Records showing continuous assessment"]),
         (18, "Feedback and Reflection",
          "The provider must support students to improve their performance by providing regular feedback and by "
          "encouraging students to reflect on their practice.",
          ["Student portfolio", "Relevant training in reflection and receiving feedback", "Evidence of reflection",
           "Evidence of mentoring sessions and feedback"]),
         (19, "Examiner Qualifications",
          "Examiners/assessors must have appropriate skills, experience and training to undertake the task of "
          "assessment, including appropriate general or specialist registration with a UK regulatory body.",
          ["List of assessors showing qualifications and registration",
           "Evidence of training specific to student assessment", "Recruitment and appointment policy",
           "Assessor calibration training", "External examiner reports"]),
         (20, "External Examiner Reporting",
          "Providers must ask external examiners to report on the extent to which assessment processes are "
          "rigorous, set at the correct standard, ensure equity of treatment for students and have been fairly "
          "conducted.",
          ["External examiners reports", "Records showing responses to external examiner input",
           "Documentation and training provided to external examiners", "External examiner role profile"]),
         (21, "Fair Assessment and Standard Setting",
          "Assessment must be fair and undertaken against clear criteria. The standard expected of students in "
          "each area to be assessed must be clear and students and staff involved in assessment must be aware of "
          "this standard.",
          ["Marking/assessment criteria and guidance", "Standard setting procedures",
           "Evidence of the range of assessors used", "Arrangements for failed candidates", "Appeals process",
           "Student and staff handbooks"]),
     ]),
]

# Full requirement wording as printed in the questionnaire form (longer than the
# summary descriptions above for R1, R6, R8, R9, R11-R16, R19-R21).
GDC_CANONICAL_REQUIREMENT_TEXTS: Tuple[str, ...] = (
    "Students will provide patient care only when they have demonstrated adequate knowledge and skills. For "
    "clinical procedures, the student should be assessed as competent in the relevant skills at the levels "
    "required in the pre-clinical environments prior to treating patients.",
    "Providers must have systems in place to inform patients that they may be treated by students and the "
    "possible implications of this. Patient agreement to treatment by a student must be obtained and recorded "
    "prior to treatment commencing.",
    "Students must only provide patient care in an environment which is safe and appropriate. The provider must "
    "comply with relevant legislation and requirements regarding patient care, including equality and diversity, "
    "wherever treatment takes place.",
    "When providing patient care and services, providers must ensure that students are supervised appropriately "
    "according to the activity and the student's stage of development.",
    "Supervisors must be appropriately qualified and trained. This should include training in equality and "
    "diversity legislation relevant for the role. Clinical supervisors must have appropriate general or "
    "specialist registration with a UK regulatory body.",
    "Providers must ensure that students and all those involved in the delivery of education and training are "
    "aware of their obligation to raise concerns if they identify any risks to patient safety and the need for "
    "candour when things go wrong. Providers should publish policies so that it is clear to all parties how "
    "concerns should be raised and how these concerns will be acted upon. Providers must support those who do "
    "raise concerns and provide assurance that staff and students will not be penalised for doing so.",
    "Systems must be in place to identify and record issues that may affect patient safety. Should a patient "
    "safety issue arise, appropriate action must be taken by the provider and where necessary the relevant "
    "regulatory body should be notified.",
    "Providers must have a student fitness to practise policy and apply as required. The content and "
    "significance of the student fitness to practise procedures must be conveyed to students and aligned to GDC "
    "Student Fitness to Practise Guidance. Staff involved in the delivery of the programme should be familiar "
    "with the GDC Student Fitness to Practise Guidance. Providers must also ensure the GDC's Standards for the "
    "Dental Team are embedded within student training.",
    "The provider will have a framework in place that details how it manages the quality of the programme which "
    "includes making appropriate changes to ensure the curriculum continues to map across to the latest GDC "
    "outcomes and adapts to changing legislation and external guidance. There must be a clear statement about "
    "where responsibility lies for this function.",
    "Any concerns identified through the operation of the Quality Management framework, including internal and "
    "external reports relating to quality, must be addressed as soon as possible and the GDC notified of serious "
    "threats to students achieving the learning outcomes.",
    "Programmes must be subject to rigorous internal and external quality assurance procedures. External quality "
    "assurance should include the use of external examiners, who should be familiar with the GDC learning "
    "outcomes and their context and QAA guidelines should be followed where applicable. Patient and/or customer "
    "feedback must be collected and used to inform programme development.",
    "The provider must have effective systems in place to quality assure placements where students deliver "
    "treatment to ensure that patient care and student assessment across all locations meets these Standards. "
    "The quality assurance systems should include the regular collection of student and patient feedback "
    "relating to placements.",
    "To award the qualification, providers must be assured that students have demonstrated attainment across "
    "the full range of learning outcomes, and that they are fit to practise at the level of a safe beginner. "
    "Evidence must be provided that demonstrates this assurance, which should be supported by a coherent "
    "approach to the principles of assessment referred to in these standards.",
    "The provider must have in place effective management systems to plan, monitor and centrally record the "
    "assessment of students, including the monitoring of clinical and/or technical experience, throughout the "
    "programme against each of the learning outcomes.",
    "Students must have exposure to an appropriate breadth of patients and procedures and should undertake each "
    "activity relating to patient care on sufficient occasions to enable them to develop the skills and the "
    "level of competency to achieve the relevant learning outcomes.",
    "Providers must demonstrate that assessments are fit for purpose and deliver results which are valid and "
    "reliable. The methods of assessment used must be appropriate to the learning outcomes, in line with current "
    "and best practice and be routinely monitored, quality assured and developed.",
    "Assessment must utilise feedback collected from a variety of sources, which should include other members "
    "of the dental team, peers, patients and/or customers.",
    "The provider must support students to improve their performance by providing regular feedback and by "
    "encouraging students to reflect on their practise.",
    "Examiners/assessors must have appropriate skills, experience and training to undertake the task of "
    "assessment, including appropriate general or specialist registration with a UK regulatory body. "
    "Examiners/assessors should have received training in equality and diversity relevant for their role.",
    "Providers must ask external examiners to report on the extent to which assessment processes are rigorous, "
    "set at the correct standard, ensure equity of treatment for students and have been fairly conducted. The "
    "responsibilities of the external examiners must be clearly documented.",
    "Assessment must be fair and undertaken against clear criteria. The standard expected of students in each "
    "area to be assessed must be clear and students and staff involved in assessment must be aware of this "
    "standard. An appropriate standard setting process must be employed for summative assessments.",
)


class ChecklistConfigError(ValueError):
    """Raised when a checklist definition is inconsistent."""


@dataclasses.dataclass(frozen=True)
class ChecklistConfig:
    name: str
    version: str
    standards: Tuple[Standard, ...]
    question_titles: Tuple[str, ...]
    canonical_requirement_texts: Tuple[str, ...]
    extraction_only_questions: FrozenSet[str] = frozenset()
    priority_requirements: FrozenSet[str] = frozenset()
    boilerplate_markers: Tuple[str, ...] = BOILERPLATE_MARKERS
    attach_evidence_pattern: str = ATTACH_EVIDENCE_PATTERN

    def __post_init__(self):
        _validate(self)

    @property
    def requirements(self) -> Tuple[Requirement, ...]:
        return tuple(r for s in self.standards for r in s.requirements)

    @property
    def question_count(self) -> int:
        return len(self.question_titles)

    @property
    def requirement_count(self) -> int:
        return len(self.canonical_requirement_texts)

    @property
    def question_ids(self) -> List[str]:
        return [f"Q{i}" for i in range(1, self.question_count + 1)]

    @property
    def requirement_ids(self) -> List[str]:
        return [f"R{i}" for i in range(1, self.requirement_count + 1)]

    def requirement_by_id(self, req_id: int) -> Optional[Requirement]:
        return next((r for r in self.requirements if r.id == req_id), None)

    def question_type(self, question_id: str) -> str:
        return "extraction" if question_id in self.extraction_only_questions else "analysis"


def _validate(cfg: ChecklistConfig) -> None:
    reqs = cfg.requirements
    ids = [r.id for r in reqs]
    if len(set(ids)) != len(ids):
        raise ChecklistConfigError(f"Checklist {cfg.name} v{cfg.version}: duplicate requirement ids")
    if sorted(ids) != list(range(1, len(ids) + 1)):
        raise ChecklistConfigError(
            f"Checklist {cfg.name} v{cfg.version}: requirement ids must run 1..{len(ids)}, got {sorted(ids)}")
    if len(ids) != cfg.requirement_count:
        raise ChecklistConfigError(
            f"Checklist {cfg.name} v{cfg.version}: {len(ids)} requirements but "
            f"{cfg.requirement_count} canonical requirement texts")
    out_of_range = [q for q in cfg.extraction_only_questions if q not in cfg.question_ids]
    if out_of_range:
        raise ChecklistConfigError(f"Unknown extraction-only question ids: {sorted(out_of_range)}")
    out_of_range = [r for r in cfg.priority_requirements if r not in cfg.requirement_ids]
    if out_of_range:
        raise ChecklistConfigError(f"Unknown priority requirement ids: {sorted(out_of_range)}")
    try:
        re.compile(cfg.attach_evidence_pattern)
    except re.error as e:
        raise ChecklistConfigError(f"Invalid attach_evidence_pattern: {e}") from e


def _build_standards(raw: List[Tuple[int, str, str, List[Tuple[int, str, str, List[str]]]]]) -> Tuple[Standard, ...]:
    standards = []
    for sid, name, desc, reqs in raw:
        requirements = tuple(
            Requirement(id=rid, standard=sid, title=title, description=rdesc, evidence_examples=tuple(examples))
            for rid, title, rdesc, examples in reqs
        )
        standards.append(Standard(id=sid, name=name, description=desc, requirements=requirements))
    return tuple(standards)


def default_checklist() -> ChecklistConfig:
    """GDC Standards for Education pre-inspection questionnaire."""
    return ChecklistConfig(
        name="GDC Standards for Education",
        version="1",
        standards=_build_standards(_GDC_STANDARDS),
        question_titles=GDC_QUESTION_TITLES,
        canonical_requirement_texts=GDC_CANONICAL_REQUIREMENT_TEXTS,
        extraction_only_questions=GDC_EXTRACTION_ONLY_QUESTIONS,
        priority_requirements=GDC_PRIORITY_REQUIREMENTS,
    )


DEFAULT_CHECKLIST = default_checklist()


def checklist_from_dict(data: Dict[str, Any]) -> ChecklistConfig:
    """Build a checklist from its JSON form.

    Expected keys: ``name``, ``version``, ``standards`` (each with
    ``id``, ``name``, ``description``, ``requirements``), ``questions`` (list of
    titles). Optional: ``question_count`` / ``requirement_count`` (declared
    cardinalities, checked), ``canonical_requirement_texts`` (defaults to each
    requirement's description), ``extraction_only_questions``,
    ``priority_requirements``, ``boilerplate_markers``, ``attach_evidence_pattern``.
    """
    if not isinstance(data, dict):
        raise ChecklistConfigError("Checklist definition must be a JSON object")
    try:
        raw_standards = []
        for s in data["standards"]:
            reqs = [
                (int(r["id"]), r["title"], r.get("description", ""), list(r.get("evidence_examples", [])))
                for r in s.get("requirements", [])
            ]
            raw_standards.append((int(s["id"]), s["name"], s.get("description", ""), reqs))
        questions = tuple(data["questions"])
    except (KeyError, TypeError, ValueError) as e:
        raise ChecklistConfigError(f"Malformed checklist definition: {e}") from e

    standards = _build_standards(raw_standards)
    requirements = sorted((r for s in standards for r in s.requirements), key=lambda r: r.id)
    texts = data.get("canonical_requirement_texts")
    if texts is None:
        texts = [r.description for r in requirements]

    declared_q = data.get("question_count")
    if declared_q is not None and int(declared_q) != len(questions):
        raise ChecklistConfigError(
            f"question_count is {declared_q} but {len(questions)} questions are defined; "
            "bump the checklist version instead of padding or truncating")
    declared_r = data.get("requirement_count")
    if declared_r is not None and int(declared_r) != len(texts):
        raise ChecklistConfigError(
            f"requirement_count is {declared_r} but {len(texts)} requirement texts are defined; "
            "bump the checklist version instead of padding or truncating")

    return ChecklistConfig(
        name=data.get("name", "custom"),
        version=str(data.get("version", "1")),
        standards=standards,
        question_titles=questions,
        canonical_requirement_texts=tuple(texts),
        extraction_only_questions=frozenset(data.get("extraction_only_questions", [])),
        priority_requirements=frozenset(data.get("priority_requirements", [])),
        boilerplate_markers=tuple(data.get("boilerplate_markers", BOILERPLATE_MARKERS)),
        attach_evidence_pattern=data.get("attach_evidence_pattern", ATTACH_EVIDENCE_PATTERN),
    )


def load_checklist(path: Union[str, Path]) -> ChecklistConfig:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ChecklistConfigError(f"Checklist file {path} is not valid JSON: {e}") from e
    cfg = checklist_from_dict(data)
    logger.info("Loaded checklist %s v%s (%d questions, %d requirements) from %s",
                cfg.name, cfg.version, cfg.question_count, cfg.requirement_count, path)
    return cfg
